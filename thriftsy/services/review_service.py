from sqlalchemy import func

from thriftsy.models.review import Review
from thriftsy.services.product_service import ProductService
from thriftsy.extensions import db


class ReviewService:
    @staticmethod
    def list_for_product(product_id: int) -> dict:
        reviews = (
            Review.query.filter_by(product_id=product_id)
            .order_by(Review.id.desc())
            .all()
        )
        avg_rating, count = (
            db.session.query(func.coalesce(func.avg(Review.rating), 0), func.count(Review.id))
            .filter(Review.product_id == product_id)
            .one()
        )
        return {
            "reviews": [r.to_dict() for r in reviews],
            "avgRating": float(avg_rating or 0),
            "count": int(count or 0),
        }

    @staticmethod
    def submit(user_id: int, product_id: int, rating: int, comment: str = None):
        """One review per user per product; re-submitting replaces it.

        Returns ``(review, created)``.
        """
        ProductService.get_product(product_id)
        review = Review.query.filter_by(product_id=product_id, user_id=user_id).first()
        created = review is None
        if created:
            review = Review(product_id=product_id, user_id=user_id)
            db.session.add(review)
        review.rating = rating
        review.comment = comment
        db.session.commit()
        return review, created
