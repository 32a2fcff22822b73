from thriftsy.models.wishlist import WishlistItem
from thriftsy.services.product_service import ProductService
from thriftsy.extensions import db


class WishlistService:
    @staticmethod
    def list_product_ids(user_id: int):
        rows = (
            WishlistItem.query.filter_by(user_id=user_id)
            .order_by(WishlistItem.created_at.desc(), WishlistItem.id.desc())
            .all()
        )
        return [row.product_id for row in rows]

    @staticmethod
    def add(user_id: int, product_id: int) -> bool:
        """Add a product; adding it twice is a no-op. Returns True when added."""
        ProductService.get_product(product_id)
        if WishlistItem.query.filter_by(user_id=user_id, product_id=product_id).first():
            return False
        WishlistItem(user_id=user_id, product_id=product_id).save()
        return True

    @staticmethod
    def remove(user_id: int, product_id: int) -> bool:
        removed = WishlistItem.query.filter_by(user_id=user_id, product_id=product_id).delete()
        db.session.commit()
        return bool(removed)
