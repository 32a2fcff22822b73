import logging

from thriftsy.models.product import Product, ProductImage
from thriftsy.models.category import Category
from thriftsy.models.user import User
from thriftsy.extensions import db
from thriftsy.enums import ProductStatus
from thriftsy.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from thriftsy.utils.helpers import slugify
from thriftsy.utils.uploads import delete_files

logger = logging.getLogger(__name__)


class ProductService:
    """Product catalogue and the product lifecycle status"""

    @staticmethod
    def _category_for(name):
        """Category row for a free-text category, created on first use"""
        slug = slugify(name)
        if not slug:
            return None
        category = Category.query.filter_by(slug=slug).first()
        if not category:
            category = Category(name=name.strip(), slug=slug)
            db.session.add(category)
            db.session.flush()
        return category

    @staticmethod
    def create_product(seller_id: int, fields: dict, image_urls=None) -> Product:
        """Create a product with its images in one transaction"""
        image_urls = list(image_urls or [])
        try:
            product = Product(user_id=seller_id, status=ProductStatus.UNSOLD, **fields)
            if fields.get("category"):
                product.category_ref = ProductService._category_for(fields["category"])
            if image_urls:
                product.image = image_urls[0]
                product.images = [ProductImage(image_url=url) for url in image_urls]

            db.session.add(product)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Product {product.id} created by seller {seller_id}")
        return product

    @staticmethod
    def get_product(product_id: int) -> Product:
        product = db.session.get(Product, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def list_categories():
        return Category.query.order_by(Category.name.asc()).all()

    @staticmethod
    def list_products(verified_only=False, seller_id=None, status=None, search=None,
                      category_id=None):
        query = Product.query

        if verified_only:
            query = query.join(User, Product.user_id == User.id).filter(
                User.is_verified_seller.is_(True)
            )
        if seller_id:
            query = query.filter(Product.user_id == seller_id)
        if category_id:
            query = query.filter(Product.category_id == category_id)
        if status:
            try:
                query = query.filter(Product.status == ProductStatus(status))
            except ValueError:
                raise ValidationError(f"Unknown product status: {status}")
        if search:
            query = query.filter(Product.title.contains(search))

        return query.order_by(Product.created_at.desc(), Product.id.desc()).all()

    @staticmethod
    def get_owned_product(product_id: int, seller_id: int) -> Product:
        product = ProductService.get_product(product_id)
        if product.user_id != seller_id:
            raise ForbiddenError("Not the owner of this product")
        return product

    @staticmethod
    def update_product(product_id: int, seller_id: int, fields: dict, image_urls=None) -> Product:
        """Update a product (owner only). New images replace the old set."""
        product = ProductService.get_owned_product(product_id, seller_id)

        old_urls = []
        try:
            for key, value in fields.items():
                setattr(product, key, value)
            if "category" in fields:
                product.category_ref = ProductService._category_for(fields["category"])
            if image_urls:
                old_urls = [img.image_url for img in product.images]
                product.images = [ProductImage(image_url=url) for url in image_urls]
                product.image = image_urls[0]
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        delete_files(old_urls)
        return product

    @staticmethod
    def delete_product(product_id: int, actor: User):
        """Delete a product and its images (owner or admin)"""
        product = ProductService.get_product(product_id)
        if product.user_id != actor.id and not actor.is_admin:
            raise ForbiddenError("Not the owner of this product")

        urls = [img.image_url for img in product.images]
        product.delete()
        delete_files(urls)
        logger.info(f"Product {product_id} deleted by user {actor.id}")

    # --- lifecycle status ---

    @staticmethod
    def reserve(product_id: int) -> None:
        """unsold -> order_received as a single guarded UPDATE.

        Zero affected rows means another order got there first (or the
        product is already sold). Does not commit.
        """
        updated = (
            Product.query.filter(
                Product.id == product_id,
                Product.status == ProductStatus.UNSOLD,
            )
            .update({Product.status: ProductStatus.ORDER_RECEIVED})
        )
        if updated == 0:
            raise ConflictError(f"Product {product_id} is no longer available")

    @staticmethod
    def _transition_for_order(order, from_status, to_status) -> int:
        product_ids = order.product_ids()
        if not product_ids:
            return 0
        return (
            Product.query.filter(
                Product.id.in_(product_ids),
                Product.status == from_status,
            )
            .update({Product.status: to_status})
        )

    @staticmethod
    def release_for_order(order) -> int:
        """Return the order's still-reserved products to sale. Does not commit."""
        return ProductService._transition_for_order(
            order, ProductStatus.ORDER_RECEIVED, ProductStatus.UNSOLD
        )

    @staticmethod
    def mark_sold_for_order(order) -> int:
        """Mark the order's reserved products sold. Does not commit."""
        return ProductService._transition_for_order(
            order, ProductStatus.ORDER_RECEIVED, ProductStatus.SOLD
        )

    @staticmethod
    def set_status(product_id: int, status: str) -> Product:
        """Admin override of the lifecycle status"""
        product = ProductService.get_product(product_id)
        try:
            product.status = ProductStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown product status: {status}")
        db.session.commit()
        return product
