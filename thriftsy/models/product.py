from thriftsy.models.base import BaseModel, enum_type
from thriftsy.extensions import db
from thriftsy.enums import ProductStatus


class Product(BaseModel):
    __tablename__ = "products"

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    category_id = db.Column(
        db.Integer,
        db.ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    title = db.Column(db.String(255), nullable=False, index=True)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    original_price = db.Column(db.Numeric(12, 2))
    brand = db.Column(db.String(100))
    category = db.Column(db.String(50))
    size = db.Column(db.String(50))
    condition = db.Column(db.String(50))
    location = db.Column(db.String(100))
    phone = db.Column(db.String(20))
    image = db.Column(db.String(500))
    status = db.Column(
        enum_type(ProductStatus, "product_statuses"),
        nullable=False,
        default=ProductStatus.UNSOLD,
        index=True,
    )

    # Relationships
    images = db.relationship(
        "ProductImage",
        backref="product",
        order_by="ProductImage.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_available(self) -> bool:
        return self.status == ProductStatus.UNSOLD

    def to_dict(self):
        data = super().to_dict()
        data["images"] = [img.image_url for img in self.images]
        seller = self.seller
        data["seller"] = seller.name if seller else None
        data["is_verified_seller"] = bool(seller and seller.is_verified_seller)
        return data


class ProductImage(BaseModel):
    __tablename__ = "product_images"

    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url = db.Column(db.String(500), nullable=False)
