from thriftsy.models.base import BaseModel
from thriftsy.extensions import db


class Category(BaseModel):
    """Category model"""
    __tablename__ = 'categories'

    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False, index=True)
    parent_id = db.Column(
        db.Integer, db.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True
    )

    # Relationships
    products = db.relationship('Product', backref='category_ref', lazy='dynamic')
