from thriftsy.extensions import db
from datetime import datetime, timezone
from decimal import Decimal


def utcnow():
    return datetime.now(timezone.utc)


class BaseModel(db.Model):
    """Base model with common fields and methods"""

    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    def save(self):
        """Save instance to database"""
        db.session.add(self)
        db.session.commit()
        return self

    def delete(self):
        """Delete instance from database"""
        db.session.delete(self)
        db.session.commit()

    def to_dict(self):
        """Convert model to dictionary"""
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, datetime):
                result[column.name] = value.isoformat()
            elif isinstance(value, Decimal):
                result[column.name] = float(value)
            elif hasattr(value, "value"):
                result[column.name] = value.value
            else:
                result[column.name] = value
        return result


class TimestampMixin:
    """Adds an updated_at column refreshed on every update"""

    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


def enum_type(enum_cls, name):
    """Enum column type persisting the member values rather than names"""
    return db.Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
