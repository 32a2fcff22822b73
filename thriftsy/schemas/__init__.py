from decimal import Decimal
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE, pre_load
from thriftsy.enums import (
    UserRole,
    OrderStatus,
    PaymentStatus,
    ProductStatus,
    values,
)


class BaseSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class SignupSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True)
    password = fields.Str(required=True, validate=validate.Length(min=6))
    phone = fields.Str(validate=validate.Length(max=20))


class SigninSchema(BaseSchema):
    email = fields.Email(required=True)
    password = fields.Str(required=True)


class ProfileUpdateSchema(BaseSchema):
    name = fields.Str(validate=validate.Length(min=1, max=100))
    phone = fields.Str(allow_none=True, validate=validate.Length(max=20))


class ChangePasswordSchema(BaseSchema):
    current_password = fields.Str(required=True, data_key="currentPassword")
    new_password = fields.Str(
        required=True, data_key="newPassword", validate=validate.Length(min=6)
    )

    @pre_load
    def accept_old_password(self, data, **kwargs):
        # older clients send oldPassword
        if "currentPassword" not in data and "oldPassword" in data:
            data = dict(data, currentPassword=data["oldPassword"])
        return data


class ProductSchema(BaseSchema):
    title = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    price = fields.Decimal(required=True, places=2, validate=validate.Range(min=0))
    original_price = fields.Decimal(
        places=2, allow_none=True, data_key="originalPrice", validate=validate.Range(min=0)
    )
    brand = fields.Str(validate=validate.Length(max=100))
    category = fields.Str(validate=validate.Length(max=50))
    size = fields.Str(validate=validate.Length(max=50))
    condition = fields.Str(data_key="productCondition", validate=validate.Length(max=50))
    location = fields.Str(validate=validate.Length(max=100))
    phone = fields.Str(validate=validate.Length(max=20))

    @pre_load
    def drop_blank_fields(self, data, **kwargs):
        # multipart forms send empty strings for untouched inputs
        return {k: v for k, v in data.items() if v not in ("", None)}


class ProductUpdateSchema(ProductSchema):
    title = fields.Str(validate=validate.Length(min=1, max=255))
    price = fields.Decimal(places=2, validate=validate.Range(min=0))


class ProductStatusSchema(BaseSchema):
    status = fields.Str(required=True, validate=validate.OneOf(values(ProductStatus)))


class ShippingAddressSchema(BaseSchema):
    name = fields.Str(validate=validate.Length(max=100))
    phone = fields.Str(validate=validate.Length(max=20))
    address = fields.Str(validate=validate.Length(max=255))
    city = fields.Str(validate=validate.Length(max=100))


class OrderItemSchema(BaseSchema):
    product_id = fields.Int(data_key="productId", allow_none=True, load_default=None)
    title = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    price = fields.Decimal(required=True, places=2, validate=validate.Range(min=0))
    quantity = fields.Int(load_default=1, validate=validate.Range(min=1))

    @pre_load
    def accept_name_as_title(self, data, **kwargs):
        if isinstance(data, dict) and "title" not in data and "name" in data:
            data = dict(data, title=data["name"])
        return data


class OrderCreateSchema(BaseSchema):
    items = fields.List(
        fields.Nested(OrderItemSchema), required=True, validate=validate.Length(min=1)
    )
    subtotal = fields.Decimal(required=True, places=2, validate=validate.Range(min=0))
    tax = fields.Decimal(load_default=Decimal("0"), places=2, validate=validate.Range(min=0))
    shipping = fields.Decimal(load_default=Decimal("0"), places=2, validate=validate.Range(min=0))
    total = fields.Decimal(required=True, places=2, validate=validate.Range(min=0))
    payment_method = fields.Str(
        data_key="paymentMethod", allow_none=True, validate=validate.Length(max=50)
    )
    payment_status = fields.Str(
        data_key="paymentStatus",
        load_default=PaymentStatus.PENDING.value,
        validate=validate.OneOf(values(PaymentStatus)),
    )
    shipping_address = fields.Nested(
        ShippingAddressSchema, data_key="shippingAddress", load_default=dict
    )


class OrderUpdateSchema(BaseSchema):
    status = fields.Str(validate=validate.OneOf(values(OrderStatus)))
    payment_status = fields.Str(
        data_key="paymentStatus", validate=validate.OneOf(values(PaymentStatus))
    )

    @validates_schema
    def require_one_field(self, data, **kwargs):
        if not data:
            raise ValidationError("status or paymentStatus is required")


class RoleUpdateSchema(BaseSchema):
    role = fields.Str(required=True, validate=validate.OneOf(values(UserRole)))


class WishlistSchema(BaseSchema):
    product_id = fields.Int(required=True, data_key="productId", validate=validate.Range(min=1))


class MessageReplySchema(BaseSchema):
    product_id = fields.Int(required=True, data_key="productId", validate=validate.Range(min=1))
    to_user_id = fields.Int(required=True, data_key="toUserId", validate=validate.Range(min=1))
    content = fields.Str(required=True, validate=validate.Length(min=1))


class MarkReadSchema(BaseSchema):
    ids = fields.List(fields.Int(), load_default=list)


class VerificationApplySchema(BaseSchema):
    shop_name = fields.Str(validate=validate.Length(max=150))


class VerificationDecisionSchema(BaseSchema):
    notes = fields.Str(allow_none=True)
    tier = fields.Str(allow_none=True, validate=validate.Length(max=50))


class FeedbackSchema(BaseSchema):
    order_id = fields.Int(required=True, data_key="orderId", validate=validate.Range(min=1))
    seller_id = fields.Int(data_key="sellerId", allow_none=True, load_default=None)
    as_described = fields.Bool(load_default=True)
    rating = fields.Int(allow_none=True, load_default=None)
    comment = fields.Str(allow_none=True, load_default=None)


class ReviewSchema(BaseSchema):
    product_id = fields.Int(required=True, data_key="productId", validate=validate.Range(min=1))
    rating = fields.Int(required=True, validate=validate.Range(min=1, max=5))
    comment = fields.Str(allow_none=True, load_default=None)
