"""
WTForms forms for every request the API accepts.

The forms are fed ``formdata`` built from the request object (see
``validation.check``), never a browser post, so CSRF is not involved.
"""
from datetime import datetime, timezone
from decimal import Decimal

from wtforms import BooleanField, DateTimeField, DecimalField, Form, IntegerField, StringField
from wtforms.validators import (
    AnyOf,
    DataRequired,
    Email,
    InputRequired,
    Length,
    NumberRange,
    Optional,
    Regexp,
    URL,
    ValidationError,
)

from .entities import ORDER_STATUSES

DATETIME_FORMATS = [
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
]
FALSE_VALUES = ("false", "0", "")

MAX_CART_QUANTITY = 1000
MAX_COUPON_DISCOUNT = Decimal("100000")


def strip(value):
    return value.strip() if isinstance(value, str) else value


def naive_utc(value):
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class MoneyField(DecimalField):
    """DecimalField that refuses NaN and infinities."""

    def process_formdata(self, valuelist):
        super().process_formdata(valuelist)
        if self.data is not None and not self.data.is_finite():
            self.data = None
            raise ValueError(self.gettext("Not a valid decimal value."))


def text(*validators):
    return StringField(validators=list(validators), filters=[strip])


def timestamp(*validators):
    return DateTimeField(validators=list(validators), format=DATETIME_FORMATS, filters=[naive_utc])


def flag():
    return BooleanField(false_values=FALSE_VALUES)


def status_choice(*validators):
    return text(*validators, AnyOf(ORDER_STATUSES, message=f"Must be one of: {', '.join(ORDER_STATUSES)}."))


class ApiForm(Form):
    class Meta:
        csrf = False


# Cart and orders
class AddToCartForm(ApiForm):
    variant_id = IntegerField(validators=[InputRequired(), NumberRange(min=1)])
    quantity = IntegerField(validators=[InputRequired(), NumberRange(min=1, max=MAX_CART_QUANTITY)])


class UpdateCartItemForm(ApiForm):
    variant_id = IntegerField(validators=[InputRequired(), NumberRange(min=1)])
    quantity = IntegerField(validators=[InputRequired(), NumberRange(min=0, max=MAX_CART_QUANTITY)])


class CreateOrderForm(ApiForm):
    shipping_address = text(DataRequired(), Length(min=10, max=500))
    payment_method = text(Optional(), Length(max=50))
    note = text(Optional(), Length(max=500))
    coupon_code = text(Optional(), Length(max=50))


class OrderStatusForm(ApiForm):
    status = status_choice(DataRequired())


class OrderFilterForm(ApiForm):
    status = status_choice(Optional())
    user_id = IntegerField(validators=[Optional(), NumberRange(min=1)])
    from_date = timestamp(Optional())
    to_date = timestamp(Optional())


# Coupons
class CouponForm(ApiForm):
    """All fields optional; ``CreateCouponForm`` makes them required."""
    code = text(
        Optional(),
        Length(min=3, max=50),
        Regexp(r"^[A-Z0-9_-]+$", message="Only upper-case letters, digits, '_' and '-' are allowed."),
    )
    discount_value = MoneyField(validators=[Optional(), NumberRange(min=Decimal("0.01"), max=MAX_COUPON_DISCOUNT)])
    start_date = timestamp(Optional())
    end_date = timestamp(Optional())
    is_active = flag()

    def validate_end_date(self, field):
        if self.start_date.data and field.data and self.start_date.data > field.data:
            raise ValidationError("Must not be before start_date.")


class CreateCouponForm(CouponForm):
    code = text(
        DataRequired(),
        Length(min=3, max=50),
        Regexp(r"^[A-Z0-9_-]+$", message="Only upper-case letters, digits, '_' and '-' are allowed."),
    )
    discount_value = MoneyField(
        validators=[InputRequired(), NumberRange(min=Decimal("0.01"), max=MAX_COUPON_DISCOUNT)]
    )
    start_date = timestamp(InputRequired())
    end_date = timestamp(InputRequired())


class CouponCodeForm(ApiForm):
    code = text(DataRequired(), Length(max=50))


class CalculateDiscountForm(CouponCodeForm):
    order_amount = MoneyField(validators=[InputRequired(), NumberRange(min=Decimal("0.01"))])


# Reviews and addresses
class CreateReviewForm(ApiForm):
    product_id = IntegerField(validators=[InputRequired(), NumberRange(min=1)])
    rating = IntegerField(validators=[InputRequired(), NumberRange(min=1, max=5)])
    comment = text(Optional(), Length(max=1000))


class UpdateReviewForm(ApiForm):
    rating = IntegerField(validators=[Optional(), NumberRange(min=1, max=5)])
    comment = text(Optional(), Length(max=1000))


class ReviewFilterForm(ApiForm):
    product_id = IntegerField(validators=[Optional(), NumberRange(min=1)])
    user_id = IntegerField(validators=[Optional(), NumberRange(min=1)])
    min_rating = IntegerField(validators=[Optional(), NumberRange(min=1, max=5)])
    max_rating = IntegerField(validators=[Optional(), NumberRange(min=1, max=5)])


class UpdateAddressForm(ApiForm):
    address_line = text(Optional(), Length(min=10, max=500))
    is_default = flag()


class CreateAddressForm(UpdateAddressForm):
    address_line = text(DataRequired(), Length(min=10, max=500))


# Catalog
class UpdateCategoryForm(ApiForm):
    name = text(Optional(), Length(min=2, max=100))
    parent_id = IntegerField(validators=[Optional(), NumberRange(min=1)])


class CreateCategoryForm(UpdateCategoryForm):
    name = text(DataRequired(), Length(min=2, max=100))


class UpdateProductForm(ApiForm):
    name = text(Optional(), Length(min=2, max=200))
    category_id = IntegerField(validators=[Optional(), NumberRange(min=1)])
    description = text(Optional(), Length(max=2000))
    image_url = text(
        Optional(),
        Regexp(r"^https?://", message="Must be an http(s) URL."),
        URL(message="Must be an http(s) URL."),
    )
    supplier_name = text(Optional(), Length(max=100))
    is_active = flag()


class CreateProductForm(UpdateProductForm):
    name = text(DataRequired(), Length(min=2, max=200))


class ProductFilterForm(ApiForm):
    category_id = IntegerField(validators=[Optional(), NumberRange(min=1)])
    min_price = MoneyField(validators=[Optional(), NumberRange(min=0)])
    max_price = MoneyField(validators=[Optional(), NumberRange(min=0)])


class UpdateVariantForm(ApiForm):
    name = text(Optional(), Length(max=100))
    price = MoneyField(validators=[Optional(), NumberRange(min=Decimal("0.01"))])
    stock_quantity = IntegerField(validators=[Optional(), NumberRange(min=0)])
    is_active = flag()


class CreateVariantForm(UpdateVariantForm):
    product_id = IntegerField(validators=[InputRequired(), NumberRange(min=1)])
    price = MoneyField(validators=[InputRequired(), NumberRange(min=Decimal("0.01"))])


class UpdateStockForm(ApiForm):
    quantity = IntegerField(validators=[InputRequired(), NumberRange(min=1)])


# Users
class UpdateUserForm(ApiForm):
    full_name = text(Optional(), Length(min=2, max=100))
    email = text(Optional(), Length(max=255), Email(message="Not a valid e-mail address."))
    phone = text(Optional(), Length(max=20))
    address = text(Optional(), Length(max=500))
    role = text(Optional(), Length(max=50))
    is_active = flag()


class CreateUserForm(ApiForm):
    full_name = text(DataRequired(), Length(min=2, max=100))
    username = text(
        DataRequired(),
        Length(min=3, max=30),
        Regexp(r"^[A-Za-z0-9_]+$", message="Only letters, digits and '_' are allowed."),
    )
    password = text(DataRequired(), Length(min=6, max=100))
    email = text(Optional(), Length(max=255), Email(message="Not a valid e-mail address."))
    phone = text(Optional(), Length(max=20))
    address = text(Optional(), Length(max=500))
    role = text(Optional(), Length(max=50))


class ChangePasswordForm(ApiForm):
    current_password = text(DataRequired())
    new_password = text(DataRequired(), Length(min=6, max=100))
