"""
Persistence records, one dataclass per table.

Records hold foreign-key ids only; related rows are fetched explicitly by the
repositories. ``from_row`` normalises driver output (SQLite returns text for
timestamps and ints for booleans) so services always see Python types.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, ClassVar, Mapping

ORDER_STATUSES = ("Pending", "Confirmed", "Processing", "Shipped", "Delivered", "Cancelled")
PENDING = "Pending"
DELIVERED = "Delivered"
CANCELLED = "Cancelled"

CENT = Decimal("0.01")


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every timestamp column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_money(value: Any) -> Decimal:
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class Record:
    """Row <-> dataclass conversion shared by all tables."""
    money_fields: ClassVar[tuple[str, ...]] = ()
    datetime_fields: ClassVar[tuple[str, ...]] = ()
    bool_fields: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def from_row(cls, row: Mapping[str, Any]):
        values = {}
        for f in fields(cls):  # type: ignore[arg-type]
            if f.name not in row:
                continue
            value = row[f.name]
            if f.name in cls.money_fields:
                value = to_money(value)
            elif f.name in cls.datetime_fields:
                value = to_datetime(value)
            elif f.name in cls.bool_fields:
                value = bool(value)
            values[f.name] = value
        return cls(**values)

    def to_row(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}  # type: ignore[arg-type]


@dataclass
class Role(Record):
    name: str = ""
    id: int | None = None


@dataclass
class User(Record):
    bool_fields = ("is_active",)
    datetime_fields = ("created_at",)

    full_name: str = ""
    username: str = ""
    password_hash: str = ""
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    role_id: int | None = None
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    id: int | None = None


@dataclass
class Category(Record):
    name: str = ""
    parent_id: int | None = None
    id: int | None = None


@dataclass
class Product(Record):
    bool_fields = ("is_active",)
    datetime_fields = ("created_at",)

    name: str = ""
    category_id: int | None = None
    description: str | None = None
    image_url: str | None = None
    supplier_name: str | None = None
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    id: int | None = None


@dataclass
class ProductVariant(Record):
    money_fields = ("price",)
    bool_fields = ("is_active",)

    product_id: int = 0
    name: str | None = None
    price: Decimal = Decimal("0.00")
    stock_quantity: int = 0
    is_active: bool = True
    id: int | None = None


@dataclass
class CartItem(Record):
    user_id: int = 0
    variant_id: int = 0
    quantity: int = 1
    id: int | None = None


@dataclass
class Coupon(Record):
    money_fields = ("discount_value",)
    datetime_fields = ("start_date", "end_date")
    bool_fields = ("is_active",)

    code: str = ""
    discount_value: Decimal = Decimal("0.00")
    start_date: datetime = field(default_factory=utcnow)
    end_date: datetime = field(default_factory=utcnow)
    is_active: bool = True
    id: int | None = None

    def is_valid(self, now: datetime | None = None) -> bool:
        now = now or utcnow()
        return self.is_active and self.start_date <= now <= self.end_date


@dataclass
class Order(Record):
    money_fields = ("total_amount", "shipping_fee")
    datetime_fields = ("order_date",)

    user_id: int = 0
    order_date: datetime = field(default_factory=utcnow)
    shipping_address: str | None = None
    total_amount: Decimal = Decimal("0.00")
    shipping_fee: Decimal = Decimal("0.00")
    status: str = PENDING
    payment_method: str | None = None
    note: str | None = None
    coupon_id: int | None = None
    id: int | None = None


@dataclass
class OrderDetail(Record):
    money_fields = ("unit_price",)

    order_id: int = 0
    variant_id: int = 0
    quantity: int = 1
    unit_price: Decimal = Decimal("0.00")
    id: int | None = None


@dataclass
class Review(Record):
    datetime_fields = ("created_at",)

    user_id: int = 0
    product_id: int = 0
    rating: int = 5
    comment: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    id: int | None = None


@dataclass
class UserAddress(Record):
    bool_fields = ("is_default",)

    user_id: int = 0
    address_line: str | None = None
    is_default: bool = False
    id: int | None = None
