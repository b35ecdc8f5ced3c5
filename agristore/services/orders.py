from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional

from agristore.models import mapping
from agristore.models.dtos import (
    CreateOrderRequest,
    DailyStatisticsDto,
    OrderDto,
    OrderFilterParams,
    PagedResult,
    PaginationParams,
    UpdateOrderStatusRequest,
)
from agristore.models.entities import CANCELLED, DELIVERED, PENDING, Order, OrderDetail, to_money, utcnow
from agristore.models.validation import (
    ensure_valid,
    validate_create_order,
    validate_order_filter,
    validate_order_status,
)
from agristore.repositories import UnitOfWork
from agristore.utils.exceptions import BadRequestError
from agristore.utils.logging import get_logger

log = get_logger(__name__)

CART_EMPTY_MESSAGE = "Cart is empty"


class OrderService:
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def create_order(self, user_id: int, dto: CreateOrderRequest) -> OrderDto:
        """
        Turn the user's cart into a Pending order inside one transaction.

        The subtotal uses the variant prices at this instant and each order
        line keeps that price as its unit price. A supplied coupon code that
        is unknown or not currently valid is ignored. The discount is a flat
        amount and is not capped at the subtotal. Stock is left untouched.
        """
        ensure_valid(validate_create_order(dto))
        now = utcnow()

        with self.uow.transaction():
            items = self.uow.cart_items.get_by_user(user_id)
            if not items:
                raise BadRequestError(CART_EMPTY_MESSAGE)

            variants = self.uow.variants.get_by_ids(item.variant_id for item in items)
            subtotal = sum((variants[item.variant_id].price * item.quantity for item in items), Decimal("0"))

            coupon_id = None
            discount = Decimal("0")
            if dto.coupon_code:
                coupon = self.uow.coupons.get_by_code(dto.coupon_code)
                if coupon is not None and coupon.is_valid(now):
                    coupon_id = coupon.id
                    discount = coupon.discount_value

            order = self.uow.orders.add(Order(
                user_id=user_id,
                order_date=now,
                shipping_address=dto.shipping_address,
                total_amount=to_money(subtotal - discount),
                shipping_fee=to_money(0),
                status=PENDING,
                payment_method=dto.payment_method,
                note=dto.note,
                coupon_id=coupon_id,
            ))
            for item in items:
                self.uow.order_details.add(OrderDetail(
                    order_id=order.id,
                    variant_id=item.variant_id,
                    quantity=item.quantity,
                    unit_price=variants[item.variant_id].price,
                ))
            self.uow.cart_items.clear(user_id)

        log.info("Order %s created for user %s: subtotal=%s discount=%s total=%s",
                 order.id, user_id, to_money(subtotal), to_money(discount), order.total_amount)
        return self._to_dto(order)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def _to_dto(self, order: Order) -> OrderDto:
        details = self.uow.order_details.get_by_order(order.id)
        variants = self.uow.variants.get_by_ids(d.variant_id for d in details)
        products = {
            pid: self.uow.products.get_by_id(pid)
            for pid in {v.product_id for v in variants.values()}
        }
        detail_dtos = []
        for detail in details:
            variant = variants.get(detail.variant_id)
            product = products.get(variant.product_id) if variant else None
            detail_dtos.append(mapping.order_detail_to_dto(detail, variant, product))
        coupon = self.uow.coupons.get_by_id(order.coupon_id) if order.coupon_id else None
        return mapping.order_to_dto(order, detail_dtos, coupon.code if coupon else None)

    def get_order(self, order_id: int) -> Optional[OrderDto]:
        order = self.uow.orders.get_by_id(order_id)
        return self._to_dto(order) if order else None

    def get_orders(self, params: OrderFilterParams) -> PagedResult:
        ensure_valid(validate_order_filter(params))
        orders, total = self.uow.orders.filter(
            status=params.status,
            user_id=params.user_id,
            from_date=params.from_date,
            to_date=params.to_date,
            sort_by=params.sort_by,
            sort_desc=params.sort_desc,
            page_number=params.page_number,
            page_size=params.page_size,
        )
        return mapping.paged([self._to_dto(o) for o in orders], total, params)

    def get_orders_by_user(self, user_id: int, params: PaginationParams) -> PagedResult:
        orders, total = self.uow.orders.filter(
            status=None, user_id=user_id, from_date=None, to_date=None,
            sort_by="order_date", sort_desc=True,
            page_number=params.page_number, page_size=params.page_size,
        )
        return mapping.paged([self._to_dto(o) for o in orders], total, params)

    def get_orders_by_status(self, status: str) -> List[OrderDto]:
        return [self._to_dto(o) for o in self.uow.orders.get_by_status(status)]

    # ------------------------------------------------------------------
    # Status changes
    # ------------------------------------------------------------------
    def update_order_status(self, order_id: int, dto: UpdateOrderStatusRequest) -> bool:
        ensure_valid(validate_order_status(dto))
        order = self.uow.orders.get_by_id(order_id)
        if order is None:
            return False
        previous, order.status = order.status, dto.status
        self.uow.orders.update(order, "status")
        log.info("Order %s status %s -> %s", order_id, previous, order.status)
        return True

    def cancel_order(self, order_id: int) -> bool:
        """Only Pending orders can be cancelled."""
        order = self.uow.orders.get_by_id(order_id)
        if order is None:
            return False
        if order.status != PENDING:
            log.warning("Refusing to cancel order %s in status %s", order_id, order.status)
            return False
        order.status = CANCELLED
        self.uow.orders.update(order, "status")
        log.info("Order %s cancelled", order_id)
        return True

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def get_total_revenue(self, from_date: Optional[datetime] = None,
                          to_date: Optional[datetime] = None) -> Decimal:
        return self.uow.orders.total_revenue(from_date, to_date)

    def get_daily_statistics(self, day: date) -> DailyStatisticsDto:
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1) - timedelta(microseconds=1)
        orders = self.uow.orders.get_in_window(start, end)
        return DailyStatisticsDto(
            date=day,
            total_orders=len(orders),
            total_revenue=to_money(sum((o.total_amount for o in orders), Decimal("0"))),
            pending_orders=sum(1 for o in orders if o.status == PENDING),
            delivered_orders=sum(1 for o in orders if o.status == DELIVERED),
            cancelled_orders=sum(1 for o in orders if o.status == CANCELLED),
        )
