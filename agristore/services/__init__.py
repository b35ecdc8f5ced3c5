"""
Business services. One ``Services`` bundle is built per request on top of a
single ``UnitOfWork`` and closed when the app context tears down.
"""
from flask import current_app, g

from agristore.repositories import UnitOfWork

from .addresses import UserAddressService
from .cart import CartService
from .categories import CategoryService
from .coupons import CouponService
from .orders import OrderService
from .products import ProductService
from .reviews import ReviewService
from .users import UserService
from .variants import ProductVariantService


class Services:
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow
        self.cart = CartService(uow)
        self.orders = OrderService(uow)
        self.coupons = CouponService(uow)
        self.reviews = ReviewService(uow)
        self.addresses = UserAddressService(uow)
        self.users = UserService(uow)
        self.categories = CategoryService(uow)
        self.products = ProductService(uow)
        self.variants = ProductVariantService(uow)


def get_services() -> Services:
    if "services" not in g:
        g.services = Services(UnitOfWork(current_app.extensions["db"]))
    return g.services


def close_services(exc=None) -> None:
    services = g.pop("services", None)
    if services is not None:
        if exc is not None and services.uow.in_transaction:
            services.uow.rollback()
        services.uow.close()


__all__ = [
    "CartService",
    "CategoryService",
    "CouponService",
    "OrderService",
    "ProductService",
    "ProductVariantService",
    "ReviewService",
    "Services",
    "UserAddressService",
    "UserService",
    "close_services",
    "get_services",
]
