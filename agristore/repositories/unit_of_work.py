from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional, Sequence

from agristore.database import Backend, DBClient, Fetch
from agristore.utils.logging import get_logger

from .addresses import AddressRepository
from .cart import CartRepository
from .catalog import CategoryRepository, ProductRepository, VariantRepository
from .coupons import CouponRepository
from .orders import OrderDetailRepository, OrderRepository
from .reviews import ReviewRepository
from .users import RoleRepository, UserRepository

log = get_logger(__name__)


class UnitOfWork:
    """
    One connection, every repository, one transaction boundary.

    Outside ``transaction()`` each statement commits on its own. Inside it,
    statements accumulate until the block exits; an exception rolls all of
    them back and is re-raised.
    """

    def __init__(self, db: DBClient) -> None:
        self.db = db
        self._conn: Any = None
        self._cur: Any = None
        self._in_transaction = False

        self.roles = RoleRepository(self)
        self.users = UserRepository(self)
        self.categories = CategoryRepository(self)
        self.products = ProductRepository(self)
        self.variants = VariantRepository(self)
        self.cart_items = CartRepository(self)
        self.coupons = CouponRepository(self)
        self.orders = OrderRepository(self)
        self.order_details = OrderDetailRepository(self)
        self.reviews = ReviewRepository(self)
        self.addresses = AddressRepository(self)

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._in_transaction:
            self.rollback()
        self.close()

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    def _cursor(self) -> Any:
        if self._conn is None:
            self._conn, self._cur = self.db.connect()
        return self._cur

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------
    def execute(self, query: str, params: Optional[Sequence[Any]] = None, fetch: Fetch = "all") -> Any:
        cur = self._cursor()
        try:
            result = self.db.run(cur, query, params, fetch)
        except Exception:
            if not self._in_transaction:
                self._conn.rollback()
            raise
        if not self._in_transaction:
            self._conn.commit()
        return result

    def insert(self, table_name: str, values: Dict[str, Any]) -> int:
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        query = f"INSERT INTO {table_name} ({columns}) VALUES ({placeholders})"
        params = tuple(values.values())
        if self.db.backend == Backend.POSTGRESQL:
            row = self.execute(f"{query} RETURNING id", params, fetch="one")
            return int(row["id"])
        self.execute(query, params, fetch="none")
        return int(self._cur.lastrowid)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    def begin(self) -> None:
        if self._in_transaction:
            raise RuntimeError("A transaction is already open on this unit of work")
        self._cursor()
        self._in_transaction = True

    def commit(self) -> None:
        if self._conn is not None:
            self._conn.commit()
        self._in_transaction = False

    def rollback(self) -> None:
        if self._conn is not None:
            self._conn.rollback()
            log.warning("Transaction rolled back")
        self._in_transaction = False

    @contextmanager
    def transaction(self) -> Generator["UnitOfWork", None, None]:
        self.begin()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        self.commit()

    def close(self) -> None:
        if self._conn is not None:
            self.db.close(self._conn, self._cur)
        self._conn = self._cur = None
        self._in_transaction = False
