from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from agristore.models.entities import Category, Product, ProductVariant, to_money

from .base import Repository

PRODUCT_SORT_COLUMNS = {
    "name": "p.name",
    "price": "(SELECT MIN(v.price) FROM variant_table AS v WHERE v.product_id = p.id)",
    "created_at": "p.created_at",
}


def _in_clause(values: Iterable[int]) -> Tuple[str, Tuple[int, ...]]:
    values = tuple(values)
    return ", ".join("?" for _ in values), values


class CategoryRepository(Repository[Category]):
    table_name = "category_table"
    entity = Category

    def get_roots(self) -> List[Category]:
        return self.find(order_by="name", parent_id=None)

    def get_subcategories(self, parent_id: int) -> List[Category]:
        return self.find(order_by="name", parent_id=parent_id)

    def has_products(self, category_id: int) -> bool:
        return self._scalar(
            "SELECT 1 AS found FROM product_table WHERE category_id = ? LIMIT 1", (category_id,)
        ) is not None

    def names_by_id(self, ids: Iterable[int]) -> Dict[int, str]:
        ids = {i for i in ids if i is not None}
        if not ids:
            return {}
        placeholders, params = _in_clause(ids)
        rows = self.uow.execute(f"SELECT id, name FROM {self.table_name} WHERE id IN ({placeholders})", params)
        return {row["id"]: row["name"] for row in rows}


class ProductRepository(Repository[Product]):
    table_name = "product_table"
    entity = Product
    non_update = ["id", "created_at"]

    def get_active(self) -> List[Product]:
        return self.find(order_by="created_at DESC, id DESC", is_active=True)

    def get_featured(self, count: int) -> List[Product]:
        return self._rows(
            "SELECT * FROM product_table WHERE is_active = ? ORDER BY created_at DESC, id DESC LIMIT ?",
            (True, count),
        )

    def filter(
        self,
        search: Optional[str],
        category_id: Optional[int],
        min_price: Optional[Decimal],
        max_price: Optional[Decimal],
        sort_by: str,
        sort_desc: bool,
        page_number: int,
        page_size: int,
        active_only: bool = True,
    ) -> Tuple[List[Product], int]:
        clauses, params = [], []
        if active_only:
            clauses.append("p.is_active = ?")
            params.append(True)
        if search:
            term = f"%{search.lower()}%"
            clauses.append("(LOWER(p.name) LIKE ? OR LOWER(COALESCE(p.description, '')) LIKE ?)")
            params += [term, term]
        if category_id is not None:
            clauses.append("p.category_id = ?")
            params.append(category_id)
        if min_price is not None:
            clauses.append(
                "EXISTS (SELECT 1 FROM variant_table AS v WHERE v.product_id = p.id AND v.is_active = ? AND v.price >= ?)"
            )
            params += [True, min_price]
        if max_price is not None:
            clauses.append(
                "EXISTS (SELECT 1 FROM variant_table AS v WHERE v.product_id = p.id AND v.is_active = ? AND v.price <= ?)"
            )
            params += [True, max_price]
        column = PRODUCT_SORT_COLUMNS.get(sort_by, "p.created_at")
        direction = "DESC" if sort_desc else "ASC"
        return self.page(
            " AND ".join(clauses),
            params,
            f"{column} {direction}, p.id {direction}",
            page_number,
            page_size,
            select="p.*",
            from_clause="product_table AS p",
        )

    def price_ranges(self, product_ids: Iterable[int]) -> Dict[int, Tuple[Decimal, Decimal]]:
        """Min and max price of the active variants of each product."""
        product_ids = list(product_ids)
        if not product_ids:
            return {}
        placeholders, params = _in_clause(product_ids)
        rows = self.uow.execute(
            f"""
            SELECT product_id, MIN(price) AS min_price, MAX(price) AS max_price
            FROM variant_table
            WHERE is_active = ? AND product_id IN ({placeholders})
            GROUP BY product_id
            """,
            (True,) + params,
        )
        return {row["product_id"]: (to_money(row["min_price"]), to_money(row["max_price"])) for row in rows}


class VariantRepository(Repository[ProductVariant]):
    table_name = "variant_table"
    entity = ProductVariant
    non_update = ["id", "product_id"]

    def get_by_product(self, product_id: int, active_only: bool = False) -> List[ProductVariant]:
        if active_only:
            return self.find(product_id=product_id, is_active=True)
        return self.find(product_id=product_id)

    def get_by_ids(self, ids: Iterable[int]) -> Dict[int, ProductVariant]:
        ids = set(ids)
        if not ids:
            return {}
        placeholders, params = _in_clause(ids)
        variants = self._rows(f"SELECT * FROM {self.table_name} WHERE id IN ({placeholders})", params)
        return {variant.id: variant for variant in variants}

    def get_low_stock(self, threshold: int) -> List[ProductVariant]:
        return self._rows(
            "SELECT * FROM variant_table WHERE stock_quantity <= ? AND is_active = ? ORDER BY stock_quantity, id",
            (threshold, True),
        )

    def deduct_stock(self, variant_id: int, quantity: int) -> bool:
        """Decrease stock only when enough is left; a single conditional UPDATE."""
        updated = self.uow.execute(
            "UPDATE variant_table SET stock_quantity = stock_quantity - ? WHERE id = ? AND stock_quantity >= ?",
            (quantity, variant_id, quantity),
            fetch="rowcount",
        )
        return updated > 0
