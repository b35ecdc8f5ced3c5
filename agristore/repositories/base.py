from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from agristore.models.entities import Record
from agristore.utils.logging import get_logger

if TYPE_CHECKING:
    from .unit_of_work import UnitOfWork

log = get_logger(__name__)

T = TypeVar("T", bound=Record)


class Repository(Generic[T]):
    """
    Thin query wrapper over one table.

    Filters are equality matches joined with AND; anything more specific lives
    in the subclass as a hand written query.
    """
    table_name: Optional[str] = None
    entity: Type[T]
    non_update: List[str] = ["id"]

    def __init__(self, uow: "UnitOfWork") -> None:
        if self.table_name is None:
            raise ValueError("table_name must be set in subclass")
        self.uow = uow

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _where(filters: Dict[str, Any]) -> Tuple[str, Tuple[Any, ...]]:
        if not filters:
            return "", ()
        clauses = []
        params: List[Any] = []
        for key, value in filters.items():
            if value is None:
                clauses.append(f"{key} IS NULL")
            else:
                clauses.append(f"{key} = ?")
                params.append(value)
        return " WHERE " + " AND ".join(clauses), tuple(params)

    def _rows(self, query: str, params: Sequence[Any] = ()) -> List[T]:
        return [self.entity.from_row(row) for row in self.uow.execute(query, params)]

    def _row(self, query: str, params: Sequence[Any] = ()) -> Optional[T]:
        row = self.uow.execute(query, params, fetch="one")
        return self.entity.from_row(row) if row else None

    def _scalar(self, query: str, params: Sequence[Any] = ()) -> Any:
        row = self.uow.execute(query, params, fetch="one")
        if not row:
            return None
        return next(iter(row.values()))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_by_id(self, entity_id: int) -> Optional[T]:
        return self._row(f"SELECT * FROM {self.table_name} WHERE id = ?", (entity_id,))

    def find(self, order_by: str = "id", **filters: Any) -> List[T]:
        where, params = self._where(filters)
        return self._rows(f"SELECT * FROM {self.table_name}{where} ORDER BY {order_by}", params)

    def first(self, **filters: Any) -> Optional[T]:
        where, params = self._where(filters)
        return self._row(f"SELECT * FROM {self.table_name}{where} ORDER BY id LIMIT 1", params)

    def count(self, **filters: Any) -> int:
        where, params = self._where(filters)
        return int(self._scalar(f"SELECT COUNT(*) AS total FROM {self.table_name}{where}", params) or 0)

    def exists(self, **filters: Any) -> bool:
        where, params = self._where(filters)
        return self._scalar(f"SELECT 1 AS found FROM {self.table_name}{where} LIMIT 1", params) is not None

    def page(
        self,
        where: str,
        params: Sequence[Any],
        order_by: str,
        page_number: int,
        page_size: int,
        select: str = "*",
        from_clause: Optional[str] = None,
    ) -> Tuple[List[T], int]:
        """Run a filtered listing twice: once for the total, once for the page."""
        source = from_clause or self.table_name
        where_sql = f" WHERE {where}" if where else ""
        total = int(self._scalar(f"SELECT COUNT(*) AS total FROM {source}{where_sql}", params) or 0)
        items = self._rows(
            f"SELECT {select} FROM {source}{where_sql} ORDER BY {order_by} LIMIT ? OFFSET ?",
            tuple(params) + (page_size, (page_number - 1) * page_size),
        )
        return items, total

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def add(self, entity: T) -> T:
        if entity.id is not None:
            raise KeyError("Invalid ID key found")
        values = {k: v for k, v in entity.to_row().items() if k != "id"}
        entity.id = self.uow.insert(self.table_name, values)
        return entity

    def update(self, entity: T, *keys: str) -> bool:
        row = entity.to_row()
        if not keys:
            update_data = {k: v for k, v in row.items() if k not in self.non_update}
        else:
            invalid = [k for k in keys if k in self.non_update or k not in row]
            if invalid:
                raise KeyError(f"Invalid keys for update: {', '.join(invalid)}")
            update_data = {k: row[k] for k in keys}
        if not update_data:
            log.info("Nothing updated in %s", self.table_name)
            return True
        set_clause = ", ".join(f"{k} = ?" for k in update_data)
        params = tuple(update_data.values()) + (entity.id,)
        self.uow.execute(f"UPDATE {self.table_name} SET {set_clause} WHERE id = ?", params, fetch="none")
        return True

    def delete(self, entity: T) -> bool:
        return self.delete_where(id=entity.id) > 0

    def delete_where(self, **filters: Any) -> int:
        if not filters:
            raise ValueError("Refusing to delete without a filter")
        where, params = self._where(filters)
        return self.uow.execute(f"DELETE FROM {self.table_name}{where}", params, fetch="rowcount")
