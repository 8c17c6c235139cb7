from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

FilterOp = str  # "eq" | "gte" | "lte"


@dataclass(frozen=True)
class Filter:
    column: str
    op: FilterOp
    value: Any


@dataclass(frozen=True)
class Query:
    """
    Immutable description of a filtered table request.

    Builder methods return a new Query, so a base query can be shared:
      Query("tasks").eq("user_id", uid).order("created_at", ascending=False)
    """

    table: str
    filters: tuple[Filter, ...] = ()
    ordering: tuple[tuple[str, bool], ...] = ()
    limit_to: Optional[int] = None

    def eq(self, column: str, value: Any) -> "Query":
        return replace(self, filters=self.filters + (Filter(column, "eq", value),))

    def gte(self, column: str, value: Any) -> "Query":
        return replace(self, filters=self.filters + (Filter(column, "gte", value),))

    def lte(self, column: str, value: Any) -> "Query":
        return replace(self, filters=self.filters + (Filter(column, "lte", value),))

    def order(self, column: str, ascending: bool = True) -> "Query":
        return replace(self, ordering=self.ordering + ((column, ascending),))

    def limit(self, n: int) -> "Query":
        return replace(self, limit_to=n)
