"""
Query engine shared by every resource kind.

A query is a conjunction of small predicate objects.  Each predicate
knows how to render itself as a parameterized SQL fragment; the
``EntityStore`` glues the fragments together into a ``WHERE`` clause.
``QueryEngine.run`` combines a predicate list with a ``PageRequest``
and returns a ``ResultPage`` holding one page of rows plus the total
number of matches.

Ordering is always total: whatever the sort field, ties are broken by
``id ASC`` so that consecutive pages never overlap or skip rows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.errors import InvalidArgument

logger = logging.getLogger(__name__)


def format_timestamp(value: Any) -> str:
    """Normalise a datetime (or ISO string) to the stored UTC format.

    Naive values are treated as UTC.  The fixed width
    ``YYYY-MM-DDTHH:MM:SS.ffffff+00:00`` form keeps lexicographic and
    chronological order identical, which range filters rely on.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise InvalidArgument(f"Invalid timestamp: {value!r}")
    if not isinstance(value, datetime):
        raise InvalidArgument(f"Invalid timestamp: {value!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class Predicate:
    """Base class for query predicates."""

    def to_sql(self) -> Tuple[str, List[Any]]:
        raise NotImplementedError

    def columns(self) -> Tuple[str, ...]:
        raise NotImplementedError


@dataclass(frozen=True)
class Equals(Predicate):
    """Exact match; also used for foreign-key equality."""

    column: str
    value: Any

    def to_sql(self) -> Tuple[str, List[Any]]:
        if self.value is None:
            return f"{self.column} IS NULL", []
        return f"{self.column} = ?", [self.value]

    def columns(self) -> Tuple[str, ...]:
        return (self.column,)


@dataclass(frozen=True)
class EqualsIgnoreCase(Predicate):
    """Case-insensitive equality using Unicode case folding."""

    column: str
    value: str

    def to_sql(self) -> Tuple[str, List[Any]]:
        return f"py_casefold({self.column}) = py_casefold(?)", [self.value]

    def columns(self) -> Tuple[str, ...]:
        return (self.column,)


@dataclass(frozen=True)
class ContainsIgnoreCase(Predicate):
    """Case-insensitive substring match on any of several text columns."""

    fields: Tuple[str, ...]
    term: str

    def to_sql(self) -> Tuple[str, List[Any]]:
        # instr() avoids having to escape LIKE wildcards in the term
        clauses = [
            f"instr(py_casefold(coalesce({column}, '')), py_casefold(?)) > 0" for column in self.fields
        ]
        return "(" + " OR ".join(clauses) + ")", [self.term] * len(self.fields)

    def columns(self) -> Tuple[str, ...]:
        return self.fields


@dataclass(frozen=True)
class Flag(Predicate):
    """Boolean column equality.  Booleans are stored as 0/1."""

    column: str
    value: bool

    def to_sql(self) -> Tuple[str, List[Any]]:
        return f"{self.column} = ?", [1 if self.value else 0]

    def columns(self) -> Tuple[str, ...]:
        return (self.column,)


@dataclass(frozen=True)
class Since(Predicate):
    """Date range: ``column >= start``."""

    column: str
    start: Any

    def to_sql(self) -> Tuple[str, List[Any]]:
        return f"{self.column} >= ?", [format_timestamp(self.start)]

    def columns(self) -> Tuple[str, ...]:
        return (self.column,)


@dataclass(frozen=True)
class Sort:
    """Sort specification: a column and a direction."""

    field: str
    descending: bool = False

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Sort"]:
        """Parse ``"field"``, ``"field,asc"`` or ``"field,desc"``.

        Returns ``None`` for an empty value so callers can fall back to
        their default sort.
        """
        if not value or not value.strip():
            return None
        name, _, direction = value.partition(",")
        direction = direction.strip().lower() or "asc"
        if direction not in {"asc", "desc"}:
            raise InvalidArgument(f"Invalid sort direction: {direction!r}")
        return cls(field=name.strip(), descending=direction == "desc")

    def __str__(self) -> str:
        return f"{self.field},{'desc' if self.descending else 'asc'}"


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page index, page size and optional sort."""

    page: int = 0
    size: Optional[int] = None
    sort: Optional[Sort] = None


@dataclass
class ResultPage:
    items: List[Dict[str, Any]] = field(default_factory=list)
    total_elements: int = 0
    page: int = 0
    size: int = 0


class QueryEngine:
    """Translate predicates and a page request into a ``ResultPage``.

    The engine validates the page request, picks the effective sort
    (falling back to the caller's default when the requested column is
    not sortable), then asks the store for the total count and the
    requested slice, read in one transaction.
    """

    def __init__(self, store, max_page_size: int = 100, default_page_size: int = 10) -> None:
        self.store = store
        self.max_page_size = max_page_size
        self.default_page_size = default_page_size

    def resolve_sort(self, requested: Optional[Sort], default: Sort) -> Sort:
        if requested is None:
            return default
        if requested.field not in self.store.sortable_columns:
            logger.debug("Ignoring unknown sort field %r on %s", requested.field, self.store.table)
            return default
        return requested

    def resolve_size(self, size: Optional[int], default_size: Optional[int] = None) -> int:
        if size is None:
            size = default_size or self.default_page_size
        if size < 1:
            raise InvalidArgument("Page size must be at least 1")
        return min(size, self.max_page_size)

    def run(
        self,
        predicates: Sequence[Predicate],
        page_request: PageRequest,
        default_sort: Sort,
        default_size: Optional[int] = None,
    ) -> ResultPage:
        if page_request.page < 0:
            raise InvalidArgument("Page index must not be negative")
        size = self.resolve_size(page_request.size, default_size)
        sort = self.resolve_sort(page_request.sort, default_sort)

        total, items = self.store.count_and_scan(predicates, sort, page_request.page * size, size)
        return ResultPage(items=items, total_elements=total, page=page_request.page, size=size)
