"""
Typed predicates and their rendering into a parameterized WHERE clause.

Filters are collected as predicate objects first and rendered in one place,
so every `%s` placeholder in the SQL is produced together with its bound
value. The rendered clause and its parameter list therefore always line up.

Usage:
    filters = build_user_filters(school="ABC", exclude_test=True, q=None)
    where_sql, params = filters.render()
    # WHERE "school" LIKE %s AND "name" NOT LIKE %s
    # ['%ABC%', '%테스트%']
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Tuple, Union

# Marker carried in the names of test accounts ("test" in Korean).
TEST_MARKER = "테스트"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def quote_identifier(name: str) -> str:
    """Double-quote a table or column name after validating its shape."""
    if not _IDENTIFIER_RE.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return f'"{name}"'


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters so `value` matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains(value: str) -> str:
    """LIKE pattern matching any string that contains `value`."""
    return f"%{escape_like(value)}%"


class Operator(str, enum.Enum):
    LIKE = "LIKE"
    NOT_LIKE = "NOT LIKE"


@dataclass(frozen=True)
class Predicate:
    column: str
    operator: Operator
    value: Any

    def render(self) -> Tuple[str, List[Any]]:
        return f"{quote_identifier(self.column)} {self.operator.value} %s", [self.value]


@dataclass(frozen=True)
class AnyOf:
    """Grouped OR of predicates, rendered inside parentheses."""

    predicates: Tuple[Predicate, ...]

    def render(self) -> Tuple[str, List[Any]]:
        fragments: List[str] = []
        params: List[Any] = []
        for predicate in self.predicates:
            fragment, values = predicate.render()
            fragments.append(fragment)
            params.extend(values)
        return "(" + " OR ".join(fragments) + ")", params


Condition = Union[Predicate, AnyOf]


@dataclass
class FilterSet:
    """Ordered conjunction of conditions."""

    conditions: List[Condition] = field(default_factory=list)

    def add(self, condition: Condition) -> "FilterSet":
        self.conditions.append(condition)
        return self

    def __iter__(self) -> Iterator[Condition]:
        return iter(self.conditions)

    def __len__(self) -> int:
        return len(self.conditions)

    def render(self) -> Tuple[str, List[Any]]:
        """
        Render to `(where_sql, params)`.

        `where_sql` is an empty string when there are no conditions, otherwise
        `WHERE c1 AND c2 ...`.
        """
        fragments: List[str] = []
        params: List[Any] = []
        for condition in self.conditions:
            fragment, values = condition.render()
            fragments.append(fragment)
            params.extend(values)
        if not fragments:
            return "", []
        return "WHERE " + " AND ".join(fragments), params


def build_user_filters(
    school: Optional[str] = None,
    exclude_test: bool = False,
    q: Optional[str] = None,
) -> FilterSet:
    """
    Filters for the user list, applied in the order school, exclude_test, q.

    Blank strings (after trimming) add nothing.
    """
    filters = FilterSet()

    school = (school or "").strip()
    if school:
        filters.add(Predicate("school", Operator.LIKE, contains(school)))

    if exclude_test:
        filters.add(Predicate("name", Operator.NOT_LIKE, contains(TEST_MARKER)))

    q = (q or "").strip()
    if q:
        pattern = contains(q)
        filters.add(
            AnyOf(
                (
                    Predicate("name", Operator.LIKE, pattern),
                    Predicate("email", Operator.LIKE, pattern),
                )
            )
        )

    return filters


__all__ = [
    "AnyOf",
    "Condition",
    "FilterSet",
    "Operator",
    "Predicate",
    "TEST_MARKER",
    "build_user_filters",
    "contains",
    "escape_like",
    "quote_identifier",
]
