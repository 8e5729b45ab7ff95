"""
Query variants sent to the API.

Each variant is a dataclass holding its filter and selection state, and carries a
`kind` discriminant that the router, the response adapters and the batch
coordinator dispatch on. Serialization is pure: it only looks at the dataclass
fields and always emits parameters in the same order.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar
from urllib.parse import quote

from .models import Circle, Point

FETCH = "fetch"
CROSSWALK = "crosswalk"
RESOLVE = "resolve"
FACET = "facet"
GEOPULSE = "geopulse"

QUERY_KINDS = (FETCH, CROSSWALK, RESOLVE, FACET)


def encode_value(value: Any) -> str:
    """Percent-encode a parameter value, JSON-serializing structured values."""
    if isinstance(value, bool):
        value = "true" if value else "false"
    elif isinstance(value, (dict, list)):
        value = json.dumps(value, separators=(",", ":"))
    return quote(str(value), safe="")


def build_query_string(params: list[tuple[str, Any]]) -> str:
    # unset parameters are left out entirely
    return "&".join(f"{key}={encode_value(value)}" for key, value in params if value is not None)


@dataclass
class Query(ABC):
    kind: ClassVar[str]

    def to_query_string(self) -> str:
        return build_query_string(self.params())

    @abstractmethod
    def params(self) -> list[tuple[str, Any]]:
        """Parameters in serialization order; None values are skipped."""


@dataclass
class FetchQuery(Query):
    """Read rows from a table."""

    kind: ClassVar[str] = FETCH

    search: str | None = None
    filters: dict[str, Any] | None = None
    select: list[str] | None = None
    sort: str | None = None
    limit: int | None = None
    offset: int | None = None
    include_count: bool = False
    geo: Point | Circle | None = None
    threshold: str | None = None

    def at(self, point: Point) -> "FetchQuery":
        """Restrict the query to a single point."""
        self.geo = point
        return self

    def within(self, circle: Circle) -> "FetchQuery":
        self.geo = circle
        return self

    def params(self) -> list[tuple[str, Any]]:
        return [
            ("q", self.search),
            ("filters", self.filters or None),
            ("select", ",".join(self.select) if self.select else None),
            ("sort", self.sort),
            ("limit", self.limit),
            ("offset", self.offset),
            ("include_count", True if self.include_count else None),
            ("geo", self.geo.to_filter() if self.geo else None),
            ("threshold", self.threshold),
        ]


@dataclass
class CrosswalkQuery(Query):
    """Map a record to its identifiers in third-party namespaces, or back."""

    kind: ClassVar[str] = CROSSWALK

    factual_id: str | None = None
    namespace: str | None = None
    namespace_id: str | None = None
    only: list[str] | None = None
    limit: int | None = None

    def params(self) -> list[tuple[str, Any]]:
        return [
            ("factual_id", self.factual_id),
            ("namespace", self.namespace),
            ("namespace_id", self.namespace_id),
            ("only", ",".join(self.only) if self.only else None),
            ("limit", self.limit),
        ]


@dataclass
class ResolveQuery(Query):
    """Match a partial set of attributes against a table's entities."""

    kind: ClassVar[str] = RESOLVE

    values: dict[str, Any] = field(default_factory=dict)
    debug: bool = False

    def add(self, key: str, value: Any) -> "ResolveQuery":
        self.values[key] = value
        return self

    def params(self) -> list[tuple[str, Any]]:
        return [
            ("values", self.values),
            ("debug", True if self.debug else None),
        ]


@dataclass
class FacetQuery(Query):
    """Count distinct values of the selected columns."""

    kind: ClassVar[str] = FACET

    select: list[str] = field(default_factory=list)
    search: str | None = None
    filters: dict[str, Any] | None = None
    geo: Point | Circle | None = None
    limit: int | None = None
    min_count: int | None = None
    include_count: bool = False

    def params(self) -> list[tuple[str, Any]]:
        return [
            ("select", ",".join(self.select) if self.select else None),
            ("q", self.search),
            ("filters", self.filters or None),
            ("geo", self.geo.to_filter() if self.geo else None),
            ("limit", self.limit),
            ("min_count", self.min_count),
            ("include_count", True if self.include_count else None),
        ]


@dataclass
class GeopulseQuery(Query):
    """Aggregate neighbourhood statistics around a point."""

    kind: ClassVar[str] = GEOPULSE

    point: Point | None = None
    select: list[str] | None = None

    def params(self) -> list[tuple[str, Any]]:
        return [
            ("geo", self.point.to_filter() if self.point else None),
            ("select", ",".join(self.select) if self.select else None),
        ]
