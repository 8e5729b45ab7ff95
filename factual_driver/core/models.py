"""
Data models for the core module.

This module contains the value objects shared by the request pipeline.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RawResult:
    """Represents one HTTP exchange, as received from the transport."""

    status_code: int
    headers: dict[str, str]
    body: str
    request_url: str
    table_name: str | None = None


@dataclass(frozen=True)
class Point:
    """A WGS84 coordinate."""

    latitude: float
    longitude: float

    def to_filter(self) -> dict[str, Any]:
        return {"$point": [self.latitude, self.longitude]}


@dataclass(frozen=True)
class Circle:
    """A geo filter matching everything within `meters` of a center."""

    latitude: float
    longitude: float
    meters: int = field(default=1000)

    def to_filter(self) -> dict[str, Any]:
        return {"$circle": {"$center": [self.latitude, self.longitude], "$meters": self.meters}}
