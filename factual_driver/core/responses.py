"""
Typed wrappers around raw API results.

Nothing is parsed at construction time; the body is decoded on first access
and memoized.
"""

import json
from functools import cached_property
from typing import Any, Iterator

from .exceptions import UnknownBatchEntry
from .models import RawResult
from .query import CROSSWALK, FACET, FETCH, RESOLVE


class Response:
    """Base response: gives access to the raw exchange and its JSON envelope."""

    def __init__(self, result: RawResult):
        self.result = result

    @cached_property
    def json(self) -> Any:
        return json.loads(self.result.body)

    def get_json(self) -> Any:
        return self.json

    def get_status_code(self) -> int:
        return self.result.status_code

    def get_headers(self) -> dict[str, str]:
        return self.result.headers

    def get_request_url(self) -> str:
        return self.result.request_url

    def get_table(self) -> str | None:
        return self.result.table_name

    def get_version(self) -> Any:
        return self.json.get("version")

    def get_status(self) -> str | None:
        return self.json.get("status")

    @property
    def response(self) -> dict[str, Any]:
        return self.json.get("response") or {}


class ReadResponse(Response):
    """Rows returned by a read, facet, flag, submit, monetize or geocode call."""

    def get_data(self) -> Any:
        return self.response.get("data", [])

    def get_included_rows_count(self) -> int | None:
        return self.response.get("included_rows")

    def get_total_row_count(self) -> int | None:
        return self.response.get("total_row_count")

    def __len__(self) -> int:
        return len(self.get_data())

    def __iter__(self) -> Iterator[Any]:
        return iter(self.get_data())


class CrosswalkResponse(ReadResponse):
    def get_crosswalks(self) -> list[dict[str, Any]]:
        return self.get_data()


class ResolveResponse(ReadResponse):
    def get_resolved(self) -> dict[str, Any] | None:
        """First row the server resolved with confidence, or None if there is none."""
        for row in self.get_data():
            if isinstance(row, dict) and row.get("resolved"):
                return row
        return None

    def is_resolved(self) -> bool:
        return self.get_resolved() is not None


class SchemaResponse(Response):
    @property
    def view(self) -> dict[str, Any]:
        return self.response.get("view") or {}

    def get_columns(self) -> list[dict[str, Any]]:
        return self.view.get("fields", [])

    def get_column(self, name: str) -> dict[str, Any] | None:
        for column in self.get_columns():
            if column.get("name") == name:
                return column
        return None

    def get_title(self) -> str | None:
        return self.view.get("title")

    def get_description(self) -> str | None:
        return self.view.get("description")


RESPONSE_TYPES: dict[str, type[Response]] = {
    FETCH: ReadResponse,
    CROSSWALK: CrosswalkResponse,
    RESOLVE: ResolveResponse,
    FACET: ReadResponse,
}


def response_for(kind: str, result: RawResult) -> Response:
    return RESPONSE_TYPES[kind](result)


class BatchResponse(Response):
    """Combined reply of a multi call, split back per query name."""

    def __init__(self, result: RawResult, kinds: dict[str, str]):
        super().__init__(result)
        self.kinds = kinds

    def names(self) -> list[str]:
        return list(self.kinds)

    def get(self, name: str) -> Response:
        if name not in self.kinds:
            raise UnknownBatchEntry(name)
        sub_result = RawResult(
            status_code=self.result.status_code,
            headers=self.result.headers,
            body=json.dumps(self.json.get(name, {})),
            request_url=self.result.request_url,
            table_name=self.result.table_name,
        )
        return response_for(self.kinds[name], sub_result)

    def __getitem__(self, name: str) -> Response:
        return self.get(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self.kinds)

    def __len__(self) -> int:
        return len(self.kinds)

    def items(self) -> list[tuple[str, Response]]:
        return [(name, self.get(name)) for name in self.kinds]
