"""
Write-side payloads: flagging a record and submitting record data.

Both are sent as form-encoded POST bodies. `to_url_params` returns every value
already percent-encoded; the executor joins them as they are.
"""

import json
from dataclasses import dataclass, field
from typing import Any

from .query import encode_value

FLAG_PROBLEMS = ("duplicate", "inaccurate", "inappropriate", "nonexistent", "spam", "other")


@dataclass
class FlagRequest:
    """Reports a record as problematic."""

    user_token: str | None = None
    table_name: str | None = None
    factual_id: str | None = None
    problem: str = "other"
    comment: str | None = None
    reference: str | None = None
    debug: bool = False

    def __post_init__(self):
        if self.problem not in FLAG_PROBLEMS:
            raise ValueError(
                f"problem '{self.problem}' is not one of: {', '.join(FLAG_PROBLEMS)}"
            )

    def is_valid(self) -> bool:
        return bool(self.user_token and self.table_name and self.factual_id)

    def to_url_params(self) -> dict[str, str]:
        params: dict[str, Any] = {"problem": self.problem, "user": self.user_token}
        if self.comment:
            params["comment"] = self.comment
        if self.reference:
            params["reference"] = self.reference
        if self.debug:
            params["debug"] = True
        return {key: encode_value(value) for key, value in params.items()}


@dataclass
class SubmitRequest:
    """Adds a new record, or updates an existing one when `factual_id` is set."""

    user_token: str | None = None
    table_name: str | None = None
    values: dict[str, Any] = field(default_factory=dict)
    factual_id: str | None = None
    comment: str | None = None
    reference: str | None = None

    def set_value(self, key: str, value: Any) -> "SubmitRequest":
        self.values[key] = value
        return self

    def is_valid(self) -> bool:
        return bool(self.user_token and self.table_name)

    def to_url_params(self) -> dict[str, str]:
        params: dict[str, Any] = {
            "values": json.dumps(self.values, separators=(",", ":")),
            "user": self.user_token,
        }
        if self.comment:
            params["comment"] = self.comment
        if self.reference:
            params["reference"] = self.reference
        return {key: encode_value(value) for key, value in params.items()}
