"""
Batching of read queries into a single multi call.

The queue is plain client state: names are the addressing key, the last enqueue
for a name wins, and executing a batch leaves the queue untouched. `clear()` is
the only way to empty it.
"""

import json
from dataclasses import dataclass
from urllib.parse import quote

from .exceptions import UnsupportedQueryType
from .query import QUERY_KINDS, Query
from .router import url_for_multi, url_for_query


@dataclass(frozen=True)
class BatchEntry:
    table: str
    query: Query


class BatchQueue:
    def __init__(self):
        self.entries: dict[str, BatchEntry] = {}

    def enqueue(self, name: str, table: str, query: Query) -> dict[str, BatchEntry]:
        # only the four read kinds can be batched
        if getattr(query, "kind", None) not in QUERY_KINDS:
            raise UnsupportedQueryType("enqueue", query)
        self.entries[name] = BatchEntry(table=table, query=query)
        return self.entries

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def build_batch_url(self, base: str) -> tuple[str, dict[str, str]]:
        """
        Build the multi URL for every queued query.

        Args:
            base: API endpoint, with its trailing slash

        Returns:
            Tuple of (multi URL, name -> query kind in queue order)
        """
        # each call keeps its leading slash
        prefix_length = len(base) - 1
        calls = []
        kinds: dict[str, str] = {}
        for name, entry in self.entries.items():
            url = url_for_query(base, entry.table, entry.query, "build_batch_url")
            call = quote(url[prefix_length:], safe="")
            calls.append(f'{json.dumps(name)}:"{call}"')
            kinds[name] = entry.query.kind
        return url_for_multi(base, "{" + ",".join(calls) + "}"), kinds
