"""
URL routing: pure functions from (table, query) to an absolute endpoint.

`base` is the configured API endpoint and always ends with a slash. Query strings
are taken from the query as-is; encoding them is the query's job.
"""

from .exceptions import UnsupportedQueryType
from .query import CROSSWALK, FACET, FETCH, RESOLVE, Query


def url_for_fetch(base: str, table: str, query: Query) -> str:
    return f"{base}t/{table}?{query.to_query_string()}"


def url_for_crosswalk(base: str, table: str, query: Query) -> str:
    return f"{base}{table}/crosswalk?{query.to_query_string()}"


def url_for_resolve(base: str, table: str, query: Query) -> str:
    return f"{base}{table}/resolve?{query.to_query_string()}"


def url_for_facets(base: str, table: str, query: Query) -> str:
    return f"{base}t/{table}/facets?{query.to_query_string()}"


def url_for_schema(base: str, table: str) -> str:
    return f"{base}t/{table}/schema"


def url_for_geopulse(base: str, query: Query) -> str:
    return f"{base}places/geopulse?{query.to_query_string()}"


def url_for_monetize(base: str, table: str, query: Query) -> str:
    return f"{base}{table}/monetize?{query.to_query_string()}"


def url_for_geocode(base: str, table: str, query: Query) -> str:
    return f"{base}{table}/geocode?{query.to_query_string()}"


def url_for_flag(base: str, table: str, factual_id: str) -> str:
    return f"{base}t/{table}/{factual_id}/flag"


def url_for_submit(base: str, table: str, factual_id: str | None = None) -> str:
    if factual_id:
        return f"{base}t/{table}/{factual_id}/submit"
    return f"{base}t/{table}/submit"


def url_for_multi(base: str, queries: str) -> str:
    return f"{base}multi?queries={queries}"


def url_for_query(base: str, table: str, query: Query, operation: str = "url_for_query") -> str:
    """Route a read query by its kind; `operation` names the caller in errors."""
    kind = getattr(query, "kind", None)
    if kind == FETCH:
        return url_for_fetch(base, table, query)
    elif kind == CROSSWALK:
        return url_for_crosswalk(base, table, query)
    elif kind == RESOLVE:
        return url_for_resolve(base, table, query)
    elif kind == FACET:
        return url_for_facets(base, table, query)
    raise UnsupportedQueryType(operation, query)
