import json
import re
from urllib.parse import unquote

import pytest

from factual_driver.core.batch import BatchQueue
from factual_driver.core.exceptions import UnsupportedQueryType
from factual_driver.core.query import FacetQuery, FetchQuery, GeopulseQuery, ResolveQuery
from factual_driver.core.router import url_for_query

from .conftest import API_BASE

CALL_PATTERN = re.compile(r'"([^"]+)":"([^"]+)"')


def embedded_calls(url: str) -> dict[str, str]:
    _, queries = url.split("multi?queries=", 1)
    return dict(CALL_PATTERN.findall(queries))


def test_empty_queue():
    url, kinds = BatchQueue().build_batch_url(API_BASE)
    assert url == f"{API_BASE}multi?queries={{}}"
    assert kinds == {}


def test_build_batch_url():
    queue = BatchQueue()
    queue.enqueue("reads", "places", FetchQuery(search="coffee", limit=1))
    queue.enqueue("counts", "global", FacetQuery(select=["region"]))
    url, kinds = queue.build_batch_url(API_BASE)
    assert url == (
        f"{API_BASE}multi?queries="
        '{"reads":"%2Ft%2Fplaces%3Fq%3Dcoffee%26limit%3D1",'
        '"counts":"%2Ft%2Fglobal%2Ffacets%3Fselect%3Dregion"}'
    )
    assert list(kinds.items()) == [("reads", "fetch"), ("counts", "facet")]


def test_embedded_calls_decode_to_standalone_urls():
    queries = {
        "a": ("places", FetchQuery(search="bar & grill", filters={"region": "CA"})),
        "b": ("places", ResolveQuery().add("name", "Café, \"Le\" Bistro")),
    }
    queue = BatchQueue()
    for name, (table, query) in queries.items():
        queue.enqueue(name, table, query)
    url, _ = queue.build_batch_url(API_BASE)
    calls = embedded_calls(url)
    assert list(calls) == ["a", "b"]
    for name, (table, query) in queries.items():
        standalone = url_for_query(API_BASE, table, query)
        # the base is dropped but the leading slash of the path is kept
        assert unquote(calls[name]) == standalone[len(API_BASE) - 1 :]


def test_enqueue_overwrites_name():
    queue = BatchQueue()
    queue.enqueue("a", "places", FetchQuery(limit=1))
    queue.enqueue("b", "places", FetchQuery(limit=2))
    queue.enqueue("a", "global", FacetQuery(select=["region"]))
    url, kinds = queue.build_batch_url(API_BASE)
    calls = embedded_calls(url)
    assert len(queue) == 2
    assert kinds == {"a": "facet", "b": "fetch"}
    assert unquote(calls["a"]) == "/t/global/facets?select=region"


def test_names_are_json_escaped():
    queue = BatchQueue()
    queue.enqueue('say "hi"', "places", FetchQuery(limit=1))
    url, _ = queue.build_batch_url(API_BASE)
    name = json.dumps('say "hi"')
    assert url == API_BASE + "multi?queries={" + name + ':"%2Ft%2Fplaces%3Flimit%3D1"}'


def test_clear():
    queue = BatchQueue()
    queue.enqueue("a", "places", FetchQuery())
    assert "a" in queue
    queue.clear()
    assert len(queue) == 0
    assert queue.build_batch_url(API_BASE)[0] == f"{API_BASE}multi?queries={{}}"


@pytest.mark.parametrize("query", [GeopulseQuery(), "t/places?q=coffee", None])
def test_enqueue_rejects_unbatchable_query(query):
    queue = BatchQueue()
    queue.enqueue("good", "places", FetchQuery(limit=1))
    with pytest.raises(UnsupportedQueryType) as exc_info:
        queue.enqueue("bad", "places", query)
    assert exc_info.value.operation == "enqueue"
    assert list(queue.entries) == ["good"]
    url, kinds = queue.build_batch_url(API_BASE)
    assert kinds == {"good": "fetch"}


def test_rejected_enqueue_keeps_previous_entry():
    queue = BatchQueue()
    queue.enqueue("a", "places", FetchQuery(limit=1))
    with pytest.raises(UnsupportedQueryType):
        queue.enqueue("a", "places", GeopulseQuery())
    assert queue.entries["a"].query == FetchQuery(limit=1)
