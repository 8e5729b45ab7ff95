import json

import pytest
from yarl import URL

from factual_driver.cli import build_parser, run

from .conftest import API_PATTERN, OK_PAYLOAD, sent_calls


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("FACTUAL_KEY", "key")
    monkeypatch.setenv("FACTUAL_SECRET", "secret")


def test_parse_fetch_arguments():
    args = build_parser().parse_args(
        ["fetch", "places", "-q", "coffee", "--filters", '{"region": "CA"}', "--limit", "3"]
    )
    assert args.command == "fetch"
    assert args.table == "places"
    assert args.search == "coffee"
    assert args.filters == {"region": "CA"}
    assert args.limit == 3


def test_run_fetch(rmock, credentials, capsys):
    rmock.get(API_PATTERN, payload=OK_PAYLOAD)
    assert run(["fetch", "places", "-q", "coffee", "--limit", "1"]) == 0
    assert json.loads(capsys.readouterr().out) == OK_PAYLOAD
    [(_, url, _)] = sent_calls(rmock)
    # aioresponses logs the URL with its parameters sorted
    assert url.startswith("https://api.example.com/t/places?")
    assert dict(URL(url).query) == {"q": "coffee", "limit": "1"}


def test_run_api_error(rmock, credentials, capsys):
    rmock.get(API_PATTERN, status=401, payload={"status": "error", "message": "Unauthorized"})
    assert run(["schema", "places"]) == 1
    assert "Unauthorized" in capsys.readouterr().err


def test_run_without_credentials(monkeypatch, capsys):
    monkeypatch.delenv("FACTUAL_KEY", raising=False)
    monkeypatch.delenv("FACTUAL_SECRET", raising=False)
    assert run(["schema", "places"]) == 1
    assert "key and secret" in capsys.readouterr().err
