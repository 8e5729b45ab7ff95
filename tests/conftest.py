import json
import re

import aiohttp
import pytest
import pytest_asyncio
from aioresponses import aioresponses

from factual_driver import config
from factual_driver.client import Factual
from factual_driver.core.exceptions import TransportError
from factual_driver.core.models import RawResult

API_BASE = "https://api.example.com/"
DRIVER_VERSION = "factual-python-driver-test"
OK_PAYLOAD = {
    "version": 3,
    "status": "ok",
    "response": {"data": [{"name": "Coffee Bean"}], "included_rows": 1},
}
API_PATTERN = re.compile(r"^https://api\.example\.com/.*$")

# sent as session by clients whose signer never touches the network
FAKE_SESSION = object()


class FakeSignedRequest:
    def __init__(self, signer, url, method, body):
        self.signer = signer
        self.url = url
        self.method = method
        self.body = body
        self.headers = {"Authorization": "OAuth fake"}

    async def send(self, session, headers=None, timeout=None):
        self.signer.sent.append(
            {"url": self.url, "method": self.method, "body": self.body, "headers": headers}
        )
        if self.signer.error:
            raise TransportError(
                message=self.signer.error,
                request_url=self.url,
                request_method=self.method,
                driver_version=(headers or {}).get("X-Factual-Lib"),
            )
        status, body = self.signer.reply
        return RawResult(
            status_code=status,
            headers={"Content-Type": "application/json"},
            body=body,
            request_url=self.url,
        )


class RecordingSigner:
    """Signer double: records every sign/send and answers a canned reply."""

    def __init__(self):
        self.signed = []
        self.sent = []
        self.reply = (200, json.dumps(OK_PAYLOAD))
        self.error = None

    def respond(self, status=200, payload=None, body=None):
        self.reply = (status, body if body is not None else json.dumps(payload))

    def fail(self, message):
        self.error = message

    def sign(self, url, method="GET", body=None):
        self.signed.append({"url": url, "method": method, "body": body})
        return FakeSignedRequest(self, url, method, body)


@pytest.fixture(autouse=True)
def setup():
    config.override(API_ENDPOINT=API_BASE, DRIVER_VERSION=DRIVER_VERSION, DEBUG=False)


@pytest.fixture
def signer():
    return RecordingSigner()


@pytest.fixture
def factual(signer):
    return Factual(signer=signer, session=FAKE_SESSION)


@pytest.fixture
def rmock():
    with aioresponses() as m:
        yield m


@pytest_asyncio.fixture
async def client():
    async with aiohttp.ClientSession() as session:
        yield session


def sent_calls(rmock):
    """Flatten aioresponses' request log into (method, url, kwargs) tuples."""
    return [
        (method, str(url), call.kwargs)
        for (method, url), calls in rmock.requests.items()
        for call in calls
    ]
