"""
Request signing and transmission.

Requests are signed with two-legged OAuth 1.0a (consumer key and secret only)
through oauthlib, then sent with an aiohttp session.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from urllib.parse import quote, urlsplit, urlunsplit

import aiohttp
from oauthlib.oauth1 import Client
from yarl import URL

from .exceptions import TransportError
from .models import RawResult

logger = logging.getLogger(__name__)

LIB_HEADER = "X-Factual-Lib"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# characters oauthlib accepts unescaped in a query string
_OAUTH_SAFE = "=&;:%+~,*@!()/?'$"


def normalize_url(url: str) -> str:
    """Percent-encode the characters of the query string that OAuth cannot sign as is."""
    parts = urlsplit(url)
    return urlunsplit(parts._replace(query=quote(parts.query, safe=_OAUTH_SAFE)))


def encode_body(body: dict[str, str] | None) -> str | None:
    # values are already percent-encoded by the request objects
    if body is None:
        return None
    return "&".join(f"{key}={value}" for key, value in body.items())


@dataclass
class SignedRequest:
    url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    # the URL as given by the caller, before normalization
    request_url: str | None = None

    async def send(
        self,
        session: aiohttp.ClientSession,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> RawResult:
        """Perform the HTTP exchange. Any status code is a result, only I/O failures raise."""
        request_headers = {**self.headers, **(headers or {})}
        try:
            async with session.request(
                self.method,
                URL(self.url, encoded=True),
                headers=request_headers,
                data=self.body,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as res:
                body = await res.text()
                return RawResult(
                    status_code=res.status,
                    headers=dict(res.headers),
                    body=body,
                    request_url=self.request_url or self.url,
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"{self.method} {self.url} failed: {e!r}")
            raise TransportError(
                message=(
                    "Service exception (likely a problem on the server side). "
                    f"Client did not connect and returned '{e}'"
                ),
                request_url=self.request_url or self.url,
                request_method=self.method,
                driver_version=request_headers.get(LIB_HEADER),
            ) from e


class OAuthSigner:
    """Signs requests with a consumer key and secret."""

    def __init__(self, key: str, secret: str):
        self.client = Client(key, client_secret=secret)

    def sign(self, url: str, method: str = "GET", body: dict[str, str] | None = None) -> SignedRequest:
        encoded_body = encode_body(body)
        headers = {"Content-Type": FORM_CONTENT_TYPE} if encoded_body is not None else {}
        uri, signed_headers, signed_body = self.client.sign(
            normalize_url(url),
            http_method=method,
            body=encoded_body,
            headers=headers,
        )
        return SignedRequest(
            url=uri, method=method, headers=signed_headers, body=signed_body, request_url=url
        )
