"""
Request execution and outcome classification.

`execute` only fails when no response was received; any HTTP status is returned
as a RawResult. `classify` turns error statuses into ApiError with as much
diagnostic context as can be gathered.
"""

import json
import logging
from dataclasses import replace
from typing import Any, Protocol
from urllib.parse import unquote

import aiohttp

from .exceptions import ApiError, handle_exception
from .models import RawResult
from .signer import FORM_CONTENT_TYPE, LIB_HEADER, SignedRequest

logger = logging.getLogger(__name__)


class Signer(Protocol):
    def sign(self, url: str, method: str = "GET", body: dict[str, str] | None = None) -> SignedRequest: ...


class RequestExecutor:
    """Signs, sends and classifies requests for one client."""

    def __init__(
        self,
        signer: Signer,
        session: aiohttp.ClientSession | None,
        driver_version: str,
        timeout: float | None = None,
        debug: bool = False,
    ):
        self.signer = signer
        self.session = session
        self.driver_version = driver_version
        self.timeout = timeout
        self.debug = debug
        self.owns_session = False

    def get_session(self) -> aiohttp.ClientSession:
        """The session given at construction, or one created (and owned) on first use."""
        if self.session is None:
            self.session = aiohttp.ClientSession()
            self.owns_session = True
        return self.session

    async def close(self) -> None:
        if self.owns_session and self.session is not None:
            await self.session.close()
            self.session = None
            self.owns_session = False

    async def execute(
        self,
        url: str,
        method: str = "GET",
        body: dict[str, str] | None = None,
        table_name: str | None = None,
    ) -> RawResult:
        """
        Sign and send a request.

        Args:
            url: Absolute, already-encoded URL
            method: HTTP method
            body: Form parameters, values already percent-encoded
            table_name: Table the call is scoped to, if any

        Returns:
            RawResult for whatever status the server answered

        Raises:
            TransportError: If no response was received
        """
        headers = {LIB_HEADER: self.driver_version}
        if method == "POST":
            headers["Content-Type"] = FORM_CONTENT_TYPE
        request = self.signer.sign(url, method, body)
        if self.debug:
            logger.debug(f"signed {method} {request.url} | headers:{sorted(request.headers)}")
        else:
            logger.debug(f"{method} {url}")
        result = await request.send(self.get_session(), headers, self.timeout)
        if result.status_code >= 400:
            logger.warning(f"response {result.status_code} | {method} {url}")
        return replace(result, request_url=url, table_name=table_name)

    def classify(
        self, result: RawResult, method: str = "GET", body: dict[str, str] | None = None
    ) -> RawResult:
        """Return `result` untouched if successful, raise ApiError otherwise."""
        if result.status_code < 400:
            return result
        try:
            payload = json.loads(result.body)
        except (TypeError, ValueError):
            payload = None
        if not isinstance(payload, dict):
            payload = {}
        error = ApiError(
            http_code=result.status_code,
            server_version=payload.get("version"),
            server_status=payload.get("status"),
            error_type=payload.get("error_type"),
            message=payload.get("message"),
            request_url=result.request_url,
            request_method=method,
            driver_version=self.driver_version,
            table_name=result.table_name or None,
            request_body=body or None,
            request_body_decoded=decode_body(body),
            response_headers=result.headers,
        )
        handle_exception(error, debug=self.debug)

    async def request(
        self,
        url: str,
        method: str = "GET",
        body: dict[str, str] | None = None,
        table_name: str | None = None,
    ) -> RawResult:
        result = await self.execute(url, method, body, table_name)
        return self.classify(result, method, body)


def decode_body(body: dict[str, Any] | None) -> dict[str, str] | None:
    if not body:
        return None
    return {key: unquote(str(value)) for key, value in body.items()}
