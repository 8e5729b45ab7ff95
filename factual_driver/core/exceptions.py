"""
Exception taxonomy for the driver.

Every error raised by the request pipeline derives from FactualException so that
callers can catch the whole family at once.
"""

import logging
from typing import Any

import sentry_sdk

logger = logging.getLogger(__name__)


class FactualException(Exception):
    """Base class of all driver errors"""


class ConfigError(FactualException):
    """Configuration could not be loaded or is not usable"""


class UnsupportedQueryType(FactualException):
    """A query of an unknown variant reached a dispatch point"""

    def __init__(self, operation: str, query: Any) -> None:
        self.operation = operation
        self.query_type = type(query).__name__
        super().__init__(f"{operation}: query type '{self.query_type}' not recognized")


class InvalidRequestObject(FactualException):
    """A flag or submit request is missing required attributes"""


class UnknownBatchEntry(FactualException, KeyError):
    """A batch response was asked for a name that was never queued"""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No query named '{name}' in this batch")

    def __str__(self) -> str:
        return self.args[0]


class ApiError(FactualException):
    """
    The API answered with an HTTP status >= 400.

    `request_url` is the URL as built by the router, before it is normalized for
    signing: the URL on the wire percent-encodes the braces and quotes of a
    multi call.
    """

    def __init__(
        self,
        message: str | None,
        request_url: str,
        request_method: str,
        driver_version: str,
        http_code: int | None = None,
        server_version: Any = None,
        server_status: str | None = None,
        error_type: str | None = None,
        table_name: str | None = None,
        request_body: dict | None = None,
        request_body_decoded: dict | None = None,
        response_headers: dict | None = None,
    ) -> None:
        self.http_code = http_code
        self.server_version = server_version
        self.server_status = server_status
        self.error_type = error_type
        self.message = message
        self.request_url = request_url
        self.request_method = request_method
        self.driver_version = driver_version
        self.table_name = table_name
        self.request_body = request_body
        self.request_body_decoded = request_body_decoded
        self.response_headers = response_headers
        super().__init__(self._summary())

    def _summary(self) -> str:
        prefix = f"HTTP {self.http_code}" if self.http_code is not None else "Request failed"
        return f"{prefix} on {self.request_method} {self.request_url}: {self.message}"

    def info(self) -> dict[str, Any]:
        """Non-empty diagnostic fields, as a dict"""
        fields = {
            "code": self.http_code,
            "version": self.server_version,
            "status": self.server_status,
            "error_type": self.error_type,
            "message": self.message,
            "request": self.request_url,
            "method": self.request_method,
            "driver": self.driver_version,
            "tablename": self.table_name,
            "body": self.request_body,
            "bodyunencoded": self.request_body_decoded,
            "returnheaders": self.response_headers,
        }
        return {key: value for key, value in fields.items() if value}


class TransportError(ApiError):
    """No HTTP response could be obtained (DNS, connection, TLS, timeout)"""

    def __init__(
        self, message: str, request_url: str, request_method: str, driver_version: str
    ) -> None:
        super().__init__(
            message=message,
            request_url=request_url,
            request_method=request_method,
            driver_version=driver_version,
        )


def handle_exception(error: ApiError, debug: bool = False):
    """Report an API error to Sentry (when configured) and raise it."""
    if debug:
        logger.warning("Factual API error: %s", error.info())
    if sentry_sdk.get_client().is_active():
        with sentry_sdk.new_scope() as scope:
            sentry_tags: dict = {
                "http_code": error.http_code,
                "request_method": error.request_method,
                "driver_version": error.driver_version,
            }
            if error.table_name:
                sentry_tags["table_name"] = error.table_name
            scope.set_tags(sentry_tags)
            scope.set_extra("request_url", error.request_url)
            sentry_sdk.capture_exception(error)
    raise error
