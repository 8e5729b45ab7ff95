"""
Public entry point of the driver.

`Factual` routes queries to their endpoints, runs them through a signed
RequestExecutor and wraps the results in typed responses. Every coroutine
completes its HTTP exchange before returning; there is no background work and
no caching.
"""

import logging
from typing import Any

import aiohttp

from factual_driver import config
from factual_driver.core import router
from factual_driver.core.batch import BatchEntry, BatchQueue
from factual_driver.core.exceptions import ConfigError, InvalidRequestObject
from factual_driver.core.executor import RequestExecutor, Signer
from factual_driver.core.models import Point, RawResult
from factual_driver.core.query import FetchQuery, GeopulseQuery, Query, ResolveQuery
from factual_driver.core.responses import (
    BatchResponse,
    ReadResponse,
    Response,
    SchemaResponse,
    response_for,
)
from factual_driver.core.sentry import init_sentry
from factual_driver.core.signer import OAuthSigner
from factual_driver.core.submissions import FlagRequest, SubmitRequest
from factual_driver.geocoder import Geocoder

logger = logging.getLogger(__name__)


class Factual:
    """Authenticated access to the Factual API."""

    def __init__(
        self,
        key: str | None = None,
        secret: str | None = None,
        signer: Signer | None = None,
        session: aiohttp.ClientSession | None = None,
        geocoder: Geocoder | None = None,
        api_base: str | None = None,
    ):
        if signer is None:
            if not (key and secret):
                raise ConfigError("An OAuth key and secret, or a signer, are required")
            signer = OAuthSigner(key, secret)
        init_sentry()
        self.api_base = api_base or config.API_ENDPOINT
        self.executor = RequestExecutor(
            signer,
            session,
            driver_version=config.DRIVER_VERSION,
            timeout=config.REQUEST_TIMEOUT,
            debug=bool(config.DEBUG),
        )
        self.queue = BatchQueue()
        self._geocoder = geocoder

    async def __aenter__(self) -> "Factual":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        await self.executor.close()

    def debug(self) -> None:
        """Log signed requests and full error diagnostics."""
        self.executor.debug = True

    def set_api_base(self, url_base: str) -> None:
        """Talk to another server (eg. staging) without changing config."""
        self.api_base = url_base if url_base.endswith("/") else f"{url_base}/"

    def version(self) -> str:
        return self.executor.driver_version

    async def _request(
        self,
        url: str,
        method: str = "GET",
        body: dict[str, str] | None = None,
        table_name: str | None = None,
    ) -> RawResult:
        return await self.executor.request(url, method, body, table_name)

    def build_query_url(self, table: str, query: Query) -> str:
        """The URL `fetch` would call, without calling it."""
        return router.url_for_query(self.api_base, table, query, "build_query_url")

    async def fetch(self, table: str, query: Query) -> Response:
        """
        Run a read query against a table.

        Args:
            table: Table name, eg. "places"
            query: A FetchQuery, CrosswalkQuery, ResolveQuery or FacetQuery

        Returns:
            The response type matching the query kind

        Raises:
            UnsupportedQueryType: If the query is of no known kind
            ApiError: If the API answered with an error status
        """
        url = router.url_for_query(self.api_base, table, query, "fetch")
        result = await self._request(url, table_name=table)
        return response_for(query.kind, result)

    async def resolve(self, table: str, values: dict[str, Any]) -> dict[str, Any] | None:
        """Resolved entity matching `values`, or None when nothing matches with confidence."""
        query = ResolveQuery()
        for key, value in values.items():
            query.add(key, value)
        response = await self.fetch(table, query)
        return response.get_resolved()

    async def schema(self, table: str) -> SchemaResponse:
        result = await self._request(router.url_for_schema(self.api_base, table), table_name=table)
        return SchemaResponse(result)

    async def flag(self, flag_request: FlagRequest) -> ReadResponse:
        """Report a record as problematic."""
        if not isinstance(flag_request, FlagRequest):
            raise InvalidRequestObject("A FlagRequest is required to flag a record")
        if not flag_request.is_valid():
            raise InvalidRequestObject("FlagRequest must have user_token, table_name and factual_id set")
        url = router.url_for_flag(self.api_base, flag_request.table_name, flag_request.factual_id)
        result = await self._request(
            url, "POST", flag_request.to_url_params(), table_name=flag_request.table_name
        )
        return ReadResponse(result)

    async def submit(self, submit_request: SubmitRequest) -> ReadResponse:
        """Add a record, or update one when the request carries a factual_id."""
        if not isinstance(submit_request, SubmitRequest):
            raise InvalidRequestObject("A SubmitRequest is required to submit data")
        if not submit_request.is_valid():
            raise InvalidRequestObject("SubmitRequest must have user_token and table_name set")
        url = router.url_for_submit(
            self.api_base, submit_request.table_name, submit_request.factual_id
        )
        result = await self._request(
            url, "POST", submit_request.to_url_params(), table_name=submit_request.table_name
        )
        return ReadResponse(result)

    async def reverse_geocode_nearest(self, point: Point, table: str = "places") -> ReadResponse:
        """Address nearest to `point`."""
        query = FetchQuery().at(point)
        result = await self._request(
            router.url_for_geocode(self.api_base, table, query), table_name=table
        )
        return ReadResponse(result)

    async def monetize(self, table: str, query: Query) -> ReadResponse:
        result = await self._request(
            router.url_for_monetize(self.api_base, table, query), table_name=table
        )
        return ReadResponse(result)

    async def geopulse(self, query: GeopulseQuery) -> ReadResponse:
        result = await self._request(router.url_for_geopulse(self.api_base, query))
        return ReadResponse(result)

    def enqueue(self, table: str, query: Query, name: str) -> dict[str, BatchEntry]:
        """Queue a query for the next batch; a name already queued is replaced."""
        return self.queue.enqueue(name, table, query)

    def clear_batch(self) -> None:
        self.queue.clear()

    async def execute_batch(self) -> BatchResponse:
        """Send every queued query in one multi call. The queue is kept as is."""
        url, kinds = self.queue.build_batch_url(self.api_base)
        logger.debug(f"multi call with {len(kinds)} queries: {list(kinds)}")
        result = await self._request(url)
        return BatchResponse(result, kinds)

    async def raw_request(self, url: str) -> str:
        """Sign and run a complete, correctly escaped URL and return the body as is."""
        result = await self._request(url)
        return result.body

    @property
    def geocoder(self) -> Geocoder:
        """The geocoder given at construction, or one created on first access."""
        if self._geocoder is None:
            self._geocoder = Geocoder(get_session=self.executor.get_session)
        return self._geocoder

    async def geocode(self, address: str) -> list[dict[str, Any]]:
        return await self.geocoder.geocode(address)

    async def reverse_geocode(self, lon: float, lat: float) -> list[dict[str, Any]]:
        return await self.geocoder.reverse_geocode(lon, lat)
