"""
Address geocoding through a third-party, Nominatim-compatible service.

This sits outside the signed request pipeline: requests are neither signed nor
classified, and HTTP errors surface as aiohttp exceptions.
"""

from typing import Any, Callable
from urllib.parse import urlencode

import aiohttp

from factual_driver import config


def _base_url() -> str:
    base = config.GEOCODER_ENDPOINT or "https://nominatim.openstreetmap.org/"
    return str(base).rstrip("/") + "/"


class Geocoder:
    """
    Geocoding client.

    `get_session` is called on every request, so a geocoder created by a client
    always uses that client's current session. With neither `session` nor
    `get_session`, a session is opened and closed around each request.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        get_session: Callable[[], aiohttp.ClientSession] | None = None,
    ):
        self.session = session
        self.get_session = get_session

    async def _fetch_json(self, url: str) -> Any:
        own = self.session is None and self.get_session is None
        if self.get_session is not None:
            session = self.get_session()
        else:
            session = aiohttp.ClientSession() if own else self.session
        try:
            async with session.get(
                url,
                headers={"User-Agent": config.DRIVER_VERSION},
                timeout=aiohttp.ClientTimeout(total=config.REQUEST_TIMEOUT),
            ) as resp:
                resp.raise_for_status()
                return await resp.json()
        finally:
            if own:
                await session.close()

    async def geocode(self, address: str) -> list[dict[str, Any]]:
        """Places matching an address or place name, best match first."""
        q = urlencode({"q": address, "format": "json"})
        return await self._fetch_json(f"{_base_url()}search?{q}")

    async def reverse_geocode(self, lon: float, lat: float) -> list[dict[str, Any]]:
        """The place enclosing a coordinate, as a list of at most one result."""
        q = urlencode({"lat": lat, "lon": lon, "format": "json"})
        data = await self._fetch_json(f"{_base_url()}reverse?{q}")
        # the service answers {"error": ...} when nothing is found
        if not data or "error" in data:
            return []
        return [data]
