"""Resolution of the user's position with caching and a fixed fallback."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import httpx

from ..config import settings
from ..exceptions import GeolocationUnavailableError, PersistenceCorruptError
from ..models.domain import Coordinate
from ..persistence.serializers import dump_coordinate, load_coordinate
from ..persistence.storage import KeyValueStore

LOCATION_KEY = "user-location"

logger = logging.getLogger(__name__)


class GeolocationProvider(Protocol):
    """Source of the device position.

    Implementations raise ``GeolocationUnavailableError`` on denial, timeout
    or missing capability.
    """

    async def locate(self) -> Coordinate:
        ...


class StaticGeolocationProvider:
    """Always reports the same position."""

    def __init__(self, coordinate: Coordinate) -> None:
        self.coordinate = coordinate

    async def locate(self) -> Coordinate:
        return self.coordinate


def _coordinate_from_payload(payload: Any) -> Coordinate:
    if not isinstance(payload, dict):
        raise ValueError("Geolocation response is not a JSON object")
    lat = payload.get("latitude", payload.get("lat"))
    lon = payload.get("longitude", payload.get("lon", payload.get("lng")))
    if lat is None or lon is None:
        raise ValueError("Geolocation response has no latitude/longitude")
    return Coordinate(float(lat), float(lon))


class IpGeolocationProvider:
    """Approximates the position from the caller's IP address over HTTP."""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url or settings.geolocation_url
        if not self.url:
            raise ValueError("Geolocation URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.geolocation_timeout_seconds
        self._client = client

    async def _fetch(self, client: httpx.AsyncClient) -> Any:
        response = await client.get(self.url, headers={"User-Agent": settings.user_agent})
        response.raise_for_status()
        return response.json()

    async def locate(self) -> Coordinate:
        try:
            if self._client is not None:
                payload = await self._fetch(self._client)
            else:
                async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout)) as client:
                    payload = await self._fetch(client)
            return _coordinate_from_payload(payload)
        except httpx.TimeoutException as exc:
            raise GeolocationUnavailableError(f"Geolocation request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise GeolocationUnavailableError(f"Geolocation request failed: {exc}") from exc
        except (ValueError, TypeError) as exc:
            raise GeolocationUnavailableError(f"Unusable geolocation response: {exc}") from exc


def build_default_provider() -> Optional[GeolocationProvider]:
    """Return the configured provider, or None when no capability is available."""

    if settings.geolocation_url:
        return IpGeolocationProvider()
    return None


class LocationResolver:
    """Returns the user's position, never failing.

    Order of preference: the cached coordinate, then the provider, then the
    fallback coordinate. Whatever is returned is cached so later calls are
    stable until ``resolve(force_refresh=True)`` or ``clear_cache()``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        provider: GeolocationProvider | None = None,
        fallback: Coordinate | None = None,
    ) -> None:
        self._store = store
        self._provider = provider
        self.fallback = fallback or settings.fallback_coordinate

    def cached(self) -> Optional[Coordinate]:
        payload = self._store.get(LOCATION_KEY)
        if payload is None:
            return None
        try:
            return load_coordinate(payload)
        except PersistenceCorruptError as exc:
            logger.warning(f"{exc}. Ignoring cached location")
            return None

    def clear_cache(self) -> None:
        self._store.delete(LOCATION_KEY)

    async def _locate(self) -> Coordinate:
        if self._provider is None:
            logger.error("Geolocation is not supported, using fallback location")
            return self.fallback
        try:
            return await self._provider.locate()
        except GeolocationUnavailableError as exc:
            logger.error(f"Error getting location: {exc}. Using fallback location")
        except Exception as exc:  # provider bugs must not reach the caller
            logger.exception(f"Unexpected geolocation failure: {exc}. Using fallback location")
        return self.fallback

    async def resolve(self, *, force_refresh: bool = False) -> Coordinate:
        if not force_refresh:
            cached = self.cached()
            if cached is not None:
                return cached

        location = await self._locate()
        try:
            self._store.set(LOCATION_KEY, dump_coordinate(location))
        except OSError as exc:
            logger.warning(f"Could not cache resolved location: {exc}")
        return location
