"""Reverse geocoding of a coordinate to a human-readable place name."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..config import settings
from ..models.domain import Coordinate

logger = logging.getLogger(__name__)

_PLACE_KEYS = ("city", "town", "village", "hamlet")


def place_name_from_payload(payload: Any) -> Optional[str]:
    """Pick the most specific settlement name from a Nominatim reverse response."""

    if not isinstance(payload, dict):
        return None
    address = payload.get("address") or {}
    if isinstance(address, dict):
        for key in _PLACE_KEYS:
            value = address.get(key)
            if value:
                return str(value)
    display_name = payload.get("display_name")
    if isinstance(display_name, str) and display_name.strip():
        return display_name.split(",")[0].strip() or None
    return None


async def reverse_geocode(
    coordinate: Coordinate,
    *,
    client: httpx.AsyncClient | None = None,
) -> Optional[str]:
    """Look up the place name for ``coordinate``; returns None when unavailable."""

    url = f"{settings.nominatim_url.rstrip('/')}/reverse"
    params = {
        "format": "json",
        "lat": coordinate.latitude,
        "lon": coordinate.longitude,
        "zoom": 18,
        "addressdetails": 1,
    }
    headers = {"Accept-Language": settings.geocoding_language, "User-Agent": settings.user_agent}

    try:
        if client is not None:
            response = await client.get(url, params=params, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=httpx.Timeout(settings.geolocation_timeout_seconds)) as owned:
                response = await owned.get(url, params=params, headers=headers)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPError as exc:
        logger.warning(f"Reverse geocoding failed for {coordinate}: {exc}")
        return None
    except ValueError as exc:
        logger.warning(f"Reverse geocoding returned invalid JSON: {exc}")
        return None

    return place_name_from_payload(payload)
