import asyncio
from typing import Optional

import httpx
import pytest

from broodbot.models.domain import Coordinate
from broodbot.services.geocoding import place_name_from_payload, reverse_geocode

UTRECHT = Coordinate(52.0907, 5.1214)


def _geocode_with(handler) -> Optional[str]:
    async def run() -> Optional[str]:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await reverse_geocode(UTRECHT, client=client)

    return asyncio.run(run())


def test_reverse_geocode_sends_nominatim_query():
    seen: dict[str, httpx.Request] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json={"address": {"city": "Utrecht"}, "display_name": "Dom, Utrecht"})

    place = _geocode_with(handler)

    request = seen["request"]
    assert place == "Utrecht"
    assert request.url.path == "/reverse"
    assert request.url.params["format"] == "json"
    assert request.url.params["lat"] == "52.0907"
    assert request.url.params["lon"] == "5.1214"
    assert request.headers["Accept-Language"] == "nl"
    assert request.headers["User-Agent"] == "BroodBot/1.0"


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"address": {"town": "Zeist", "village": "Huis ter Heide"}}, "Zeist"),
        ({"address": {"hamlet": "Reet"}}, "Reet"),
        ({"address": {}, "display_name": "Stationsplein, Utrecht, Nederland"}, "Stationsplein"),
        ({"address": {}}, None),
        (["not", "an", "object"], None),
    ],
)
def test_place_name_from_payload(payload, expected):
    assert place_name_from_payload(payload) == expected


@pytest.mark.parametrize("response", [httpx.Response(500), httpx.Response(200, text="<html>")])
def test_reverse_geocode_failures_return_none(response):
    assert _geocode_with(lambda request: response) is None


def test_reverse_geocode_network_error_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    assert _geocode_with(handler) is None
