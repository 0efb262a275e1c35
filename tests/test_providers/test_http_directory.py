"""
Tests for consult_recommender/providers/http_directory.py.

All requests go through ``httpx.MockTransport``; no network access.

What we test
------------
  - GET {base}/experts with the industry as a query parameter.
  - Bare list and {"experts": [...]} bodies both parse.
  - Non-2xx, transport errors, invalid JSON, wrong shape and malformed
    records all raise ProviderUnavailableError.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from consult_recommender.providers.base import ProviderUnavailableError
from consult_recommender.providers.http_directory import HttpExpertDirectory

_EXPERTS = [
    {"id": "9", "name": "Ada Park", "specialization": "Tokenomics", "rating": 4.7},
    {"id": "8", "name": "Ben Ito", "specialization": "Custody", "rating": 4.2,
     "industries": ["Finance"]},
]


def _directory(handler) -> HttpExpertDirectory:
    return HttpExpertDirectory(
        base_url="http://directory.test/",
        transport=httpx.MockTransport(handler),
    )


class TestHttpExpertDirectory:
    def test_request_shape_and_list_body(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_EXPERTS)

        experts = asyncio.run(_directory(handler).by_industry("Real Estate"))

        assert [e.id for e in experts] == ["9", "8"]
        assert experts[1].industries == ["Finance"]
        assert seen[0].method == "GET"
        assert seen[0].url.path == "/experts"
        assert seen[0].url.params["industry"] == "Real Estate"

    def test_wrapped_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"experts": _EXPERTS[:1]})

        experts = asyncio.run(_directory(handler).by_industry("DeFi"))
        assert [e.name for e in experts] == ["Ada Park"]

    def test_empty_list(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[])

        assert asyncio.run(_directory(handler).by_industry("DeFi")) == []

    def test_server_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, json={"error": "down"})

        with pytest.raises(ProviderUnavailableError, match="HTTP 503"):
            asyncio.run(_directory(handler).by_industry("DeFi"))

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ProviderUnavailableError, match="connection refused"):
            asyncio.run(_directory(handler).by_industry("DeFi"))

    def test_invalid_json(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>not json</html>")

        with pytest.raises(ProviderUnavailableError, match="invalid JSON"):
            asyncio.run(_directory(handler).by_industry("DeFi"))

    def test_wrong_shape(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": []})

        with pytest.raises(ProviderUnavailableError, match="expected a list"):
            asyncio.run(_directory(handler).by_industry("DeFi"))

    def test_malformed_record(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"id": "1", "name": "No Rating"}])

        with pytest.raises(ProviderUnavailableError, match="malformed"):
            asyncio.run(_directory(handler).by_industry("DeFi"))
