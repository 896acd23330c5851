"""Tests for the TMDB discover client."""

from __future__ import annotations

from typing import Any, cast

import httpx
import pytest

from app.config import Settings
from app.services.tmdb import DataSourceError, TMDBClient


def build_settings(**overrides: Any) -> Settings:
    """Return a settings object with defaults suitable for tests."""

    base = {"TMDB_API_KEY": "tmdb-key"}
    base.update(overrides)
    return Settings(_env_file=None, **base)  # type: ignore[arg-type]


def test_client_requires_api_key() -> None:
    with pytest.raises(ValueError, match="TMDB API key is required"):
        TMDBClient(Settings(_env_file=None), cast(httpx.AsyncClient, object()))


@pytest.mark.anyio("asyncio")
async def test_fetch_page_maps_results_and_sends_sort() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "page": 3,
                "total_pages": 42,
                "results": [
                    {
                        "id": 603,
                        "title": "The Matrix",
                        "overview": "A hacker learns the truth.",
                        "poster_path": "/matrix.jpg",
                        "vote_average": 8.2,
                        "release_date": "1999-03-30",
                    },
                    {
                        "id": 604,
                        "title": "The Matrix Reloaded",
                        "poster_path": None,
                        "vote_average": "7.04",
                        "release_date": "",
                    },
                    {"title": "Missing id"},
                ],
            },
        )

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url="https://api.example.com/3") as http_client:
        client = TMDBClient(build_settings(), http_client)
        page = await client.fetch_page(3, "vote_average", "asc")

    assert requests[0].url.path == "/3/discover/movie"
    params = requests[0].url.params
    assert params["sort_by"] == "vote_average.asc"
    assert params["page"] == "3"
    assert params["api_key"] == "tmdb-key"

    assert page.total_pages == 42
    assert [movie.id for movie in page.movies] == [603, 604]
    matrix, reloaded = page.movies
    assert matrix.image_url == "https://image.tmdb.org/t/p/w300/matrix.jpg"
    assert matrix.rating == 8.2
    assert matrix.year == 1999
    assert matrix.overview == "A hacker learns the truth."
    assert reloaded.image_url is None
    assert reloaded.rating == 7.0
    assert reloaded.year is None


@pytest.mark.anyio("asyncio")
async def test_fetch_page_clamps_total_pages() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": [], "total_pages": 38_000})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url="https://api.example.com") as http_client:
        client = TMDBClient(build_settings(TMDB_MAX_PAGES=500), http_client)
        page = await client.fetch_page(1, "popularity", "desc")

    assert page.total_pages == 500
    assert page.movies == []


@pytest.mark.anyio("asyncio")
async def test_fetch_page_raises_descriptive_error_on_failure() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            401,
            json={"status_code": 7, "status_message": "Invalid API key."},
        )

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url="https://api.example.com") as http_client:
        client = TMDBClient(build_settings(), http_client)
        with pytest.raises(DataSourceError) as excinfo:
            await client.fetch_page(1, "popularity", "desc")

    assert str(excinfo.value) == (
        "Failed to load movies, because of [401] 7 Invalid API key."
    )
    assert excinfo.value.status_code == 401


@pytest.mark.anyio("asyncio")
async def test_fetch_page_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url="https://api.example.com") as http_client:
        client = TMDBClient(build_settings(), http_client)
        with pytest.raises(DataSourceError, match="connection refused"):
            await client.fetch_page(1, "popularity", "desc")


@pytest.mark.anyio("asyncio")
async def test_fetch_page_rejects_malformed_payload() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": "nope"})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url="https://api.example.com") as http_client:
        client = TMDBClient(build_settings(), http_client)
        with pytest.raises(DataSourceError, match="malformed"):
            await client.fetch_page(1, "popularity", "desc")
