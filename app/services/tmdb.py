"""Discover-endpoint client for The Movie Database (TMDB)."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..models import Movie, MoviesPage, sort_param
from ..utils import build_image_url, extract_year, parse_rating

logger = logging.getLogger(__name__)

DISCOVER_MOVIES_ENDPOINT = "/discover/movie"


class DataSourceError(Exception):
    """Raised when a page of movies cannot be loaded."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class DataSource(Protocol):
    async def fetch_page(
        self, page_index: int, sort_by: str, sort_order: str
    ) -> MoviesPage:
        ...


class TMDBClient:
    """Client loading sorted pages of movies from TMDB discover."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        if not settings.tmdb_api_key:
            raise ValueError("TMDB API key is required when initialising TMDBClient")
        self._settings = settings
        self._client = http_client

    async def fetch_page(
        self, page_index: int, sort_by: str, sort_order: str
    ) -> MoviesPage:
        """Return one page of movies sorted by ``sort_by``/``sort_order``."""

        params = {
            "api_key": self._settings.tmdb_api_key,
            "language": self._settings.tmdb_language,
            "include_adult": "false",
            "page": page_index,
            "sort_by": sort_param(sort_by, sort_order),
        }
        try:
            response = await self._client.get(DISCOVER_MOVIES_ENDPOINT, params=params)
        except httpx.HTTPError as exc:
            logger.warning("TMDB request for page %s failed: %s", page_index, exc)
            raise DataSourceError(f"Failed to load movies: {exc}") from exc

        data = self._decode(response)
        if response.status_code != 200:
            details = " ".join(
                str(part)
                for part in (data.get("status_code"), data.get("status_message"))
                if part not in (None, "")
            )
            message = f"Failed to load movies, because of [{response.status_code}]"
            if details:
                message = f"{message} {details}"
            logger.warning("TMDB discover page %s failed: %s", page_index, message)
            raise DataSourceError(message, status_code=response.status_code)

        results = data.get("results")
        if not isinstance(results, list):
            raise DataSourceError("Failed to load movies: malformed response payload")

        movies: list[Movie] = []
        for entry in results:
            movie = self._to_movie(entry)
            if movie is not None:
                movies.append(movie)

        total_pages = data.get("total_pages")
        if not isinstance(total_pages, int) or total_pages < 0:
            total_pages = 0
        return MoviesPage(
            movies=movies,
            total_pages=min(total_pages, self._settings.tmdb_max_pages),
        )

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            if response.status_code == 200:
                raise DataSourceError(
                    "Failed to load movies: response was not valid JSON"
                ) from None
            return {}
        return payload if isinstance(payload, dict) else {}

    def _to_movie(self, entry: object) -> Movie | None:
        if not isinstance(entry, dict):
            return None
        try:
            return Movie(
                id=entry["id"],
                image_url=build_image_url(
                    entry.get("poster_path"), self._settings.tmdb_image_base_url
                ),
                title=entry.get("title") or entry.get("original_title") or "",
                overview=entry.get("overview") or "",
                rating=parse_rating(entry.get("vote_average")),
                year=extract_year(entry.get("release_date")),
            )
        except (KeyError, ValidationError):
            logger.debug("Skipping malformed TMDB result: %s", entry)
            return None
