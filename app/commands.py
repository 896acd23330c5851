"""Commands accepted by the catalog state and the effects they produce."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .models import Movie


@dataclass(frozen=True, slots=True)
class RequestPage:
    """User asked to view ``page_index`` under the given sort."""

    page_index: int
    sort_by: str
    sort_order: str


@dataclass(frozen=True, slots=True)
class SetSort:
    sort_by: str
    sort_order: str


@dataclass(frozen=True, slots=True)
class FetchPending:
    """A fetch for ``page_index`` has been dispatched."""

    page_index: int
    sort_by: str
    sort_order: str


@dataclass(frozen=True, slots=True)
class FetchSucceeded:
    page_index: int
    sort_by: str
    sort_order: str
    movies: tuple[Movie, ...]
    total_pages: int


@dataclass(frozen=True, slots=True)
class FetchFailed:
    page_index: int
    sort_by: str
    sort_order: str
    message: str


@dataclass(frozen=True, slots=True)
class SetFavorite:
    movie_id: int
    flag: bool


@dataclass(frozen=True, slots=True)
class RestoreFavorites:
    """Roll favorites back to the stored ``ids`` after ``failed`` could not be persisted."""

    ids: tuple[int, ...]
    failed: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class LoadFavorites:
    """Favorites rehydrated from storage at startup."""

    ids: tuple[int, ...]


Command = Union[
    RequestPage,
    SetSort,
    FetchPending,
    FetchSucceeded,
    FetchFailed,
    SetFavorite,
    RestoreFavorites,
    LoadFavorites,
]


@dataclass(frozen=True, slots=True)
class FetchPage:
    """Ask the data source for a page; the result comes back as a command."""

    page_index: int
    sort_by: str
    sort_order: str


@dataclass(frozen=True, slots=True)
class PersistFavorites:
    """Write the favorites set ``ids`` to storage."""

    ids: tuple[int, ...]


Effect = Union[FetchPage, PersistFavorites]
