"""Per-page cache of fetched movies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from .models import DEFAULT_SORT_BY, DEFAULT_SORT_ORDER, Movie


class LoadStatus(str, Enum):
    """Lifecycle of a single cached page."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class EntityStore:
    """Ordered, id-keyed collection of movies."""

    def __init__(self, movies: Iterable[Movie] = ()):
        self._entities: dict[int, Movie] = {}
        self.add_many(movies)

    def add_many(self, movies: Iterable[Movie]) -> None:
        """Insert movies that are not yet present, keeping first-seen order."""

        for movie in movies:
            self._entities.setdefault(movie.id, movie)

    def replace_all(self, movies: Iterable[Movie]) -> None:
        """Drop every stored movie and insert ``movies`` in order."""

        self._entities.clear()
        self.add_many(movies)

    def get(self, movie_id: int) -> Movie | None:
        return self._entities.get(movie_id)

    def ids(self) -> list[int]:
        return list(self._entities)

    def values(self) -> list[Movie]:
        return list(self._entities.values())

    def __contains__(self, movie_id: object) -> bool:
        return movie_id in self._entities

    def __iter__(self) -> Iterator[Movie]:
        return iter(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityStore):
            return NotImplemented
        return list(self._entities.items()) == list(other._entities.items())

    def __repr__(self) -> str:
        return f"EntityStore(ids={self.ids()!r})"


@dataclass
class PageState:
    """Snapshot of one page index: its status, items and sort tag."""

    status: LoadStatus = LoadStatus.IDLE
    items: EntityStore = field(default_factory=EntityStore)
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER
    error: str | None = None

    def matches_sort(self, sort_by: str, sort_order: str) -> bool:
        """Return whether the page was fetched under the given sort."""

        return self.sort_by == sort_by and self.sort_order == sort_order


class PageCache:
    """Sparse mapping from 1-based page index to :class:`PageState`.

    Missing indices behave like an idle page with no items; :meth:`get` hands
    out such a page without storing it.
    """

    def __init__(self) -> None:
        self._pages: dict[int, PageState] = {}

    def get(
        self,
        page_index: int,
        sort_by: str = DEFAULT_SORT_BY,
        sort_order: str = DEFAULT_SORT_ORDER,
    ) -> PageState:
        page = self._pages.get(page_index)
        if page is None:
            return PageState(sort_by=sort_by, sort_order=sort_order)
        return page

    def put(self, page_index: int, page: PageState) -> None:
        self._pages[page_index] = page

    def indices(self) -> list[int]:
        return sorted(self._pages)

    def __contains__(self, page_index: object) -> bool:
        return page_index in self._pages

    def __len__(self) -> int:
        return len(self._pages)
