"""Catalog state and the transitions that drive page loading.

Everything in this module is synchronous and free of I/O.  A transition takes
the :class:`CatalogState`, mutates it in place and returns the effects the
caller must carry out (fetching a page, persisting favorites).  The
:class:`~app.services.catalog.CatalogController` is the only production caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .commands import (
    Command,
    Effect,
    FetchFailed,
    FetchPage,
    FetchPending,
    FetchSucceeded,
    LoadFavorites,
    PersistFavorites,
    RequestPage,
    RestoreFavorites,
    SetFavorite,
    SetSort,
)
from .favorites import FavoritesStore
from .models import DEFAULT_PAGE, DEFAULT_SORT_BY, DEFAULT_SORT_ORDER
from .pages import EntityStore, LoadStatus, PageCache, PageState

logger = logging.getLogger(__name__)


@dataclass
class CatalogState:
    """Root state owned by a single controller."""

    current_page_index: int = DEFAULT_PAGE
    requested_page_index: int | None = None
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER
    total_pages: int = 0
    pages: PageCache = field(default_factory=PageCache)
    favorites: FavoritesStore = field(default_factory=FavoritesStore)

    def page(self, page_index: int) -> PageState:
        """Return the cached page or an idle one tagged with the current sort."""

        return self.pages.get(page_index, self.sort_by, self.sort_order)


def apply_command(state: CatalogState, command: Command) -> list[Effect]:
    """Apply ``command`` to ``state`` and return the resulting effects."""

    if isinstance(command, RequestPage):
        return _request_page(state, command)
    if isinstance(command, SetSort):
        state.sort_by = command.sort_by
        state.sort_order = command.sort_order
        return []
    if isinstance(command, FetchPending):
        _fetch_pending(state, command.page_index, command.sort_by, command.sort_order)
        return []
    if isinstance(command, FetchSucceeded):
        _fetch_succeeded(state, command)
        return []
    if isinstance(command, FetchFailed):
        _fetch_failed(state, command)
        return []
    if isinstance(command, SetFavorite):
        return _set_favorite(state, command)
    if isinstance(command, RestoreFavorites):
        if state.favorites.ids == command.failed:
            state.favorites.replace(command.ids)
        return []
    if isinstance(command, LoadFavorites):
        state.favorites.replace(command.ids)
        return []
    raise TypeError(f"Unsupported command: {command!r}")


def _request_page(state: CatalogState, command: RequestPage) -> list[Effect]:
    state.sort_by = command.sort_by
    state.sort_order = command.sort_order
    existing = state.page(command.page_index)

    if existing.status is LoadStatus.LOADING:
        # The in-flight fetch settles the page on its own.
        return []

    if existing.status is LoadStatus.SUCCEEDED and existing.matches_sort(
        command.sort_by, command.sort_order
    ):
        state.current_page_index = command.page_index
        state.requested_page_index = None
        return []

    # Absent, idle, failed, or cached under another sort.
    _fetch_pending(state, command.page_index, command.sort_by, command.sort_order)
    return [FetchPage(command.page_index, command.sort_by, command.sort_order)]


def _fetch_pending(
    state: CatalogState, page_index: int, sort_by: str, sort_order: str
) -> None:
    state.pages.put(
        page_index,
        PageState(status=LoadStatus.LOADING, sort_by=sort_by, sort_order=sort_order),
    )
    state.requested_page_index = page_index


def _fetch_succeeded(state: CatalogState, command: FetchSucceeded) -> None:
    state.pages.put(
        command.page_index,
        PageState(
            status=LoadStatus.SUCCEEDED,
            items=EntityStore(command.movies),
            sort_by=command.sort_by,
            sort_order=command.sort_order,
        ),
    )
    state.total_pages = command.total_pages
    if state.requested_page_index == command.page_index:
        state.current_page_index = command.page_index
        state.requested_page_index = None
    else:
        logger.debug(
            "Page %s loaded after being superseded by page %s",
            command.page_index,
            state.requested_page_index,
        )


def _fetch_failed(state: CatalogState, command: FetchFailed) -> None:
    page = state.pages.get(command.page_index, command.sort_by, command.sort_order)
    page.status = LoadStatus.FAILED
    page.error = command.message
    state.pages.put(command.page_index, page)


def _set_favorite(state: CatalogState, command: SetFavorite) -> list[Effect]:
    if not state.favorites.set_favorite(command.movie_id, command.flag):
        return []
    return [PersistFavorites(ids=state.favorites.ids)]
