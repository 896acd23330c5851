"""Read-only views derived from :class:`~app.state.CatalogState`."""

from __future__ import annotations

from typing import Any

from .models import Movie
from .pages import EntityStore, LoadStatus, PageState
from .pagination import pagination_window
from .state import CatalogState


def current_page(state: CatalogState) -> PageState:
    return state.page(state.current_page_index)


def requested_page(state: CatalogState) -> PageState:
    if state.requested_page_index is None:
        return PageState(sort_by=state.sort_by, sort_order=state.sort_order)
    return state.page(state.requested_page_index)


def current_page_status(state: CatalogState) -> LoadStatus:
    return current_page(state).status


def requested_page_status(state: CatalogState) -> LoadStatus:
    return requested_page(state).status


def requested_page_error(state: CatalogState) -> str | None:
    """Return the error of the outstanding request, if it failed."""

    page = requested_page(state)
    if page.status is LoadStatus.FAILED:
        return page.error
    return None


def is_loading(state: CatalogState) -> bool:
    return requested_page_status(state) is LoadStatus.LOADING


def movies_data(state: CatalogState) -> EntityStore:
    """Movies of the current page; empty until that page has loaded."""

    page = current_page(state)
    if page.status is LoadStatus.SUCCEEDED:
        return page.items
    return EntityStore()


def movie_ids(state: CatalogState) -> list[int]:
    return movies_data(state).ids()


def movie_by_id(state: CatalogState, movie_id: int) -> Movie | None:
    return movies_data(state).get(movie_id)


def favorite_flag(state: CatalogState, movie_id: int) -> bool:
    return state.favorites.is_favorite(movie_id)


def favorite_ids(state: CatalogState) -> list[int]:
    return list(state.favorites.ids)


def current_sort(state: CatalogState) -> tuple[str, str]:
    return state.sort_by, state.sort_order


def total_pages(state: CatalogState) -> int:
    return state.total_pages


def catalog_view(
    state: CatalogState,
    *,
    sibling_count: int = 2,
    boundary_count: int = 2,
) -> dict[str, Any]:
    """Return the JSON payload describing what the catalog screen shows."""

    movies = [
        movie.to_payload(favorite=favorite_flag(state, movie.id))
        for movie in movies_data(state)
    ]
    return {
        "currentPage": state.current_page_index,
        "currentPageStatus": current_page_status(state).value,
        "requestedPage": state.requested_page_index,
        "requestedPageStatus": requested_page_status(state).value,
        "requestedPageError": requested_page_error(state),
        "loading": is_loading(state),
        "sortBy": state.sort_by,
        "sortOrder": state.sort_order,
        "totalPages": total_pages(state),
        "movies": movies,
        "pagination": pagination_window(
            state.current_page_index,
            state.total_pages,
            requested_page=state.requested_page_index,
            sibling_count=sibling_count,
            boundary_count=boundary_count,
        ),
    }
