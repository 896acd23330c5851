"""Page-number window rendered next to the catalog grid."""

from __future__ import annotations

from typing import Any, Literal, Union

START_ELLIPSIS = "start-ellipsis"
END_ELLIPSIS = "end-ellipsis"

PaginationItem = Union[int, Literal["start-ellipsis", "end-ellipsis"]]


def _inclusive(start: int, end: int) -> list[int]:
    return list(range(start, end + 1))


def pagination_items(
    page: int,
    count: int,
    *,
    sibling_count: int = 2,
    boundary_count: int = 2,
) -> list[PaginationItem]:
    """Return page numbers to display, collapsing gaps into ellipsis markers.

    ``boundary_count`` pages are always shown at each end and ``sibling_count``
    pages on either side of ``page``.  The window keeps a constant width while
    ``page`` moves, so a gap of a single page is shown as the page itself
    rather than an ellipsis.
    """

    if count <= 0:
        return []

    start_pages = _inclusive(1, min(boundary_count, count))
    end_pages = _inclusive(max(count - boundary_count + 1, boundary_count + 1), count)

    siblings_start = max(
        min(page - sibling_count, count - boundary_count - sibling_count * 2 - 1),
        boundary_count + 2,
    )
    siblings_end = min(
        max(page + sibling_count, boundary_count + sibling_count * 2 + 2),
        end_pages[0] - 2 if end_pages else count - 1,
    )

    items: list[PaginationItem] = list(start_pages)
    if siblings_start > boundary_count + 2:
        items.append(START_ELLIPSIS)
    elif boundary_count + 1 < count - boundary_count:
        items.append(boundary_count + 1)

    items.extend(_inclusive(siblings_start, siblings_end))

    if siblings_end < count - boundary_count - 1:
        items.append(END_ELLIPSIS)
    elif count - boundary_count > boundary_count:
        items.append(count - boundary_count)

    items.extend(end_pages)
    return items


def pagination_window(
    page: int,
    count: int,
    *,
    requested_page: int | None = None,
    sibling_count: int = 2,
    boundary_count: int = 2,
) -> list[dict[str, Any]]:
    """Decorate :func:`pagination_items` with selection flags."""

    window: list[dict[str, Any]] = []
    for item in pagination_items(
        page, count, sibling_count=sibling_count, boundary_count=boundary_count
    ):
        if isinstance(item, str):
            window.append({"type": item})
            continue
        window.append(
            {
                "type": "page",
                "page": item,
                "selected": item == page,
                "requested": item == requested_page,
            }
        )
    return window
