"""Pydantic models describing catalog payloads."""

from __future__ import annotations

from typing import Literal, get_args

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

SortBy = Literal[
    "popularity",
    "release_date",
    "primary_release_date",
    "revenue",
    "original_title",
    "vote_average",
    "vote_count",
]
SortOrder = Literal["asc", "desc"]

SORT_BY_OPTIONS: tuple[str, ...] = get_args(SortBy)
SORT_ORDER_OPTIONS: tuple[str, ...] = get_args(SortOrder)

DEFAULT_PAGE = 1
DEFAULT_SORT_BY: SortBy = "popularity"
DEFAULT_SORT_ORDER: SortOrder = "desc"


def sort_param(sort_by: str, sort_order: str) -> str:
    """Return the ``sort_by`` query value understood by TMDB discover."""

    return f"{sort_by}.{sort_order}"


class Movie(BaseModel):
    """A single catalog record as shown to the user."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    image_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("image_url", "imageUrl", "image"),
        serialization_alias="imageUrl",
    )
    title: str = ""
    overview: str = ""
    rating: float | None = None
    year: int | None = None

    def display_title(self) -> str:
        """Return a human-friendly title even when TMDB omits one."""

        title = self.title.strip()
        if title:
            return title
        return f"TMDb {self.id}"

    def to_payload(self, *, favorite: bool = False) -> dict[str, object]:
        """Return the JSON shape served by the catalog API."""

        payload = self.model_dump(mode="json", by_alias=True)
        payload["title"] = self.display_title()
        payload["favorite"] = favorite
        return payload


class MoviesPage(BaseModel):
    """One page of results returned by a data source."""

    movies: list[Movie] = Field(default_factory=list)
    total_pages: int = Field(default=0, ge=0)


class PageRequest(BaseModel):
    """Body of a page request issued through the HTTP API."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(ge=1)
    sort_by: SortBy | None = Field(
        default=None, validation_alias=AliasChoices("sortBy", "sort_by")
    )
    sort_order: SortOrder | None = Field(
        default=None, validation_alias=AliasChoices("sortOrder", "sort_order")
    )
    wait: bool = False


class SortRequest(BaseModel):
    """Body of a sort change issued through the HTTP API."""

    model_config = ConfigDict(populate_by_name=True)

    sort_by: SortBy = Field(validation_alias=AliasChoices("sortBy", "sort_by"))
    sort_order: SortOrder = Field(
        default=DEFAULT_SORT_ORDER,
        validation_alias=AliasChoices("sortOrder", "sort_order"),
    )
    wait: bool = False
