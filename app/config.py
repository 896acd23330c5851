"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import SORT_BY_OPTIONS, SORT_ORDER_OPTIONS, SortBy, SortOrder


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="MovieShelf", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    tmdb_api_key: str | None = Field(default=None, alias="TMDB_API_KEY")
    tmdb_api_url: HttpUrl = Field(
        default="https://api.themoviedb.org/3", alias="TMDB_API_URL"
    )
    tmdb_image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w300", alias="TMDB_IMAGE_BASE_URL"
    )
    tmdb_language: str = Field(default="en-US", alias="TMDB_LANGUAGE")
    tmdb_max_pages: int = Field(default=500, alias="TMDB_MAX_PAGES", ge=1, le=500)

    default_sort_by: SortBy = Field(default="popularity", alias="DEFAULT_SORT_BY")
    default_sort_order: SortOrder = Field(default="desc", alias="DEFAULT_SORT_ORDER")

    favorites_storage_key: str = Field(
        default="discover_favorites", alias="FAVORITES_STORAGE_KEY", min_length=1
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./movieshelf.db", alias="DATABASE_URL"
    )

    pagination_sibling_count: int = Field(
        default=2, alias="PAGINATION_SIBLING_COUNT", ge=0, le=10
    )
    pagination_boundary_count: int = Field(
        default=2, alias="PAGINATION_BOUNDARY_COUNT", ge=0, le=10
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("default_sort_by", mode="before")
    @classmethod
    def _parse_sort_by(cls, value: object) -> object:
        """Accept sort keys regardless of case or dash/underscore spelling."""

        if value is None or value == "":
            return "popularity"
        if isinstance(value, str):
            slug = value.strip().replace("-", "_").lower()
            if slug not in SORT_BY_OPTIONS:
                raise ValueError("Unknown sort key configured")
            return slug
        return value

    @field_validator("default_sort_order", mode="before")
    @classmethod
    def _parse_sort_order(cls, value: object) -> object:
        if value is None or value == "":
            return "desc"
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered not in SORT_ORDER_OPTIONS:
                raise ValueError("Sort order must be 'asc' or 'desc'")
            return lowered
        return value

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
