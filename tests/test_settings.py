"""Configuration settings behaviour tests."""

from __future__ import annotations

import pytest

from app.config import Settings


def test_defaults_match_discover_catalog() -> None:
    settings = Settings(_env_file=None)

    assert settings.default_sort_by == "popularity"
    assert settings.default_sort_order == "desc"
    assert settings.favorites_storage_key == "discover_favorites"
    assert settings.tmdb_max_pages == 500
    assert settings.pagination_sibling_count == 2
    assert settings.pagination_boundary_count == 2


def test_sort_settings_are_normalised() -> None:
    """Sort keys should be parsed case-insensitively with dash spelling."""

    settings = Settings(
        _env_file=None, DEFAULT_SORT_BY="Vote-Average", DEFAULT_SORT_ORDER="ASC"
    )

    assert settings.default_sort_by == "vote_average"
    assert settings.default_sort_order == "asc"


def test_blank_sort_settings_fall_back_to_defaults() -> None:
    settings = Settings(_env_file=None, DEFAULT_SORT_BY="", DEFAULT_SORT_ORDER="")

    assert settings.default_sort_by == "popularity"
    assert settings.default_sort_order == "desc"


def test_unknown_sort_key_raises() -> None:
    with pytest.raises(ValueError, match="Unknown sort key configured"):
        Settings(_env_file=None, DEFAULT_SORT_BY="box_office")


def test_invalid_sort_order_raises() -> None:
    with pytest.raises(ValueError, match="Sort order must be"):
        Settings(_env_file=None, DEFAULT_SORT_ORDER="sideways")


def test_max_pages_is_bounded() -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, TMDB_MAX_PAGES=501)
