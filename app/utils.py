"""Utility helpers for the MovieShelf service."""

from __future__ import annotations

import math


def build_image_url(path: str | None, base_url: str) -> str | None:
    """Join a TMDB image path onto the configured image base URL."""

    if not path:
        return None
    if path.startswith("http"):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def extract_year(date_value: object) -> int | None:
    """Return the year of a ``YYYY-MM-DD`` date string."""

    if not isinstance(date_value, str) or len(date_value) < 4:
        return None
    try:
        return int(date_value[:4])
    except ValueError:
        return None


def parse_rating(value: object) -> float | None:
    """Normalise TMDB's ``vote_average`` which may arrive as text."""

    if value is None or isinstance(value, bool):
        return None
    try:
        rating = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if math.isnan(rating):
        return None
    return round(rating, 1)
