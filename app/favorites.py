"""Favorite movie ids and their JSON storage format."""

from __future__ import annotations

import json
import logging
from typing import Iterable

logger = logging.getLogger(__name__)


class FavoritesSerializationError(ValueError):
    """Raised when the favorites set cannot be encoded for storage."""


def serialize_favorites(ids: Iterable[int]) -> str:
    """Encode favorite ids as a JSON array of integers."""

    values = list(ids)
    if not all(_is_movie_id(value) for value in values):
        raise FavoritesSerializationError("Favorite ids must be integers")
    try:
        return json.dumps(values, separators=(",", ":"))
    except (TypeError, ValueError) as exc:  # pragma: no cover - guarded above
        raise FavoritesSerializationError(str(exc)) from exc


def parse_favorites(raw: str | None) -> tuple[int, ...]:
    """Decode stored favorites, treating anything malformed as empty."""

    if raw is None:
        return ()
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring unparsable favorites payload")
        return ()
    if not isinstance(parsed, list) or not all(_is_movie_id(value) for value in parsed):
        logger.warning("Ignoring favorites payload that is not a list of ids")
        return ()
    return tuple(dict.fromkeys(parsed))


def _is_movie_id(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class FavoritesStore:
    """Insertion-ordered set of favorite movie ids."""

    def __init__(self, ids: Iterable[int] = ()):
        self._ids: dict[int, None] = dict.fromkeys(ids)

    @property
    def ids(self) -> tuple[int, ...]:
        return tuple(self._ids)

    def is_favorite(self, movie_id: int) -> bool:
        return movie_id in self._ids

    def set_favorite(self, movie_id: int, flag: bool) -> bool:
        """Add or remove ``movie_id``; return whether the set changed."""

        present = movie_id in self._ids
        if flag:
            if present:
                return False
            self._ids[movie_id] = None
            return True
        if not present:
            return False
        del self._ids[movie_id]
        return True

    def replace(self, ids: Iterable[int]) -> None:
        self._ids = dict.fromkeys(ids)

    def __contains__(self, movie_id: object) -> bool:
        return movie_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
