"""Runtime owner of the catalog state.

:class:`CatalogController` feeds commands into :func:`app.state.apply_command`
and carries out the effects it returns: page fetches run as asyncio tasks whose
results re-enter the controller as commands, and favorites are written to the
key-value storage before :meth:`CatalogController.set_favorite` returns.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from ..commands import (
    Command,
    Effect,
    FetchFailed,
    FetchPage,
    FetchSucceeded,
    LoadFavorites,
    PersistFavorites,
    RequestPage,
    RestoreFavorites,
    SetFavorite,
    SetSort,
)
from ..favorites import (
    FavoritesSerializationError,
    parse_favorites,
    serialize_favorites,
)
from ..pages import LoadStatus
from ..state import CatalogState, apply_command
from ..storage import KeyValueStorage, StorageError
from .tmdb import DataSource, DataSourceError

logger = logging.getLogger(__name__)

DEFAULT_FAVORITES_KEY = "discover_favorites"
GENERIC_FETCH_ERROR = "Request failed"


class CatalogController:
    """Coordinates page requests, fetch completion and favorites persistence."""

    def __init__(
        self,
        data_source: DataSource,
        storage: KeyValueStorage,
        *,
        state: CatalogState | None = None,
        favorites_key: str = DEFAULT_FAVORITES_KEY,
    ):
        self._source = data_source
        self._storage = storage
        self._favorites_key = favorites_key
        self.state = state or CatalogState()
        self._fetch_tasks: set[asyncio.Task[None]] = set()
        self._persist_lock = asyncio.Lock()
        # Last favorites set known to be in storage.
        self._stored_favorites: tuple[int, ...] = ()

    async def start(self) -> None:
        """Rehydrate favorites from storage."""

        try:
            raw = await self._storage.get(self._favorites_key)
        except StorageError:
            logger.warning("Could not read stored favorites; starting empty", exc_info=True)
            raw = None
        favorites = parse_favorites(raw)
        self._stored_favorites = favorites
        await self.dispatch(LoadFavorites(favorites))
        logger.info("Loaded %d favorite movies", len(self.state.favorites))

    async def stop(self) -> None:
        """Cancel fetches still running at shutdown."""

        tasks = list(self._fetch_tasks)
        for task in tasks:
            task.cancel()
        for task in tasks:
            with suppress(asyncio.CancelledError):
                await task
        self._fetch_tasks.clear()

    async def request_page(
        self,
        page_index: int,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> None:
        """Show ``page_index``, fetching it unless a matching copy is cached.

        Omitted sort values fall back to the current sort configuration.
        """

        await self.dispatch(
            RequestPage(
                page_index,
                sort_by or self.state.sort_by,
                sort_order or self.state.sort_order,
            )
        )

    async def ensure_current_page(self) -> None:
        """Request the current page if nothing has been loaded for it yet."""

        if self.state.page(self.state.current_page_index).status is LoadStatus.IDLE:
            await self.request_page(self.state.current_page_index)

    async def change_sort(self, sort_by: str, sort_order: str) -> None:
        """Switch the sort configuration and reload the current page under it."""

        await self.dispatch(SetSort(sort_by, sort_order))
        # A page still loading is left alone and settles under its original sort.
        await self.request_page(self.state.current_page_index, sort_by, sort_order)

    async def set_favorite(self, movie_id: int, flag: bool) -> None:
        await self.dispatch(SetFavorite(movie_id, flag))

    def is_favorite(self, movie_id: int) -> bool:
        return self.state.favorites.is_favorite(movie_id)

    async def wait_for_pending(self) -> None:
        """Wait until every fetch scheduled so far has settled."""

        while self._fetch_tasks:
            await asyncio.gather(*list(self._fetch_tasks), return_exceptions=True)

    @property
    def pending_fetches(self) -> int:
        return len(self._fetch_tasks)

    async def dispatch(self, command: Command) -> None:
        """Apply ``command`` and run the effects it produces."""

        effects = apply_command(self.state, command)
        for effect in effects:
            await self._run_effect(effect)

    async def _run_effect(self, effect: Effect) -> None:
        if isinstance(effect, FetchPage):
            self._schedule_fetch(effect)
        elif isinstance(effect, PersistFavorites):
            await self._persist_favorites(effect)
        else:
            raise TypeError(f"Unsupported effect: {effect!r}")

    def _schedule_fetch(self, effect: FetchPage) -> None:
        logger.info(
            "Fetching page %s sorted by %s.%s",
            effect.page_index,
            effect.sort_by,
            effect.sort_order,
        )
        task = asyncio.create_task(self._fetch(effect))
        self._fetch_tasks.add(task)
        task.add_done_callback(self._fetch_tasks.discard)

    async def _fetch(self, effect: FetchPage) -> None:
        try:
            result = await self._source.fetch_page(
                effect.page_index, effect.sort_by, effect.sort_order
            )
        except DataSourceError as exc:
            logger.warning("Page %s failed to load: %s", effect.page_index, exc)
            await self.dispatch(
                FetchFailed(
                    effect.page_index,
                    effect.sort_by,
                    effect.sort_order,
                    str(exc) or GENERIC_FETCH_ERROR,
                )
            )
            return
        except Exception:  # pragma: no cover - background safety net
            logger.exception("Unexpected error while fetching page %s", effect.page_index)
            await self.dispatch(
                FetchFailed(
                    effect.page_index,
                    effect.sort_by,
                    effect.sort_order,
                    GENERIC_FETCH_ERROR,
                )
            )
            return

        await self.dispatch(
            FetchSucceeded(
                effect.page_index,
                effect.sort_by,
                effect.sort_order,
                tuple(result.movies),
                result.total_pages,
            )
        )

    async def _persist_favorites(self, effect: PersistFavorites) -> None:
        async with self._persist_lock:
            try:
                serialized = serialize_favorites(effect.ids)
                await self._storage.set(self._favorites_key, serialized)
            except (FavoritesSerializationError, StorageError):
                logger.exception("Failed to persist favorites; restoring stored set")
                await self.dispatch(
                    RestoreFavorites(ids=self._stored_favorites, failed=effect.ids)
                )
            else:
                self._stored_favorites = effect.ids
