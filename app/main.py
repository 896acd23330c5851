"""Entry point for the FastAPI-powered movie catalog."""

from __future__ import annotations

import json
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError

from .config import settings
from .database import Database
from .models import PageRequest, SortRequest
from .selectors import catalog_view, favorite_ids, movie_by_id
from .services.catalog import CatalogController
from .services.tmdb import TMDBClient
from .state import CatalogState
from .storage import DatabaseStorage

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    tmdb_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.tmdb_api_url),
            timeout=httpx.Timeout(20.0, connect=10.0),
        )
    )
    database = Database(settings.database_url)
    await database.create_all()

    controller = CatalogController(
        TMDBClient(settings, tmdb_http_client),
        DatabaseStorage(database.session_factory),
        state=CatalogState(
            sort_by=settings.default_sort_by,
            sort_order=settings.default_sort_order,
        ),
        favorites_key=settings.favorites_storage_key,
    )

    fastapi_app.state.catalog_controller = controller
    fastapi_app.state.database = database
    await controller.start()
    await controller.ensure_current_page()

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await controller.stop()
        await database.dispose()
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Paginated, sortable TMDB movie catalog with favorites",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_catalog_controller(app: FastAPI) -> CatalogController:
    controller = getattr(app.state, "catalog_controller", None)
    if not isinstance(controller, CatalogController):
        raise RuntimeError("Catalog controller not initialised")
    return controller


async def _parse_body(request: Request, model: type[BaseModel]) -> Any:
    try:
        payload = await request.json()
    except json.JSONDecodeError:
        payload = {}
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid payload")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=400, detail=exc.errors(include_url=False)
        ) from exc


def register_routes(fastapi_app: FastAPI) -> None:
    def _view(controller: CatalogController) -> dict[str, Any]:
        return catalog_view(
            controller.state,
            sibling_count=settings.pagination_sibling_count,
            boundary_count=settings.pagination_boundary_count,
        )

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/api/catalog")
    async def catalog() -> dict[str, Any]:
        controller = get_catalog_controller(fastapi_app)
        await controller.ensure_current_page()
        return _view(controller)

    @fastapi_app.post("/api/catalog/page")
    async def request_page(request: Request) -> dict[str, Any]:
        controller = get_catalog_controller(fastapi_app)
        page_request: PageRequest = await _parse_body(request, PageRequest)
        await controller.request_page(
            page_request.page, page_request.sort_by, page_request.sort_order
        )
        if page_request.wait:
            await controller.wait_for_pending()
        return _view(controller)

    @fastapi_app.post("/api/catalog/sort")
    async def change_sort(request: Request) -> dict[str, Any]:
        controller = get_catalog_controller(fastapi_app)
        sort_request: SortRequest = await _parse_body(request, SortRequest)
        await controller.change_sort(sort_request.sort_by, sort_request.sort_order)
        if sort_request.wait:
            await controller.wait_for_pending()
        return _view(controller)

    @fastapi_app.get("/api/catalog/movies/{movie_id}")
    async def movie_detail(movie_id: int) -> dict[str, Any]:
        controller = get_catalog_controller(fastapi_app)
        movie = movie_by_id(controller.state, movie_id)
        if movie is None:
            raise HTTPException(
                status_code=404,
                detail=f"Movie {movie_id} is not on the current page",
            )
        return movie.to_payload(favorite=controller.is_favorite(movie_id))

    @fastapi_app.get("/api/favorites")
    async def list_favorites() -> dict[str, Any]:
        controller = get_catalog_controller(fastapi_app)
        return {"favorites": favorite_ids(controller.state)}

    @fastapi_app.put("/api/favorites/{movie_id}")
    async def add_favorite(movie_id: int) -> dict[str, Any]:
        controller = get_catalog_controller(fastapi_app)
        await controller.set_favorite(movie_id, True)
        return {"id": movie_id, "favorite": controller.is_favorite(movie_id)}

    @fastapi_app.delete("/api/favorites/{movie_id}")
    async def remove_favorite(movie_id: int) -> dict[str, Any]:
        controller = get_catalog_controller(fastapi_app)
        await controller.set_favorite(movie_id, False)
        return {"id": movie_id, "favorite": controller.is_favorite(movie_id)}


app = create_app()
