"""FastAPI application entrypoint for contentsync service mode."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import load_config
from ..errors import ContentSyncError, NotFoundError
from ..queries import QueryContext, apply_filter
from ..sync import ContentSynchronizer, SyncResult


class LoadRequest(BaseModel):
    variables: Dict[str, Any] = Field(default_factory=dict)
    filter: Optional[str] = None
    refresh: bool = False
    title_override: Optional[str] = None
    resource_key: Optional[str] = None


class ListItemModel(BaseModel):
    id: str
    kind: str
    title: str
    subtitle: Optional[str] = None
    image: Optional[str] = None
    route_name: str
    route_params: Dict[str, Any] = Field(default_factory=dict)


class ResourceResponse(BaseModel):
    resource_key: str
    source: str
    stale: bool
    has_more: bool
    error: Optional[str] = None
    items: List[ListItemModel]


class ReleaseResponse(BaseModel):
    status: str


class StalenessEntry(BaseModel):
    resource_key: str
    last_refreshed_at: Optional[datetime] = None


class HealthResponse(BaseModel):
    status: str


def _default_synchronizer() -> ContentSynchronizer:
    return ContentSynchronizer.from_config(load_config(Path(".")))


def create_app(
    synchronizer_factory: Callable[[], ContentSynchronizer] = _default_synchronizer,
    *,
    context: QueryContext | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing synchronization operations.

    The synchronizer is built on first use and shared by every request so
    in-flight fetches coalesce and paginated results survive between calls.
    """
    app = FastAPI(title="ContentSync Service", version="1.0.0")
    holder: Dict[str, ContentSynchronizer] = {}

    async def get_synchronizer() -> ContentSynchronizer:
        if "synchronizer" not in holder:
            holder["synchronizer"] = synchronizer_factory()
        return holder["synchronizer"]

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/resources/{query_type}", response_model=ResourceResponse)
    async def load_resource(
        query_type: str,
        payload: LoadRequest,
        synchronizer: ContentSynchronizer = Depends(get_synchronizer),
    ) -> ResourceResponse:
        variables = payload.variables
        if payload.filter is not None:
            variables = apply_filter(query_type, variables, payload.filter)
        load = synchronizer.refresh if payload.refresh else synchronizer.load
        result = await load(
            query_type,
            variables,
            context=context,
            resource_key=payload.resource_key,
            title_override=payload.title_override,
        )
        return _to_response(result)

    @app.post("/resources/{resource_key}/more", response_model=ResourceResponse)
    async def load_more(
        resource_key: str,
        synchronizer: ContentSynchronizer = Depends(get_synchronizer),
    ) -> ResourceResponse:
        return _to_response(await synchronizer.load_more(resource_key))

    @app.delete("/resources/{resource_key}", response_model=ReleaseResponse)
    async def release(
        resource_key: str,
        synchronizer: ContentSynchronizer = Depends(get_synchronizer),
    ) -> ReleaseResponse:
        synchronizer.release(resource_key)
        return ReleaseResponse(status="released")

    @app.get("/staleness", response_model=List[StalenessEntry])
    async def staleness(
        synchronizer: ContentSynchronizer = Depends(get_synchronizer),
    ) -> List[StalenessEntry]:
        return [
            StalenessEntry(
                resource_key=record.resource_key,
                last_refreshed_at=record.last_refreshed_at,
            )
            for record in synchronizer.tracker.records()
        ]

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_: Any, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(KeyError)
    async def unknown_resource_handler(_: Any, exc: KeyError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc.args[0] if exc.args else exc)})

    @app.exception_handler(ContentSyncError)
    async def sync_error_handler(_: Any, exc: ContentSyncError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def _to_response(result: SyncResult) -> ResourceResponse:
    return ResourceResponse(
        resource_key=result.resource_key,
        source=result.source.value,
        stale=result.stale,
        has_more=result.has_more,
        error=result.error,
        items=[
            ListItemModel(
                id=item.id,
                kind=item.kind.value,
                title=item.title,
                subtitle=item.subtitle,
                image=item.image,
                route_name=item.route_name,
                route_params=dict(item.route_params),
            )
            for item in result.items
        ],
    )


def run_service(
    host: str = "127.0.0.1", port: int = 8000, *, config_path: Path | None = None
) -> None:  # pragma: no cover - integration path
    config = load_config(config_path or Path("."))
    app = create_app(
        lambda: ContentSynchronizer.from_config(config),
        context=config.filters.to_context(),
    )
    uvicorn.run(app, host=host, port=port)
