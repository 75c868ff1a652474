# catalog_api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, settings as default_settings
from .database import ResourceStore
from .errors import DependencyUnavailable, register_exception_handlers
from .handlers import (
    create_resource_logic, delete_resource_logic, get_resource_logic,
    list_resources_logic, patch_resource_logic, replace_resource_logic,
)
from .logging_config import setup_logging
from .models import ResourceAck, ResourceList

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> ResourceStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise DependencyUnavailable("Store not initialised")
    return store


# ---------------------------
# Discovery / health
# ---------------------------
@router.get("/")
async def index():
    return {
        "service": "catalog-api",
        "endpoints": [
            "GET /api/resources?category=&minPrice=&sort=price&fields=a,b",
            "GET /api/resources/{id}",
            "POST /api/resources",
            "PUT /api/resources/{id}",
            "PATCH /api/resources/{id}",
            "DELETE /api/resources/{id}",
            "GET /health",
        ],
    }


@router.get("/health")
async def health(store: ResourceStore = Depends(get_store)):
    await store.ensure_ready()
    return {"status": "ok"}


# ---------------------------
# Resource endpoints
# ---------------------------
# Bodies are taken raw and validated by the handlers, after the path id.
@router.get("/api/resources", response_model=ResourceList)
async def list_resources(
    category: Optional[str] = None,
    min_price: Optional[str] = Query(None, alias="minPrice"),
    sort: Optional[str] = None,
    fields: Optional[str] = None,
    store: ResourceStore = Depends(get_store),
):
    params = {"category": category, "minPrice": min_price, "sort": sort, "fields": fields}
    return await list_resources_logic(store, params)


@router.get("/api/resources/{resource_id}")
async def get_resource(resource_id: str, store: ResourceStore = Depends(get_store)):
    return await get_resource_logic(store, resource_id)


@router.post("/api/resources", status_code=201, response_model=ResourceAck)
async def create_resource(body: Any = Body(None), store: ResourceStore = Depends(get_store)):
    return await create_resource_logic(store, body)


@router.put("/api/resources/{resource_id}", response_model=ResourceAck)
async def replace_resource(resource_id: str, body: Any = Body(None), store: ResourceStore = Depends(get_store)):
    return await replace_resource_logic(store, resource_id, body)


@router.patch("/api/resources/{resource_id}", response_model=ResourceAck)
async def patch_resource(resource_id: str, body: Any = Body(None), store: ResourceStore = Depends(get_store)):
    return await patch_resource_logic(store, resource_id, body)


@router.delete("/api/resources/{resource_id}", status_code=204)
async def delete_resource(resource_id: str, store: ResourceStore = Depends(get_store)):
    await delete_resource_logic(store, resource_id)
    return Response(status_code=204)


# ---------------------------
# App factory
# ---------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.store is None:
        app.state.store = ResourceStore.from_settings(app.state.settings)
    try:
        await app.state.store.connect()
    except DependencyUnavailable:
        # requests retry the ping and get 503 until it succeeds
        logger.error("Store not reachable at startup")
    yield
    await app.state.store.close()


def create_app(settings: Optional[Settings] = None, store: Optional[ResourceStore] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.log_level)

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run(app, host=default_settings.host, port=default_settings.port)


if __name__ == "__main__":
    main()
