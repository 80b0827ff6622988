"""
EczemaHub Gateway Server
HTTP transport for the resource catalog: supplies the caller identity,
maps catalog errors onto status codes and snapshots the catalog on shutdown.
"""

import asyncio
import logging
import time
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from eczemahub import __version__
from eczemahub.catalog import Catalog, CatalogError, Category, SnapshotFile, PAGE_SIZE
from eczemahub.config.settings import get_settings
from eczemahub.gateway.middleware import CallerIdentity

logger = logging.getLogger("eczemahub.gateway")

ERROR_STATUS = {
    "NotFound": 404,
    "AlreadyExists": 409,
    "InvalidInput": 400,
    "Unauthorized": 403,
    "InternalError": 500,
}


# ── Request/Response Models ───────────────────────────────────────────

class ResourcePayload(BaseModel):
    # Length limits are enforced by the catalog so they surface as InvalidInput.
    title: str
    description: str
    category: Category


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str = ""
    uptime_seconds: float = 0
    resources: int = 0


# ── Gateway Server ───────────────────────────────────────────────────

class GatewayServer:
    """
    Wraps a Catalog in a FastAPI app.
    Features:
    - REST endpoints for every catalog operation
    - caller identity from a request header
    - periodic and shutdown snapshots
    """

    def __init__(self, catalog: Catalog, snapshot_file: Optional[SnapshotFile] = None):
        self.settings = get_settings()
        self.app = FastAPI(
            title="EczemaHub Gateway",
            version=__version__,
            description="Community catalog of eczema treatment, prevention and research resources",
        )
        self.catalog = catalog
        self.snapshot_file = snapshot_file
        self.identity = CallerIdentity()
        self.start_time = time.time()
        self._setup_middleware()
        self._setup_error_handlers()
        self._setup_routes()

    def _setup_middleware(self):
        origins = self.settings.get("gateway.cors_origins", ["*"])
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _setup_error_handlers(self):
        @self.app.exception_handler(CatalogError)
        async def catalog_error(request: Request, exc: CatalogError):
            status = ERROR_STATUS.get(exc.kind, 500)
            if status >= 500:
                logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
            return JSONResponse(status_code=status, content=exc.to_dict())

    def _setup_routes(self):
        """Register all API routes."""

        # ── Health & Info ─────────────────────────────────
        @self.app.get("/health", response_model=HealthResponse)
        async def health():
            return HealthResponse(
                status="healthy",
                version=self.settings.get("app.version", __version__),
                uptime_seconds=round(time.time() - self.start_time, 2),
                resources=self.catalog.count,
            )

        @self.app.get("/api/info")
        async def info():
            return {
                "name": self.settings.get("app.name"),
                "version": self.settings.get("app.version"),
                "codename": self.settings.get("app.codename"),
                "categories": [c.value for c in Category],
                "page_size": PAGE_SIZE,
                "stats": self.catalog.stats(),
            }

        @self.app.get("/api/categories")
        async def list_categories():
            counts = self.catalog.stats()["categories"]
            return {
                "categories": [
                    {"name": c.value, "count": counts.get(c.value, 0)}
                    for c in Category
                ]
            }

        # ── Resources ────────────────────────────────────
        @self.app.post("/api/resources")
        async def create_resource(payload: ResourcePayload, request: Request):
            caller = self.identity.require(request)
            resource = self.catalog.create_resource(
                caller, payload.title, payload.description, payload.category
            )
            return resource.model_dump(mode="json")

        @self.app.get("/api/resources")
        async def list_resources(page: int = 0):
            resources = self.catalog.list_resources(page)
            return {"page": page, "resources": [r.model_dump(mode="json") for r in resources]}

        # Static routes BEFORE parameterized routes
        @self.app.get("/api/resources/search")
        async def search_resources(query: str = "", page: int = 0):
            resources = self.catalog.search_resources(query, page)
            return {
                "query": query,
                "page": page,
                "resources": [r.model_dump(mode="json") for r in resources],
            }

        @self.app.get("/api/categories/{category}/resources")
        async def list_by_category(category: Category, page: int = 0):
            resources = self.catalog.list_resources_by_category(category, page)
            return {
                "category": category.value,
                "page": page,
                "resources": [r.model_dump(mode="json") for r in resources],
            }

        @self.app.get("/api/resources/{resource_id}")
        async def get_resource(resource_id: int):
            return self.catalog.get_resource(resource_id).model_dump(mode="json")

        @self.app.put("/api/resources/{resource_id}")
        async def update_resource(resource_id: int, payload: ResourcePayload, request: Request):
            caller = self.identity.require(request)
            resource = self.catalog.update_resource(
                caller, resource_id, payload.title, payload.description, payload.category
            )
            return resource.model_dump(mode="json")

        @self.app.delete("/api/resources/{resource_id}")
        async def delete_resource(resource_id: int, request: Request):
            caller = self.identity.require(request)
            self.catalog.delete_resource(caller, resource_id)
            return {"deleted": True, "id": resource_id}

        @self.app.post("/api/resources/{resource_id}/verify")
        async def verify_resource(resource_id: int, request: Request):
            caller = self.identity.require(request)
            return self.catalog.verify_resource(caller, resource_id).model_dump(mode="json")

        # ── Snapshot ─────────────────────────────────────
        @self.app.post("/api/snapshot")
        async def snapshot(request: Request):
            caller = self.identity.require(request)
            if not self.catalog.is_admin(caller):
                raise HTTPException(403, "Only admins may trigger a snapshot")
            if not self.snapshot_file:
                raise HTTPException(503, "Snapshot storage not configured")
            self.save_snapshot()
            return {"saved": True, "path": str(self.snapshot_file.path)}

    def save_snapshot(self):
        """Write the catalog's current state to the snapshot file, if any."""
        if not self.snapshot_file:
            return
        self.snapshot_file.save(self.catalog.snapshot())

    async def _autosave_loop(self, interval: float):
        """Background task to snapshot the catalog periodically."""
        while True:
            await asyncio.sleep(interval)
            try:
                self.save_snapshot()
            except Exception as e:
                logger.error(f"Autosave failed: {e}")

    async def start(self, host: str = None, port: int = None):
        """Start the gateway server. A final snapshot is written on shutdown."""
        import uvicorn
        host = host or self.settings.get("gateway.host", "127.0.0.1")
        port = port or self.settings.get("gateway.port", 8420)
        logger.info(f"Starting EczemaHub Gateway on {host}:{port}")

        autosave_task = None
        interval = self.settings.get("catalog.autosave_interval", 0)
        if interval and self.snapshot_file:
            autosave_task = asyncio.create_task(self._autosave_loop(float(interval)))

        config = uvicorn.Config(self.app, host=host, port=port, log_level="info")
        server = uvicorn.Server(config)
        try:
            await server.serve()
        finally:
            if autosave_task:
                autosave_task.cancel()
            self.save_snapshot()
            if autosave_task:
                try:
                    await autosave_task
                except asyncio.CancelledError:
                    pass
            logger.info("Gateway stopped")
