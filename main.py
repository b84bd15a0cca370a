import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from config import settings
from api.v1.router import api_router
from services.storage import DataStorage, StorageError, build_storage

logging.basicConfig(level=settings.log_level.upper())
_LOG = logging.getLogger(__name__)


def create_app(storage: DataStorage | None = None) -> FastAPI:
    """Build the app; `storage` overrides the configured backend (tests)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        backend = storage or build_storage(settings)
        await backend.startup()
        app.state.storage = backend
        try:
            yield
        finally:
            await backend.shutdown()

    app = FastAPI(title="Body-Track API", version="1.0.0", lifespan=lifespan)

    # CORS (public demo only – lock down in prod)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StorageError)
    async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
        _LOG.error("%s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["meta"])
    def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.env_name}

    return app


app = create_app()
