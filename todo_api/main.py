"""FastAPI application for the todo API."""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import db
from .api.routes import router as api_router
from .db import StoragePool
from .errors import handle_rejection, register_exception_handlers
from .logging_utils import bind_request_id, configure_logging
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, pool: Optional[StoragePool] = None) -> FastAPI:
    """Build the application.

    When ``pool`` is given the application uses it as-is and leaves closing
    it to the caller; otherwise a pool is created from ``settings`` on
    startup and closed on shutdown. Either way the schema is initialized
    before the first request is served, and a failure there aborts startup.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Todo API...")
        owns_pool = app.state.pool is None
        if owns_pool:
            app.state.pool = await db.create_pool(settings)
        try:
            await db.init_db(app.state.pool)
        except Exception:
            logger.exception("Failed to initialize database schema")
            if owns_pool:
                await app.state.pool.close()
                app.state.pool = None
            raise

        yield

        logger.info("Shutting down Todo API...")
        if owns_pool:
            await app.state.pool.close()
            app.state.pool = None

    app = FastAPI(
        title="Todo API",
        description="CRUD operations over todo items stored in PostgreSQL",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.pool = pool

    register_exception_handlers(app)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        with bind_request_id(request_id):
            try:
                response = await call_next(request)
            except Exception as exc:
                response = await handle_rejection(request, exc)
        response.headers["X-Request-ID"] = request_id
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.include_router(api_router)
    return app


def main() -> None:
    """Run the API under uvicorn on the configured address."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting on %s:%s", settings.host, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
