"""
Taskboard API Server

Entry point for the FastAPI application.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from starlette.responses import JSONResponse

from app.api.v1 import router as api_v1_router
from app.core.auth import TokenService
from app.core.config import Settings, get_settings
from app.core.database import build_engine, build_session_factory, init_db
from app.core.errors import install_error_handlers
from app.core.logging_config import configure_logging
from app.core.middleware import RequestContextMiddleware, SecurityHeadersMiddleware

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if not settings.secret_key:
        log.warning("auth.secret_missing", detail="token issuance will fail until TB_SECRET_KEY is set")
    if settings.create_tables_on_startup:
        await init_db(app.state.engine)
    log.info("Taskboard starting", database=app.state.engine.url.render_as_string(hide_password=True))
    yield
    log.info("Taskboard shutting down")
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application around one settings object."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Taskboard",
        description="Track tasks for the team members you manage.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Process-wide, built once, read through dependencies.
    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.token_service = TokenService.from_settings(settings)

    # Middleware (last added runs outermost)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    install_error_handlers(app)

    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/", tags=["System"])
    async def root():
        return {"message": "welcome to Taskboard Server"}

    @app.get("/health", tags=["System"])
    async def health_check():
        """Liveness check: the process is up and serving requests."""
        return {"status": "ok"}

    @app.get("/ready", tags=["System"])
    async def readiness_check(request: Request):
        """Readiness check endpoint: the database must answer."""
        try:
            async with request.app.state.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as exc:
            log.warning("readiness.database_unavailable", error=str(exc))
            return JSONResponse(status_code=503, content={"error": "Database unavailable"})
        return {"status": "ready"}

    return app


def run() -> None:
    """CLI entry point: ``taskboard-server``."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    run()
