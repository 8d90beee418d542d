"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import api_router
from app.core.config import DEFAULT_SESSION_SECRET, Settings, get_settings
from app.core.errors import register_exception_handlers
from app.core.logging import configure_logging
from app.db.session import engine

settings = get_settings()
logger = logging.getLogger(__name__)


def check_session_secret(settings: Settings) -> None:
    """Refuse to run production with the development signing secret."""
    if settings.is_production and (not settings.session_secret or settings.session_secret == DEFAULT_SESSION_SECRET):
        raise RuntimeError("SESSION_SECRET must be set in production")
    if settings.session_secret == DEFAULT_SESSION_SECRET:
        logger.warning("Using the development session secret; set SESSION_SECRET")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: validate settings; shutdown: dispose the engine. Tables are managed by Alembic."""
    check_session_secret(settings)
    yield
    await engine.dispose()


def create_application() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: the session is a cookie, so origins must be explicit (no "*") for credentials.
    if settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    register_exception_handlers(app)

    @app.get("/")
    def root():
        return {"status": "ok", "message": settings.app_name}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
