"""
FastAPI application factory
"""
import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.engine import Engine
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import Response

from app.config import Settings, get_settings
from app.infrastructure.db.session import check_db_connection, create_db_engine, create_session_factory
from app.application.categories import EnsurePresetCategoriesUseCase
from app.api.v1 import auth, subscriptions, categories, stats, profile

logger = logging.getLogger(__name__)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Catches ALL exceptions including sync routes"""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return Response(content="Internal Server Error", status_code=500)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = app.state.session_factory()
    try:
        EnsurePresetCategoriesUseCase(db).execute()
    except Exception:
        logger.exception("Could not ensure preset categories")
    finally:
        db.close()
    yield


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """
    Application factory - builds the engine and session factory explicitly
    and keeps them on app.state

    Args:
        settings: defaults to get_settings()
        engine: pre-built engine (tests pass an in-memory SQLite engine)

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title="SubTracker",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine or create_db_engine(settings.get_sqlalchemy_url())
    app.state.session_factory = create_session_factory(app.state.engine)

    app.add_middleware(ErrorLoggingMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY,
        same_site="lax",
        https_only=settings.COOKIE_SECURE,
    )

    app.include_router(auth.router)
    app.include_router(subscriptions.router)
    app.include_router(categories.router)
    app.include_router(stats.router)
    app.include_router(profile.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Liveness"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness (database reachable)"""
        check_db_connection(app.state.engine)
        return "ok"

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
