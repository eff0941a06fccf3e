"""
HashText API - exchange text for its SHA-256 hash and back.

Provides REST endpoints for:
- Looking up the calling user (GET /user/me)
- Submitting text (POST /text)
- Looking up text by hash (GET /text/{hash})
- Health checks (GET /health)

All but /health require the X-HashText-User-ID header.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .auth import require_user
from .config import Settings, get_settings
from .db import HashTextDatabase, mask_url
from .errors import (
    HashTextError,
    HashTextJSONResponse,
    generic_exception_handler,
    hashtext_exception_handler,
)
from .models import (
    AuthenticatedUser,
    HashResponse,
    HealthResponse,
    TextDocument,
    UserResponse,
)
from .service import HashTextService, get_service

# Configure logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[HashTextDatabase] = None,
) -> FastAPI:
    """
    Build the API around a database.

    With no database, one is opened from settings.database_url at startup
    and closed at shutdown. An injected database is attached immediately
    and left open.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        owned: Optional[HashTextDatabase] = None
        if getattr(app.state, "service", None) is None:
            owned = HashTextDatabase(settings.database_url)
            app.state.service = HashTextService(owned)

        logger.info(
            "API started",
            version=__version__,
            host=settings.host,
            port=settings.port,
            database=mask_url(app.state.service.database.database_url),
        )

        yield

        # Cleanup
        if owned is not None:
            owned.close()
            app.state.service = None

        logger.info("API stopped")

    app = FastAPI(
        title="HashText API",
        description="Exchange text for its SHA-256 hash and back, one credit per submission",
        version=__version__,
        lifespan=lifespan,
        default_response_class=HashTextJSONResponse,
    )

    if database is not None:
        app.state.service = HashTextService(database)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return response

    app.add_exception_handler(HashTextError, hashtext_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    _register_routes(app)
    return app


async def read_body(request: Request) -> bytes:
    """Raw request body, decoded by the operation itself after the credit check."""
    return await request.body()


def _register_routes(app: FastAPI) -> None:
    # ========================================================================
    # Health Check
    # ========================================================================

    @app.get("/health", response_model=HealthResponse)
    def health_check(service: HashTextService = Depends(get_service)) -> HealthResponse:
        """
        Check API health and database connectivity.
        """
        database_ok = service.database.ping()
        return HealthResponse(
            status="ok" if database_ok else "degraded",
            version=__version__,
            database=database_ok,
        )

    # ========================================================================
    # User
    # ========================================================================

    @app.get("/user/me", response_model=UserResponse)
    def user_me(
        user: AuthenticatedUser = Depends(require_user),
        service: HashTextService = Depends(get_service),
    ) -> UserResponse:
        """Return the calling user's id, name and credit."""
        return service.get_user(user)

    # ========================================================================
    # Text
    # ========================================================================

    @app.post(
        "/text",
        response_model=HashResponse,
        responses={
            400: {"description": "Body is not a JSON document with a text string"},
            402: {"description": "Out of credit", "content": {"text/plain": {}}},
        },
    )
    def submit_text(
        user: AuthenticatedUser = Depends(require_user),
        body: bytes = Depends(read_body),
        service: HashTextService = Depends(get_service),
    ) -> HashResponse:
        """
        Store text under its SHA-256 hash, charging one credit.

        Submitting the same text again returns the same hash and is charged again.
        """
        return service.submit_text(user, body)

    @app.get("/text/{hash}", response_model=TextDocument, responses={404: {"description": "Unknown hash"}})
    def text_by_hash(
        hash: str,
        user: AuthenticatedUser = Depends(require_user),
        service: HashTextService = Depends(get_service),
    ) -> TextDocument:
        """Return the text stored under this hash. Any authorized user may look up any hash."""
        return service.get_text(hash)


app = create_app()


# ============================================================================
# Entry Point
# ============================================================================


def run() -> None:
    """Run the API server."""
    settings = get_settings()
    uvicorn.run(
        "hashtext_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
