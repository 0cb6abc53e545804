"""FastAPI application entry point."""
import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text

from statuspage.core.config import Settings, get_settings
from statuspage.core.errors import register_exception_handlers
from statuspage.core.rate_limit import build_limiter
from statuspage.core.structured_logging import build_log_context, configure_logging
from statuspage.core.websocket import RoomManager
from statuspage.db.session import build_engine, build_session_factory
from statuspage.routers import incidents, maintenance, me, organizations, services
from statuspage.routers import websocket as ws_router
from statuspage.schemas.common import ValidationErrorResponse
from statuspage.services.identity_provider import ClerkClient, IdentityProvider

logger = logging.getLogger(__name__)


def _init_sentry(settings: Settings) -> None:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        release=settings.VERSION,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
    logger.info("Sentry initialized for error tracking")


def create_app(
    settings: Settings | None = None,
    identity_provider: IdentityProvider | None = None,
) -> FastAPI:
    """
    Build the API application.

    The engine, session factory and identity-provider client are created
    here once and shared through ``app.state``. Tables are managed by
    Alembic, not created here.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    if settings.SENTRY_DSN and settings.ENV != "dev":
        _init_sentry(settings)

    owns_identity_provider = identity_provider is None
    if identity_provider is None:
        identity_provider = ClerkClient(
            secret_key=settings.CLERK_SECRET_KEY,
            base_url=settings.CLERK_API_URL,
            timeout=settings.CLERK_API_TIMEOUT,
        )
    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_identity_provider:
            identity_provider.close()
        engine.dispose()

    app = FastAPI(
        title="Status Page API",
        description="Multi-tenant status page API",
        version=settings.VERSION,
        docs_url="/docs" if settings.ENV == "dev" else None,
        redoc_url="/redoc" if settings.ENV == "dev" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.identity_provider = identity_provider
    app.state.rooms = RoomManager()

    # Rate limiting
    app.state.limiter = build_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,  # Required for cookies
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        route = request.scope.get("route")
        logger.info(
            "%s %s -> %s (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
            extra=build_log_context(
                user_id=getattr(request.state, "user_id", None),
                org_id=getattr(request.state, "org_id", None),
                request_id=request_id,
                route=getattr(route, "path", request.url.path),
                method=request.method,
            ),
        )
        return response

    register_exception_handlers(app)

    # ========================================================================
    # Routers
    # ========================================================================

    # Invalid input is reported as 400 rather than FastAPI's 422
    invalid_input = {400: {"model": ValidationErrorResponse}}
    app.include_router(
        services.router, prefix="/api/services", tags=["services"], responses=invalid_input
    )
    app.include_router(
        incidents.router, prefix="/api/incidents", tags=["incidents"], responses=invalid_input
    )
    app.include_router(
        maintenance.router,
        prefix="/api/maintenance",
        tags=["maintenance"],
        responses=invalid_input,
    )
    app.include_router(
        organizations.router, prefix="/api/organizations", tags=["organizations"]
    )
    app.include_router(me.router, prefix="/api/me", tags=["me"])

    # WebSocket rooms for real-time updates
    app.include_router(ws_router.router)

    @app.get("/health")
    def health():
        """
        Health check endpoint.

        Verifies database connectivity and returns environment info.
        """
        with app.state.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}

    return app


app = create_app()
