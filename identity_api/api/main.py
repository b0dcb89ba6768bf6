"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Build the FastAPI application (title, version, OpenAPI security scheme)
  - Configure middleware (CORS, request context)
  - Mount the users router and the auth boundary routes
  - Expose health check and metrics endpoints

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - interfaces.api.http.router: identity record lifecycle endpoints
  - auth_routes.router: login / logout / me

Notes:
  - Middleware order matters: RequestContext -> CORS -> routes
  - /healthz follows Kubernetes health check convention
  - /metrics exposes Prometheus metrics (admin-only if METRICS_REQUIRE_AUTH)

Production Readiness:
  - Env validation enforced at startup (via lifespan, not import time)
  - Request tracing with X-Request-Id header
  - Structured JSON logging with request correlation
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from ..application.dev_seed_admin import ensure_dev_admin
from ..container import get_password_hasher, get_user_repository
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import RequestContextMiddleware
from ..identity.auth_users import require_metrics_access
from ..infrastructure.db.pool import close_pool, init_pool
from ..interfaces.api.http.router import build_router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers

PUBLIC_PATHS = {"/healthz", "/auth/login", "/auth/logout"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and initializes pool."""
    settings = get_settings()
    settings.validate_security_requirements()

    uses_postgres = settings.user_store_backend == "postgres"
    if uses_postgres:
        # Pool antes de cualquier uso del repositorio Postgres
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        try:
            ensure_dev_admin(
                settings,
                user_repo=get_user_repository(),
                password_hasher=get_password_hasher(),
            )
        except Exception as e:
            logger.error("Startup failed", extra={"error": str(e)})
            raise

        logger.info(
            "Identity API starting up",
            extra={
                "app_env": settings.app_env,
                "user_store_backend": settings.user_store_backend,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
                "metrics_require_auth": settings.metrics_require_auth,
            },
        )

        yield

    finally:
        if uses_postgres:
            close_pool()
        logger.info("Identity API shutting down")


def _get_allowed_origins() -> list[str]:
    """Get CORS origins from settings, with fallback for import-time errors."""
    try:
        return get_settings().get_allowed_origins_list()
    except Exception:
        # Fallback for tests that don't set env vars
        return ["http://localhost:3000"]


def _install_openapi(app: FastAPI) -> None:
    """Declara BearerAuth y marca las rutas públicas sin seguridad."""

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
        )
        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": (
                    "JWT access token via Authorization: Bearer <token> "
                    "or httpOnly cookie."
                ),
            },
        }
        openapi_schema["security"] = [{"BearerAuth": []}]

        for path, methods in openapi_schema.get("paths", {}).items():
            if path not in PUBLIC_PATHS:
                continue
            for operation in methods.values():
                if isinstance(operation, dict):
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi


def create_app() -> FastAPI:
    """Construye la app (factory: los tests obtienen una instancia limpia)."""
    app = FastAPI(
        title="Identity Records API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "users", "description": "Identity record lifecycle"},
            {"name": "auth", "description": "User authentication (JWT)"},
        ],
    )
    _install_openapi(app)

    # R: Middleware order (bottom = first to execute):
    # 1. CORSMiddleware - handles preflight
    # 2. RequestContextMiddleware - sets request_id
    app.add_middleware(RequestContextMiddleware)

    try:
        cors_allow_credentials = get_settings().cors_allow_credentials
    except Exception:
        cors_allow_credentials = False
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_get_allowed_origins(),
        allow_credentials=cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
    )

    app.include_router(build_router())
    app.include_router(auth_router)

    register_exception_handlers(app)

    @app.get("/healthz")
    def healthz(request: Request):
        """
        Health check del store de identidad.

        Returns:
            ok: True si el store responde
            db: "connected" or "disconnected"
            request_id: Correlation ID for this request
        """
        db_status = "disconnected"
        try:
            if get_user_repository().ping():
                db_status = "connected"
        except Exception as e:
            logger.warning("Health check: store unavailable", extra={"error": str(e)})

        return {
            "ok": db_status == "connected",
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    @app.get("/metrics")
    def metrics(_auth: None = Depends(require_metrics_access())):
        """Expose Prometheus metrics (text format)."""
        body, content_type = get_metrics_response()
        return Response(content=body, media_type=content_type)

    return app


app = create_app()
