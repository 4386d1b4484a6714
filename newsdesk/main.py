import socket
from contextlib import asynccontextmanager
from typing import Final

from fastapi import Depends, FastAPI, status
from fastapi.responses import JSONResponse

from .config import Settings, settings
from .domain.exceptions import PersistenceError, StartupError
from .infrastructure.database.database import ConnectionPool, get_pool
from .infrastructure.database.migration_runner import run_pending
from .logging_config import get_logger, setup_logging
from .logging_utils import log_startup
from .metrics import observe_pool
from .middleware import log_requests_middleware
from .presentation.article_routes import article_router
from .presentation.error_handlers import register_error_handlers
from .presentation.event_routes import event_router
from .presentation.schemas import HealthResponse
from .telemetry import setup_telemetry

logger = get_logger(__name__)


def prepare_database(app_settings: Settings) -> ConnectionPool:
    """Build the pool and bring the schema up to date.

    Raises:
        StartupError: If the database is misconfigured, unreachable or a
            migration fails. Callers must not accept traffic in that case.
    """
    pool = ConnectionPool.from_settings(app_settings)
    if not app_settings.run_migrations:
        logger.info("Skipping migrations (RUN_MIGRATIONS is off)")
        return pool

    try:
        with pool.connect() as connection:
            run_pending(connection)
    except StartupError:
        pool.dispose()
        raise
    except PersistenceError as e:
        pool.dispose()
        raise StartupError(f"Could not apply migrations: {e}") from e
    return pool


def _host_address() -> tuple[str, str]:
    hostname = socket.gethostname()
    try:
        return hostname, socket.gethostbyname(hostname)
    except OSError:
        return hostname, "unknown"


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Application factory; the pool is created by the lifespan, not at import."""
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(app_settings=app_settings)

        app.state.pool = prepare_database(app_settings)
        observe_pool(app.state.pool.engine)
        hostname, ip_addr = _host_address()
        log_startup(
            hostname,
            ip_addr,
            app_settings.database_url,
            app.state.pool.status(),
            app_settings.debug,
        )

        try:
            yield
        finally:
            observe_pool(None)
            app.state.pool.dispose()
            app.state.pool = None
            logger.info("Application shutdown completed")

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.version,
        lifespan=lifespan,
        description="""
**Newsdesk** - a small CRUD API for posts and events.

## Posts

Posts have a two step deletion lifecycle:
- **remove** flags a post as deleted and stamps the time; it keeps its row
  and shows up in `list_deleted_posts`
- **restore** undoes a removal
- **delete** removes the row for good

## Errors

Every error response is a JSON object with a `status` and a `message`.
        """.strip(),
        openapi_tags=[
            {"name": "posts", "description": "Create, list, update and delete posts"},
            {"name": "events", "description": "Manage events"},
            {"name": "service", "description": "Operational endpoints"},
        ],
    )

    setup_telemetry(app)
    app.middleware("http")(log_requests_middleware)
    register_error_handlers(app)

    @app.get("/health", tags=["service"], response_model=HealthResponse)
    def health(pool: ConnectionPool = Depends(get_pool)):
        """Liveness plus a database probe."""
        if pool.ping():
            return HealthResponse(status="ok", database="ok")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=HealthResponse(status="degraded", database="unavailable").model_dump(),
        )

    app.include_router(article_router)
    app.include_router(event_router)
    return app


app: Final = create_app()
