"""Connection pool manager.

One ``ConnectionPool`` is built at startup from the configured connection
string and handed to every repository call. Acquisition is scoped: the
connection goes back to the pool on every exit path.
"""

from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import Request
from sqlalchemy import Connection, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import (
    ArgumentError,
    IntegrityError,
    NoSuchModuleError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlmodel import Session, create_engine
from sqlmodel.pool import StaticPool

from ...config import Settings
from ...constants import (
    DEFAULT_MAX_OVERFLOW,
    DEFAULT_POOL_RECYCLE,
    DEFAULT_POOL_SIZE,
    DEFAULT_POOL_TIMEOUT,
)
from ...domain.exceptions import PersistenceError, PoolExhaustedError, StartupError
from ...logging_config import get_logger

logger = get_logger(__name__)


def _engine_kwargs(
    database_url: str,
    pool_size: int,
    max_overflow: int,
    pool_timeout: float,
    pool_recycle: int,
) -> dict[str, Any]:
    """Pool configuration per database type."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        # SQLite specific configurations
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # In-memory databases live and die with a single connection
            kwargs["poolclass"] = StaticPool
        else:
            kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
            )
        return kwargs

    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_timeout": pool_timeout,
        "pool_recycle": pool_recycle,
        "pool_pre_ping": True,  # Validate connections before use
    }


class ConnectionPool:
    """A bounded pool of database connections shared across requests."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(
        cls,
        database_url: str,
        *,
        pool_size: int = DEFAULT_POOL_SIZE,
        max_overflow: int = DEFAULT_MAX_OVERFLOW,
        pool_timeout: float = DEFAULT_POOL_TIMEOUT,
        pool_recycle: int = DEFAULT_POOL_RECYCLE,
        echo: bool = False,
        verify: bool = True,
    ) -> "ConnectionPool":
        """Build the pool and, unless told otherwise, prove the database answers.

        Raises:
            StartupError: If the URL is malformed, names an unknown driver or
                the database cannot be reached
        """
        try:
            engine = create_engine(
                database_url,
                echo=echo,
                **_engine_kwargs(
                    database_url, pool_size, max_overflow, pool_timeout, pool_recycle
                ),
            )
        except (ArgumentError, NoSuchModuleError, ImportError, ValueError) as e:
            raise StartupError(f"Invalid database URL: {e}") from e

        pool = cls(engine)
        if verify:
            pool.verify()
        logger.info(
            "Connection pool created",
            backend=engine.url.get_backend_name(),
            database=engine.url.database,
            pool=pool.status(),
        )
        return pool

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "ConnectionPool":
        return cls.from_url(
            app_settings.database_url,
            pool_size=app_settings.pool_size,
            max_overflow=app_settings.max_overflow,
            pool_timeout=app_settings.pool_timeout,
            pool_recycle=app_settings.pool_recycle,
        )

    def verify(self) -> None:
        """Open one connection and run a trivial query.

        Raises:
            StartupError: If the database is unreachable
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            self.engine.dispose()
            raise StartupError(
                f"Database unreachable at {self.engine.url.render_as_string()}: "
                f"{e.__class__.__name__}"
            ) from e

    def ping(self) -> bool:
        """Health probe; never raises."""
        try:
            with self.connect() as conn:
                conn.execute(text("SELECT 1"))
        except PersistenceError:
            return False
        return True

    @contextmanager
    def acquire(self) -> Generator[Session, None, None]:
        """Borrow one connection wrapped in a session.

        Commits when the block completes, rolls back when it raises, and
        returns the connection to the pool either way.

        Raises:
            PoolExhaustedError: If no connection became free within the timeout
            PersistenceError: For any other database failure
        """
        with _translate_errors():
            with Session(self.engine, expire_on_commit=False) as session:
                try:
                    yield session
                    session.commit()
                except BaseException:
                    session.rollback()
                    raise

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Borrow a raw connection inside a transaction (used for migrations)."""
        with _translate_errors():
            with self.engine.begin() as conn:
                yield conn

    def status(self) -> str:
        """Human readable pool occupancy, e.g. for logs and health checks."""
        return self.engine.pool.status()

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("Connection pool disposed")


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except PoolTimeoutError as e:
        logger.error("Connection pool exhausted", error_message=str(e))
        raise PoolExhaustedError("No database connection available") from e
    except IntegrityError as e:
        logger.error("Constraint violation", error_message=str(e.orig))
        raise PersistenceError("The change violates a database constraint") from e
    except SQLAlchemyError as e:
        logger.error(
            "Database error", error_type=type(e).__name__, error_message=str(e)
        )
        raise PersistenceError("A database error occurred") from e


def get_pool(request: Request) -> ConnectionPool:
    """FastAPI dependency returning the pool built at startup."""
    pool: ConnectionPool | None = getattr(request.app.state, "pool", None)
    if pool is None:
        raise PersistenceError("Connection pool is not initialized")
    return pool
