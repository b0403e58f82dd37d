"""Database engine and session factory used by the durable storage backend."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from usercore.entities.core.user.table import UserTable  # noqa: F401  registers metadata


class DbSessionService:
    def __init__(self, database_url: str, *, echo: bool = False, environment: str = "development"):
        """Initialize the shared database engine and session factory."""

        logger.info("Setting up database engine for environment: {}", environment)
        engine_kwargs: dict = {
            "echo": echo,
            "pool_pre_ping": True,
            "connect_args": self._get_connect_args(database_url, environment),
        }

        if database_url.startswith("sqlite") and ":memory:" in database_url:
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs["poolclass"] = StaticPool

        self._database_url = database_url
        self._engine = create_engine(database_url, **engine_kwargs)

    @property
    def engine(self):
        return self._engine

    def _get_connect_args(self, database_url: str, environment: str) -> dict:
        """Get database-specific connection arguments."""
        connect_args = {}

        if "postgresql" in database_url:
            connect_args.update(
                {
                    "application_name": f"{environment}_usercore",
                    "connect_timeout": 30,
                }
            )

        elif "sqlite" in database_url:
            connect_args.update(
                {
                    "check_same_thread": False,
                    "timeout": 20,  # Lock timeout
                }
            )

            if environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )

        return connect_args

    def init_schema(self) -> None:
        """Create the tables if they do not exist yet."""
        logger.info("Creating database tables")
        SQLModel.metadata.create_all(self._engine)

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(self._engine, expire_on_commit=False)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Transactional scope: commit on success, rollback on any error."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.debug("Rolled back database session: {}", e)
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        self._engine.dispose()
