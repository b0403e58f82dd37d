import logging
import sys
from pathlib import Path

from loguru import logger

from usercore.api.http.app_data import ApplicationDependencies
from usercore.core.services import DbSessionService, UserService
from usercore.entities.core.user import (
    InMemoryUserRepository,
    SqlUserRepository,
    UserRepository,
)
from usercore.runtime.settings import Settings


class InterceptHandler(logging.Handler):
    """Redirect standard 'logging' records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Request logging middleware already covers access logs
        if record.name == "uvicorn.access":
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(
            depth=2,
            exception=record.exc_info,
        ).bind(logger_name=record.name).log(level, record.getMessage())


def configure_logging(settings: Settings) -> None:
    env = settings.environment

    # Reset Loguru and guarantee a default request_id
    logger.remove()
    logger.configure(extra={"request_id": "-"})

    fmt_plain = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "[<cyan>{extra[request_id]}</cyan>] | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )
    is_json_file = settings.log_format == "json"
    diagnose_on = env != "production"

    logger.add(
        sys.stderr,
        level=settings.log_level,
        format=fmt_plain,
        colorize=True,
        backtrace=diagnose_on,
        diagnose=diagnose_on,
    )

    if settings.log_file:
        path = Path(settings.log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(path),
            level=settings.log_level,
            format="{message}" if is_json_file else fmt_plain,
            serialize=is_json_file,
            rotation=f"{settings.log_max_size_mb} MB",
            retention=settings.log_backup_count,
            enqueue=True,
            backtrace=diagnose_on,
            diagnose=diagnose_on,
        )

    # Forward stdlib logging (uvicorn, sqlalchemy) into Loguru
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict.keys()):
        stdlog = logging.getLogger(name)
        stdlog.handlers = []
        stdlog.propagate = True

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)

    logger.info(
        "Logging configured",
        app_level=settings.log_level,
        app_format=settings.log_format,
        app_file=settings.log_file,
        environment=env,
    )


def build_dependencies(
    settings: Settings, repository: UserRepository | None = None
) -> ApplicationDependencies:
    """Wire the storage backend and the user service.

    An explicitly passed repository wins over ``settings.storage_backend``.
    """
    database_service = None

    if repository is None:
        if settings.storage_backend == "sql":
            logger.info("Using SQL user storage")
            database_service = DbSessionService(
                settings.database_url,
                echo=settings.database_echo,
                environment=settings.environment,
            )
            database_service.init_schema()
            repository = SqlUserRepository(database_service)
        else:
            logger.info("Using in-memory user storage")
            repository = InMemoryUserRepository()

    return ApplicationDependencies(
        user_repository=repository,
        user_service=UserService(repository),
        database_service=database_service,
    )
