"""
logging_config.py — Loguru setup for GlobeTrotter

Loguru is the only backend. Module loggers created with
logging.getLogger(__name__) are bridged into it, so services can keep the
stdlib API while routers import loguru's logger directly.

Business Rules:
- Level and mode come from settings (LOG_LEVEL, APP_URL); callers may override
- Production writes JSON lines to stdout, development a colored console
- An optional LOG_FILE adds a rotating JSON file sink
- Every record carries request_id ("-" outside a request)

Called by: globetrotter/main.py (lifespan), scripts/seed.py
Depends on: globetrotter/config.py
"""

import logging
import sys

from loguru import logger

from .config import settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[request_id]}</cyan> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "{message}"
)

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "botocore", "boto3", "urllib3", "multipart")


def setup_logging(level: str | None = None, production: bool | None = None) -> None:
    """Replace all sinks and bridge stdlib logging into Loguru."""
    level = (level or settings.log_level).upper()
    if production is None:
        production = settings.is_production

    logger.remove()
    logger.configure(extra={"request_id": "-"})
    if production:
        logger.add(sys.stdout, level=level, format="{message}", serialize=True)
    else:
        logger.add(sys.stdout, level=level, format=CONSOLE_FORMAT, colorize=True)
    if settings.log_file:
        logger.add(
            settings.log_file,
            level=level,
            rotation="10 MB",
            retention="14 days",
            serialize=True,
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging configured", level=level, production=production)


class _InterceptHandler(logging.Handler):
    """Forward stdlib records to Loguru, keeping the original caller."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())
