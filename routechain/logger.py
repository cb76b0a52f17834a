"""
Log output for routechain applications.

Modules log through ``logging.getLogger(__name__)`` and attach request data
with ``extra={...}``; the formatters here render those fields after the
message. ``configure_logging`` wires the ``routechain`` logger from Settings.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .config import Settings

RESET = "\033[0m"
LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[41m",
}

# Request fields routing and middleware pass in `extra`
CONTEXT_FIELDS = ("request_id", "method", "path", "route", "status")


def record_context(record: logging.LogRecord, show_environment: bool) -> List[tuple]:
    """Request fields present on ``record``, in CONTEXT_FIELDS order."""
    pairs = [(field, getattr(record, field)) for field in CONTEXT_FIELDS if hasattr(record, field)]
    if show_environment and hasattr(record, "environment"):
        pairs.append(("environment", record.environment))
    return pairs


class JSONFormatter(logging.Formatter):
    """One JSON object per line, request fields nested under "context"."""

    def __init__(self, show_environment: bool = True):
        super().__init__()
        self.show_environment = show_environment

    def format(self, record):
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": created.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "logger": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
        }
        context = dict(record_context(record, self.show_environment))
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """``time LEVEL [logger] message key=value ...`` with optional colours."""

    def __init__(self, show_environment: bool = False, colored: bool = True):
        super().__init__(
            fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.show_environment = show_environment
        self.colored = colored

    def format(self, record):
        levelname = record.levelname
        if self.colored and levelname in LEVEL_COLORS:
            record.levelname = f"\033[1m{LEVEL_COLORS[levelname]}{levelname}{RESET}"
        try:
            line = super().format(record)
        finally:
            # other handlers share the record
            record.levelname = levelname

        for key, value in record_context(record, self.show_environment):
            line += f" {'env' if key == 'environment' else key}={value}"
        return line


class EnvironmentLoggerAdapter(logging.LoggerAdapter):
    """Stamps the deployment environment on every record it passes on."""

    def __init__(self, logger: logging.Logger, environment: str):
        super().__init__(logger, {"environment": environment})

    def process(self, msg, kwargs):
        kwargs["extra"] = {**kwargs.get("extra", {}), "environment": self.extra["environment"]}
        return msg, kwargs


class Logger:
    """
    Factory: ``Logger(name, ...)`` configures the named stdlib logger and
    returns it wrapped in an EnvironmentLoggerAdapter.

    Calling it again for the same name replaces the previous handlers.
    """

    def __new__(
        cls,
        name: str,
        log_file: Optional[str] = None,
        level: int = logging.INFO,
        max_bytes: int = 5_000_000,
        backup_count: int = 3,
        json_logs: bool = True,
        to_console: bool = True,
        environment: str = "production",
        show_environment: bool = False,
        colored_console: bool = True,
    ) -> EnvironmentLoggerAdapter:
        def formatter(colored: bool) -> logging.Formatter:
            if json_logs:
                return JSONFormatter(show_environment)
            return TextFormatter(show_environment, colored)

        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False
        logger.handlers.clear()

        if log_file:
            os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
            handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
            # never colour files
            handler.setFormatter(formatter(False))
            logger.addHandler(handler)

        if to_console:
            handler = logging.StreamHandler()
            handler.setFormatter(formatter(colored_console))
            logger.addHandler(handler)

        return EnvironmentLoggerAdapter(logger, environment)


def configure_logging(settings: "Settings", name: str = "routechain") -> EnvironmentLoggerAdapter:
    """
    Configure the package logger from application settings.

    Every module logs through ``logging.getLogger(__name__)``, so configuring
    the ``routechain`` logger covers routing, dispatch and the ASGI adapter.
    """
    return Logger(
        name,
        log_file=settings.log_file,
        level=logging.getLevelName(settings.log_level),
        json_logs=settings.json_logs,
        environment=settings.environment,
        show_environment=settings.debug,
        colored_console=not settings.json_logs,
    )
