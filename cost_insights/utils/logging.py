"""
Structured logging setup

Configures structlog on top of the standard library logging module. If the
structlog pipeline cannot be configured, plain console logging is used so
callers still get output.
"""

import logging
import sys
from typing import Any, Optional, Protocol

import structlog


class LoggerPort(Protocol):
    """Minimal logging capability injected into the analysis core"""

    def debug(self, event: str, **kw: Any) -> Any: ...

    def info(self, event: str, **kw: Any) -> Any: ...

    def warning(self, event: str, **kw: Any) -> Any: ...

    def error(self, event: str, **kw: Any) -> Any: ...


def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structlog and stdlib logging.

    Args:
        log_level: Root log level name
        json_logs: Render JSON lines instead of colourised console output
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        renderer = (
            structlog.processors.JSONRenderer()
            if json_logs
            else structlog.dev.ConsoleRenderer()
        )
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                renderer,
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    except Exception as e:
        logging.basicConfig(
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
            stream=sys.stderr,
            level=level,
        )
        logging.getLogger(__name__).warning("structlog setup failed, using console logging: %s", e)


def get_logger(name: Optional[str] = None, logger: Optional[LoggerPort] = None) -> LoggerPort:
    """Return the injected logger, or a structlog logger for the given name."""
    if logger is not None:
        return logger
    return structlog.get_logger(name)
