"""Structured JSON logging with per-task context fields."""

import json
import logging
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any

from storefront_core.config import Settings, get_settings

# Fields bound by the innermost LogContext of the current task
_context_fields: ContextVar[dict[str, Any]] = ContextVar("storefront_log_context", default={})

_factory_installed = False


def current_context() -> dict[str, Any]:
    """Context fields bound in the current task (or thread)."""
    return dict(_context_fields.get())


def install_context_factory() -> None:
    """
    Wrap the log record factory so new records carry the bound context fields.

    Safe to call repeatedly; the factory is installed once per process. Records
    created outside any LogContext are left without an ``extra`` attribute.
    """
    global _factory_installed
    if _factory_installed:
        return

    base_factory = logging.getLogRecordFactory()

    def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
        record = base_factory(*args, **kwargs)
        fields = _context_fields.get()
        if fields:
            record.extra = dict(fields)
        return record

    logging.setLogRecordFactory(record_factory)
    _factory_installed = True


class StructuredLogFormatter(logging.Formatter):
    """
    JSON log formatter.

    Each entry has timestamp, level, logger, message and source location, the
    service name when configured, context fields under ``extra`` and the
    formatted exception if any.
    """

    def __init__(self, service_name: str | None = None) -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.service_name:
            entry["service"] = self.service_name

        entry["location"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        extra = getattr(record, "extra", None)
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(
    settings: Settings | None = None,
    module_levels: dict[str, str] | None = None,
) -> None:
    """
    Configure root logging from settings.

    Args:
        settings: Source of ``log_level``, ``log_json`` and ``service_name``;
            the cached application settings by default.
        module_levels: Per-module log levels (e.g., {"storefront_core.cart": "DEBUG"}).
    """
    settings = settings or get_settings()
    install_context_factory()

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level.upper())
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if settings.log_json:
        handler.setFormatter(StructuredLogFormatter(service_name=settings.service_name))
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root_logger.addHandler(handler)

    for module, level in (module_levels or {}).items():
        logging.getLogger(module).setLevel(level.upper())

    # HTTP client and access logs only at WARNING
    for noisy in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={settings.log_level} json={settings.log_json}"
    )


class LogContext:
    """
    Bind extra fields to every record logged inside the block.

    Fields live in a context variable, so concurrent asyncio tasks each see
    only their own bindings, including across ``await``. Nested contexts add to
    the outer fields and restore them on exit.

    Usage:
        with LogContext(trigger="focus"):
            logger.info("Reconciling cart")
    """

    def __init__(self, **fields: Any) -> None:
        self.fields = fields
        self._token: Token[dict[str, Any]] | None = None

    def __enter__(self) -> "LogContext":
        install_context_factory()
        self._token = _context_fields.set({**_context_fields.get(), **self.fields})
        return self

    def __exit__(self, *args: Any) -> None:
        if self._token is not None:
            _context_fields.reset(self._token)
            self._token = None
