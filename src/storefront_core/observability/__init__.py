"""Observability: structured logging."""

from storefront_core.observability.logging import LogContext, StructuredLogFormatter, configure_logging

__all__ = [
    "LogContext",
    "StructuredLogFormatter",
    "configure_logging",
]
