"""Observability module for telemetry-appender.

Structured logging on top of the standard logging module. Keyword
arguments and LogContext values travel on each record as structured data,
which TelemetryHandler forwards as telemetry properties.

Example:
    from telemetry_appender.observability import LogContext, get_logger

    logger = get_logger(__name__)

    with LogContext(request_id="abc123"):
        logger.info("Order placed", order_id=42)
"""

from telemetry_appender.observability.logging import (
    LogContext,
    StructuredFormatter,
    StructuredLogger,
    configure_logging,
    current_context,
    get_logger,
    reset_logging,
    structured_data,
)

__all__ = [
    "LogContext",
    "StructuredFormatter",
    "StructuredLogger",
    "configure_logging",
    "current_context",
    "get_logger",
    "reset_logging",
    "structured_data",
]
