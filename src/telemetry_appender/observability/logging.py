"""Structured logging for telemetry-appender.

Producer-side helpers that let an application attach context properties to
its log records. The TelemetryHandler turns those properties into telemetry
record metadata.

- StructuredLogger: keyword arguments on log calls become structured data
- LogContext: ambient key-value pairs for every record inside a block
- StructuredFormatter: "message | key=value" console layout
- configure_logging / get_logger / reset_logging: idempotent setup

Structured data travels on the record as the ``structured_data`` attribute,
so plain ``logging.Logger`` instances interoperate: records without it
simply carry no structured properties.

Example:
    logger = get_logger(__name__)

    with LogContext(request_id="abc123"):
        logger.info("Order placed", order_id=42)
        # record.structured_data == {"request_id": "abc123", "order_id": 42}

    # Send application logs to telemetry as well as stderr
    configure_logging(
        logger_name="myapp",
        telemetry_handler=TelemetryHandler(instrumentation_key="..."),
    )
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
import threading
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import IO, TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from telemetry_appender.appender.handler import TelemetryHandler

#: Logger hierarchy configured by default.
PACKAGE_LOGGER = "telemetry_appender"

#: Record attribute carrying structured key-value data.
STRUCTURED_DATA_ATTR = "structured_data"

# Context variable for structured logging context
_log_context: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar(
    "log_context", default={}
)


def current_context() -> dict[str, Any]:
    """Return a copy of the LogContext values active in this task or thread."""
    return dict(_log_context.get())


# =============================================================================
# Structured Logger
# =============================================================================


class StructuredLogger(logging.Logger):
    """Logger that turns keyword arguments into structured data.

    Usage:
        logger = get_logger("myapp.orders")
        logger.info("Order placed", order_id=42, customer="acme")
        logger.error("Payment failed", exc_info=True, order_id=42)
    """

    def _log(
        self,
        level: int,
        msg: object,
        args: tuple[Any, ...] | Mapping[str, Any],
        exc_info: Any = None,
        extra: Mapping[str, object] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **kwargs: Any,
    ) -> None:
        """Log with structured data support.

        Logger.debug/info/... forward unknown keyword arguments here. They are
        merged over the active LogContext values and stored in
        ``extra["structured_data"]``, so explicit kwargs take precedence over
        ambient context.

        Args:
            level: Numeric log level.
            msg: Log message, may contain % placeholders.
            args: Arguments for % formatting.
            exc_info: Exception info, True to capture the current exception.
            extra: Additional LogRecord attributes. Not mutated.
            stack_info: If True, include the stack in the record.
            stacklevel: Frames to skip when locating the caller.
            **kwargs: Structured key-value data for this record.

        Returns:
            None.

        Example:
            >>> with LogContext(tenant="acme"):
            ...     logger.info("Invoice sent", invoice_id=7)
            # structured_data == {"tenant": "acme", "invoice_id": 7}
        """
        structured_data = {**_log_context.get(), **kwargs}

        merged_extra: dict[str, object] = dict(extra) if extra else {}
        merged_extra[STRUCTURED_DATA_ATTR] = structured_data

        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=merged_extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )


# =============================================================================
# Formatters
# =============================================================================


class StructuredFormatter(logging.Formatter):
    """Human-readable formatter with structured data.

    Format: timestamp - name - level - message | key=value key=value
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        include_structured: bool = True,
    ) -> None:
        """Initialize the structured formatter.

        Args:
            fmt: Format string using LogRecord attributes. If None, uses
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'.
            datefmt: Date/time format for %(asctime)s.
            include_structured: If True (default), append structured data as
                ' | key=value ...' after the formatted message.

        Returns:
            None (constructor).

        Example:
            >>> handler.setFormatter(StructuredFormatter("%(message)s"))
            # Output: "Order placed | order_id=42"
        """
        if fmt is None:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        super().__init__(fmt, datefmt)
        self.include_structured = include_structured

    def format(self, record: logging.LogRecord) -> str:
        """Format the record, appending structured data when present."""
        base = super().format(record)

        if not self.include_structured:
            return base

        structured = getattr(record, STRUCTURED_DATA_ATTR, None)
        if not structured:
            return base

        pairs = " ".join(f"{k}={_format_value(v)}" for k, v in structured.items())
        return f"{base} | {pairs}"


def _format_value(value: Any) -> str:
    """Format a value for key=value output.

    Rules:
    - None: 'null'
    - Strings: as-is, quoted when they contain spaces
    - Dicts/lists: JSON
    - Everything else: str()

    Example:
        >>> _format_value("has spaces")
        '"has spaces"'
        >>> _format_value({"a": 1})
        '{"a": 1}'
    """
    if value is None:
        return "null"
    if isinstance(value, str):
        if " " in value:
            return f'"{value}"'
        return value
    if isinstance(value, dict | list):
        return json.dumps(value, default=str)
    return str(value)


# =============================================================================
# Context Management
# =============================================================================


@dataclass
class LogContext:
    """Context manager adding key-value pairs to every record in its scope.

    Backed by contextvars, so values are isolated per thread and per asyncio
    task. Contexts nest; inner values override outer ones.

    Usage:
        with LogContext(request_id="abc"):
            logger.info("Processing")  # request_id attached

            with LogContext(step="charge"):
                logger.info("Charging")  # request_id and step attached
    """

    _kwargs: dict[str, Any] = field(default_factory=dict, init=False, repr=True)
    _token: contextvars.Token[dict[str, Any]] | None = field(
        default=None, init=False, repr=False
    )

    def __init__(self, **kwargs: Any) -> None:
        """Store the key-value pairs to activate on enter.

        Args:
            **kwargs: Context properties. Values are stringified when they
                become telemetry properties; None values are dropped there.
        """
        self._kwargs = kwargs
        self._token = None

    def __enter__(self) -> LogContext:
        current = _log_context.get()
        self._token = _log_context.set({**current, **self._kwargs})
        return self

    def __exit__(self, *args: Any) -> None:
        """Restore the context that was active before __enter__."""
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None


# =============================================================================
# Configuration
# =============================================================================

# Track if logging has been configured, and whether get_logger() did it
_configured_logger: str | None = None
_auto_configured = False
_config_lock = threading.Lock()


def configure_logging(
    level: int | str = logging.INFO,
    stream: IO[str] | None = None,
    telemetry_handler: TelemetryHandler | None = None,
    logger_name: str = PACKAGE_LOGGER,
    include_structured: bool = True,
    force: bool = False,
) -> None:
    """Configure structured logging, optionally forwarding to telemetry.

    Installs StructuredLogger as the logger class, attaches a stderr (or
    ``stream``) handler with StructuredFormatter to ``logger_name`` and, when
    given, the TelemetryHandler as well. Idempotent: later calls do nothing
    unless force=True. A default setup made implicitly by get_logger() (for
    example when this package is imported) is replaced by the first explicit
    call. Protected by a lock for concurrent startup code.

    Args:
        level: Minimum level for the configured logger (int or name).
        stream: Console output stream. Default: sys.stderr.
        telemetry_handler: Handler to attach next to the console handler.
        logger_name: Logger hierarchy to configure. Use "" for the root
            logger. Default: the package logger.
        include_structured: Append structured data to console output.
        force: Reset a previous configuration first.

    Returns:
        None.

    Example:
        >>> configure_logging(
        ...     level="DEBUG",
        ...     logger_name="myapp",
        ...     telemetry_handler=TelemetryHandler(instrumentation_key="k"),
        ... )
    """
    with _config_lock:
        if force or _auto_configured:
            _reset_logging_impl()
        _configure_logging_impl(
            level, stream, telemetry_handler, logger_name, include_structured
        )


def _configure_logging_impl(
    level: int | str = logging.INFO,
    stream: IO[str] | None = None,
    telemetry_handler: TelemetryHandler | None = None,
    logger_name: str = PACKAGE_LOGGER,
    include_structured: bool = True,
    automatic: bool = False,
) -> None:
    """Internal implementation of configure_logging (assumes lock is held)."""
    global _configured_logger, _auto_configured

    if _configured_logger is not None:
        return

    logging.setLoggerClass(StructuredLogger)

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setFormatter(StructuredFormatter(include_structured=include_structured))

    target = logging.getLogger(logger_name)
    target.setLevel(level)
    target.addHandler(console)
    if telemetry_handler is not None:
        target.addHandler(telemetry_handler)

    # The root logger may carry its own handlers; avoid duplicates
    if logger_name:
        target.propagate = False

    _configured_logger = logger_name
    _auto_configured = automatic


def _reset_logging_impl() -> None:
    """Internal implementation of reset_logging (assumes lock is held)."""
    global _configured_logger, _auto_configured

    if _configured_logger is not None:
        target = logging.getLogger(_configured_logger)
        for handler in target.handlers[:]:
            target.removeHandler(handler)
            handler.close()
        if _configured_logger:
            target.setLevel(logging.NOTSET)
            target.propagate = True

    _configured_logger = None
    _auto_configured = False


def reset_logging() -> None:
    """Remove and close the configured handlers (for tests and reconfiguration)."""
    with _config_lock:
        _reset_logging_impl()


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger, configuring logging with defaults if needed.

    Args:
        name: Logger name, typically __name__.

    Returns:
        StructuredLogger for ``name``.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Ready", port=8080)
    """
    # Double-checked locking for lazy initialization
    if _configured_logger is None:
        with _config_lock:
            if _configured_logger is None:  # pragma: no branch
                _configure_logging_impl(automatic=True)

    # setLoggerClass() in configure makes new loggers StructuredLogger
    logger = logging.getLogger(name)
    return cast(StructuredLogger, logger)


def structured_data(record: logging.LogRecord) -> MutableMapping[str, Any]:
    """Return the structured data carried by a record (empty if none)."""
    data = getattr(record, STRUCTURED_DATA_ATTR, None)
    return data if isinstance(data, MutableMapping) else {}
