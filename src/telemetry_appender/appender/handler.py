"""Logging handler that forwards records to a telemetry sink.

Each record becomes exactly one telemetry record:
- a record with an attached exception becomes an ExceptionTelemetry
- any other record becomes a TraceTelemetry whose text is the record
  rendered through the handler's formatter

Usage:
    import logging
    from telemetry_appender import TelemetryHandler

    handler = TelemetryHandler(instrumentation_key="00000000-0000-...")
    logging.getLogger().addHandler(handler)

    logging.getLogger("app").warning("Disk almost full")  # TraceTelemetry
    try:
        1 / 0
    except ZeroDivisionError:
        logging.getLogger("app").exception("Math")  # ExceptionTelemetry

dictConfig:
    "handlers": {
        "telemetry": {
            "class": "telemetry_appender.TelemetryHandler",
            "instrumentation_key": "00000000-0000-...",
            "formatter": "plain",
        }
    }
"""

from __future__ import annotations

import logging
import threading

from telemetry_appender._version import __version__
from telemetry_appender.appender.events import LogEvent
from telemetry_appender.appender.metadata import populate_common_fields
from telemetry_appender.appender.severity import get_severity_level
from telemetry_appender.errors import (
    AppenderConfigurationError,
    LogDeliveryError,
    MissingArgumentError,
)
from telemetry_appender.telemetry.client import TelemetryClient, TelemetrySink
from telemetry_appender.telemetry.records import ExceptionTelemetry, TraceTelemetry

#: SDK identity stamped into the client's internal context.
SDK_VERSION = f"logging:{__version__}"

#: Trace text used when a record carries no message.
FALLBACK_TRACE_MESSAGE = "Logging Trace"

#: Layout installed when no formatter is supplied.
DEFAULT_LAYOUT = "%(message)s"


class TelemetryHandler(logging.Handler):
    """Handler that routes log records to a telemetry sink.

    The handler is activated on construction and owns one sink for its
    whole lifetime. It keeps no per-record state, so a single instance may
    be shared by any number of threads; the sink is responsible for its own
    synchronization.

    Failure isolation:
        MissingArgumentError raised while building or submitting a record is
        re-raised from append() as LogDeliveryError. Other exceptions pass
        through unchanged. emit() hands every failure to handleError(), the
        logging module's error policy, and never logs about itself.

    Attributes:
        instrumentation_key: Key pushed into the sink context at activation.
        requires_layout: The handler needs a formatter to render traces.
    """

    requires_layout = True

    def __init__(
        self,
        client: TelemetrySink | None = None,
        instrumentation_key: str | None = None,
        level: int | str = logging.NOTSET,
        formatter: logging.Formatter | None = None,
    ) -> None:
        """Create and activate the handler.

        Args:
            client: Sink to submit records to. None creates a
                TelemetryClient from the active telemetry configuration.
            instrumentation_key: Key attributing every record. None or empty
                keeps the sink's own default.
            level: Minimum level handled. Default: NOTSET (all records).
            formatter: Layout used to render trace text. Default: a plain
                "%(message)s" formatter.

        Returns:
            None (constructor).

        Raises:
            AppenderConfigurationError: If activation fails (see
                activate_options).

        Example:
            >>> handler = TelemetryHandler(client=TelemetryClient(), level="INFO")
            >>> handler.telemetry_client.context.internal.sdk_version
            'logging:1.0.0'
        """
        super().__init__(level)
        self.instrumentation_key = instrumentation_key
        # Per-instance, per-thread re-entrancy guard: the sink may log while
        # this handler emits
        self._local = threading.local()
        self.setFormatter(
            formatter if formatter is not None else logging.Formatter(DEFAULT_LAYOUT)
        )
        self._telemetry_client: TelemetrySink | None = None
        self.activate_options(client)

    @property
    def telemetry_client(self) -> TelemetrySink | None:
        """The sink acquired at activation."""
        return self._telemetry_client

    def activate_options(self, client: TelemetrySink | None = None) -> None:
        """Acquire the sink and stamp it with the key and SDK identity.

        Runs once, from __init__. The sink is never replaced afterwards.

        Args:
            client: Sink to use. None creates a TelemetryClient.

        Returns:
            None.

        Raises:
            AppenderConfigurationError: If the handler is already active, or
                if no formatter is set.
        """
        if self._telemetry_client is not None:
            raise AppenderConfigurationError("TelemetryHandler is already activated")
        if self.requires_layout and self.formatter is None:
            raise AppenderConfigurationError(
                "TelemetryHandler requires a formatter to render traces"
            )

        if client is None:
            client = TelemetryClient()

        context = getattr(client, "context", None)
        if context is not None:
            if self.instrumentation_key:
                context.instrumentation_key = self.instrumentation_key
            context.get_internal_context().sdk_version = SDK_VERSION

        self._telemetry_client = client

    def emit(self, record: logging.LogRecord) -> None:
        """Forward a record to telemetry.

        Skips records produced while this handler is already emitting on the
        current thread, which happens when the sink itself logs to a logger
        this handler is attached to. Other handler instances are unaffected.

        Args:
            record: Record from the logging pipeline.

        Returns:
            None.

        Raises:
            RecursionError: Re-raised, as the standard handlers do. All other
                failures go to self.handleError().
        """
        if getattr(self._local, "emitting", False):
            return

        try:
            self._local.emitting = True
            self.append(record)
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)
        finally:
            self._local.emitting = False

    def append(self, record: logging.LogRecord) -> None:
        """Convert one record and submit it.

        Args:
            record: Record to convert.

        Returns:
            None.

        Raises:
            LogDeliveryError: If a required value was None while building or
                submitting the telemetry record.
            Exception: Anything else raised by the sink, unchanged.
        """
        event = LogEvent.from_record(record)
        if event.exception is not None:
            self._send_exception(event)
        else:
            self._send_trace(event, record)

    def flush(self) -> None:
        """Flush the sink if it supports flushing."""
        flush = getattr(self._telemetry_client, "flush", None)
        if flush is not None:
            flush()

    def close(self) -> None:
        """Flush the sink, then release the handler."""
        try:
            self.flush()
        finally:
            super().close()

    def _send_exception(self, event: LogEvent) -> None:
        try:
            telemetry = ExceptionTelemetry(
                event.exception,
                severity_level=get_severity_level(event.level),
            )
            populate_common_fields(event, telemetry)
            self._submit(telemetry)
        except MissingArgumentError as exc:
            raise LogDeliveryError(str(exc)) from exc

    def _send_trace(self, event: LogEvent, record: logging.LogRecord) -> None:
        try:
            if event.rendered_message is not None:
                message = self.format(record)
            else:
                message = FALLBACK_TRACE_MESSAGE

            telemetry = TraceTelemetry(
                message,
                severity_level=get_severity_level(event.level),
            )
            populate_common_fields(event, telemetry)
            self._submit(telemetry)
        except MissingArgumentError as exc:
            raise LogDeliveryError(str(exc)) from exc

    def _submit(self, telemetry: ExceptionTelemetry | TraceTelemetry) -> None:
        if self._telemetry_client is None:
            raise MissingArgumentError("client", "TelemetryHandler is not activated")
        self._telemetry_client.submit(telemetry)
