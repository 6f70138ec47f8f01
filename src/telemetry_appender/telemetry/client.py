"""Telemetry client: the sink that receives records from the handler.

The client owns a TelemetryContext for its lifetime. On submit it stamps
that context onto the record, wraps the record in an envelope and hands the
envelope to its channel.

Envelope layout:
    {
        "name": "Message" | "Exception",
        "time": ISO 8601 timestamp,
        "iKey": instrumentation key or None,
        "tags": {"ai.user.id": ..., "ai.internal.sdkVersion": ...},
        "data": {"baseType": "MessageData" | "ExceptionData", "baseData": {...}},
    }
"""

from __future__ import annotations

import threading
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

from telemetry_appender.errors import MissingArgumentError
from telemetry_appender.observability.logging import get_logger
from telemetry_appender.telemetry.channel import InMemoryChannel, TelemetryChannel
from telemetry_appender.telemetry.config import (
    TelemetryConfiguration,
    get_active_configuration,
)
from telemetry_appender.telemetry.context import TelemetryContext
from telemetry_appender.telemetry.records import Telemetry

logger = get_logger(__name__)


@runtime_checkable
class TelemetrySink(Protocol):  # pragma: no cover
    """Anything that accepts telemetry records."""

    def submit(self, record: Telemetry) -> None:
        """Accept one record for delivery."""
        ...


class TelemetryClient:
    """Sends telemetry records to a channel.

    Safe for concurrent use: submit() keeps no per-call state on the client
    and channels own their own locking.

    Usage:
        client = TelemetryClient(channel=StreamChannel(sys.stdout))
        client.context.instrumentation_key = "my-key"
        client.submit(TraceTelemetry("hello"))
    """

    def __init__(
        self,
        configuration: TelemetryConfiguration | None = None,
        channel: TelemetryChannel | None = None,
    ) -> None:
        """Create a client from configuration.

        Args:
            configuration: Settings to start from. None uses the process-wide
                active configuration (see telemetry.config).
            channel: Envelope consumer. None creates an InMemoryChannel sized
                by configuration.channel_capacity.

        Returns:
            None (constructor).

        Raises:
            None. A missing instrumentation key is not an error.
        """
        self.configuration = configuration or get_active_configuration()
        if channel is None:
            channel = InMemoryChannel(self.configuration.channel_capacity)
        self.channel: TelemetryChannel = channel
        self.context = TelemetryContext(
            instrumentation_key=self.configuration.instrumentation_key or None
        )
        self._flush_lock = threading.Lock()

        if self.context.instrumentation_key is None:
            logger.debug("No instrumentation key configured; records sent without one")

    def submit(self, record: Telemetry) -> None:
        """Stamp the client context onto a record and send it.

        The record's own values win: an instrumentation key or user id
        already set on the record is left untouched.

        Args:
            record: TraceTelemetry or ExceptionTelemetry to send.

        Returns:
            None.

        Raises:
            MissingArgumentError: If record is None.
            Any exception raised by the channel propagates unchanged.
        """
        if record is None:
            raise MissingArgumentError("record")

        if not record.context.instrumentation_key:
            record.context.instrumentation_key = self.context.instrumentation_key
        if record.context.user.id is None:
            record.context.user.id = self.context.user.id
        if record.context.internal.sdk_version is None:
            record.context.internal.sdk_version = self.context.internal.sdk_version

        self.channel.send(self._to_envelope(record))

    def flush(self) -> None:
        """Flush the channel."""
        with self._flush_lock:
            self.channel.flush()

    @staticmethod
    def _to_envelope(record: Telemetry) -> dict[str, Any]:
        timestamp = record.timestamp or datetime.now(tz=UTC)
        return {
            "name": record.envelope_name,
            "time": timestamp.isoformat(),
            "iKey": record.context.instrumentation_key,
            "tags": record.context.to_tags(),
            "data": {
                "baseType": f"{record.envelope_name}Data",
                "baseData": record.to_base_data(),
            },
        }
