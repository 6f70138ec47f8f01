"""Telemetry sink side: records, context, client, channels and configuration.

Example:
    from telemetry_appender.telemetry import TelemetryClient, TraceTelemetry

    client = TelemetryClient()
    client.submit(TraceTelemetry("Service started"))
"""

from telemetry_appender.telemetry.channel import (
    DEFAULT_CHANNEL_CAPACITY,
    InMemoryChannel,
    StreamChannel,
    TelemetryChannel,
)
from telemetry_appender.telemetry.client import TelemetryClient, TelemetrySink
from telemetry_appender.telemetry.config import (
    TelemetryConfiguration,
    configure,
    get_active_configuration,
    reset_configuration,
)
from telemetry_appender.telemetry.context import (
    InternalContext,
    TelemetryContext,
    UserContext,
)
from telemetry_appender.telemetry.records import (
    ExceptionTelemetry,
    SeverityLevel,
    Telemetry,
    TelemetryKind,
    TraceTelemetry,
)

__all__ = [
    # Records
    "ExceptionTelemetry",
    "SeverityLevel",
    "Telemetry",
    "TelemetryKind",
    "TraceTelemetry",
    # Context
    "InternalContext",
    "TelemetryContext",
    "UserContext",
    # Client
    "TelemetryClient",
    "TelemetrySink",
    # Channels
    "DEFAULT_CHANNEL_CAPACITY",
    "InMemoryChannel",
    "StreamChannel",
    "TelemetryChannel",
    # Configuration
    "TelemetryConfiguration",
    "configure",
    "get_active_configuration",
    "reset_configuration",
]
