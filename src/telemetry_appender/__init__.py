"""telemetry-appender: send Python log records to a telemetry service.

Example:
    import logging
    from telemetry_appender import TelemetryHandler

    logging.getLogger().addHandler(TelemetryHandler(instrumentation_key="..."))
"""

from telemetry_appender._version import __version__
from telemetry_appender.observability import LogContext, get_logger
from telemetry_appender.telemetry import (
    ExceptionTelemetry,
    InMemoryChannel,
    SeverityLevel,
    StreamChannel,
    TelemetryClient,
    TelemetryConfiguration,
    TraceTelemetry,
)
from telemetry_appender.appender import LogEvent, TelemetryHandler, get_severity_level
from telemetry_appender.errors import (
    AppenderConfigurationError,
    LogDeliveryError,
    MissingArgumentError,
    TelemetryAppenderError,
)

__all__ = [
    "__version__",
    # Handler
    "LogEvent",
    "TelemetryHandler",
    "get_severity_level",
    # Telemetry
    "ExceptionTelemetry",
    "InMemoryChannel",
    "SeverityLevel",
    "StreamChannel",
    "TelemetryClient",
    "TelemetryConfiguration",
    "TraceTelemetry",
    # Logging
    "LogContext",
    "get_logger",
    # Errors
    "AppenderConfigurationError",
    "LogDeliveryError",
    "MissingArgumentError",
    "TelemetryAppenderError",
]
