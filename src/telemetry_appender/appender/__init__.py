"""Log record to telemetry translation.

Leaves first: severity mapping, event model, metadata extraction, handler.
"""

from telemetry_appender.appender.events import LocationInfo, LogEvent
from telemetry_appender.appender.handler import (
    DEFAULT_LAYOUT,
    FALLBACK_TRACE_MESSAGE,
    SDK_VERSION,
    TelemetryHandler,
)
from telemetry_appender.appender.metadata import (
    RESERVED_PREFIX,
    add_property,
    extract_properties,
    is_excluded_key,
    is_reserved_key,
    populate_common_fields,
)
from telemetry_appender.appender.severity import get_severity_level

__all__ = [
    # Events
    "LocationInfo",
    "LogEvent",
    # Handler
    "DEFAULT_LAYOUT",
    "FALLBACK_TRACE_MESSAGE",
    "SDK_VERSION",
    "TelemetryHandler",
    # Metadata
    "RESERVED_PREFIX",
    "add_property",
    "extract_properties",
    "is_excluded_key",
    "is_reserved_key",
    "populate_common_fields",
    # Severity
    "get_severity_level",
]
