"""Telemetry record types handed from the handler to the telemetry sink.

Two variants share one base: TraceTelemetry carries message text,
ExceptionTelemetry carries the original exception object. Both carry an
optional severity, a timestamp, a per-record context and a string-to-string
property mapping.

Example:
    trace = TraceTelemetry("Disk almost full", severity_level=SeverityLevel.WARNING)
    trace.properties["LoggerName"] = "app.storage"
    client.submit(trace)
"""

from __future__ import annotations

import traceback
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any

from telemetry_appender.errors import MissingArgumentError
from telemetry_appender.telemetry.context import TelemetryContext


class SeverityLevel(IntEnum):
    """Ordered telemetry severity. None stands for "unspecified"."""

    VERBOSE = 0
    INFORMATION = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4


class TelemetryKind(Enum):
    """Variant tag of a telemetry record."""

    TRACE = "trace"
    EXCEPTION = "exception"


@dataclass(kw_only=True)
class Telemetry(ABC):
    """Fields common to every telemetry record.

    Attributes:
        severity_level: Mapped severity, or None when unspecified.
        timestamp: When the underlying event happened.
        context: Attribution values (user, instrumentation key).
        properties: Custom string metadata.
    """

    severity_level: SeverityLevel | None = None
    timestamp: datetime | None = None
    context: TelemetryContext = field(default_factory=TelemetryContext)
    properties: dict[str, str] = field(default_factory=dict)

    @property
    @abstractmethod
    def kind(self) -> TelemetryKind:
        """Variant tag of this record."""

    @property
    @abstractmethod
    def envelope_name(self) -> str:
        """Item name used when the record is wrapped for transport."""

    def to_base_data(self) -> dict[str, Any]:
        """Serialize the variant-specific payload.

        Returns:
            Dict with the common fields; subclasses add their own keys.
        """
        data: dict[str, Any] = {"properties": dict(self.properties)}
        if self.severity_level is not None:
            data["severityLevel"] = self.severity_level.name.title()
        return data


@dataclass
class TraceTelemetry(Telemetry):
    """Trace-variant record: one line of diagnostic text."""

    message: str

    def __post_init__(self) -> None:
        if self.message is None:
            raise MissingArgumentError("message")

    @property
    def kind(self) -> TelemetryKind:
        return TelemetryKind.TRACE

    @property
    def envelope_name(self) -> str:
        return "Message"

    def to_base_data(self) -> dict[str, Any]:
        data = super().to_base_data()
        data["message"] = self.message
        return data


@dataclass
class ExceptionTelemetry(Telemetry):
    """Exception-variant record wrapping the original exception object."""

    exception: BaseException

    def __post_init__(self) -> None:
        if self.exception is None:
            raise MissingArgumentError("exception")

    @property
    def kind(self) -> TelemetryKind:
        return TelemetryKind.EXCEPTION

    @property
    def envelope_name(self) -> str:
        return "Exception"

    def to_base_data(self) -> dict[str, Any]:
        """Serialize the exception type, message and formatted stack."""
        data = super().to_base_data()
        exc = self.exception
        data["exceptions"] = [
            {
                "typeName": type(exc).__qualname__,
                "message": str(exc),
                "stack": "".join(
                    traceback.format_exception(type(exc), exc, exc.__traceback__)
                ),
            }
        ]
        return data
