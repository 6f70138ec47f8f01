"""Read-only view of a logging.LogRecord as seen by the telemetry handler.

LogEvent gathers everything the handler needs from a record in one place:
timestamp, message, level, identity fields, source location, the attached
exception and the context properties. It is built once per emit() and
discarded afterwards.

Context properties come from three places, later ones winning on equal
keys:
1. Non-standard record attributes set through ``extra=``
2. LogContext values active at emit time, for records logged through a
   plain logging.Logger (no structured data attached)
3. ``record.structured_data`` set by StructuredLogger
"""

from __future__ import annotations

import getpass
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import lru_cache
from types import MappingProxyType
from typing import Any

from telemetry_appender.observability.logging import (
    STRUCTURED_DATA_ATTR,
    current_context,
)

#: Record attributes read as identity fields instead of context properties.
USER_NAME_ATTR = "user_name"
IDENTITY_ATTR = "identity"

# Placeholders the logging module uses when the caller cannot be found
_UNKNOWN_FILE = "(unknown file)"
_UNKNOWN_FUNCTION = "(unknown function)"

_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {
    "message",
    "asctime",
    "taskName",
    STRUCTURED_DATA_ATTR,
    USER_NAME_ATTR,
    IDENTITY_ATTR,
}


@lru_cache(maxsize=1)
def _process_user_name() -> str | None:
    """Login name of the process owner, or None when it cannot be determined."""
    try:
        return getpass.getuser()
    except (OSError, KeyError, ImportError):
        return None


@dataclass(frozen=True)
class LocationInfo:
    """Source location of the logging call.

    Python has no enclosing class for a logging call, so class_name holds
    the module name.
    """

    class_name: str | None = None
    file_name: str | None = None
    method_name: str | None = None
    line_number: str | None = None

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> LocationInfo | None:
        """Extract location fields, or None if the record has no source info."""
        pathname = getattr(record, "pathname", None)
        if not pathname or pathname == _UNKNOWN_FILE:
            return None

        func_name = record.funcName
        if func_name == _UNKNOWN_FUNCTION:
            func_name = None

        return cls(
            class_name=record.module or None,
            file_name=pathname,
            method_name=func_name or None,
            line_number=str(record.lineno) if record.lineno else None,
        )


@dataclass(frozen=True)
class LogEvent:
    """One log record, reduced to the fields telemetry needs.

    Attributes:
        timestamp: Creation time of the record (aware, UTC).
        rendered_message: record.getMessage(), or None when record.msg is None.
        level: Numeric logging level, or None.
        logger_name: Name of the emitting logger.
        thread_name: Name of the emitting thread.
        user_name: Acting user: the record's ``user_name`` attribute, else
            the process owner.
        domain: Process name.
        identity: The record's ``identity`` attribute, if any.
        location: Source location, or None.
        exception: Attached exception object, or None.
        properties: Read-only context property mapping.
    """

    timestamp: datetime
    rendered_message: str | None
    level: int | None = None
    logger_name: str | None = None
    thread_name: str | None = None
    user_name: str | None = None
    domain: str | None = None
    identity: str | None = None
    location: LocationInfo | None = None
    exception: BaseException | None = None
    properties: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> LogEvent:
        """Build a LogEvent from a standard log record.

        Args:
            record: Record delivered to a logging.Handler.

        Returns:
            LogEvent snapshot of the record.

        Example:
            >>> record = logging.LogRecord(
            ...     "app", logging.INFO, "app.py", 3, "hi %s", ("bob",), None
            ... )
            >>> LogEvent.from_record(record).rendered_message
            'hi bob'
        """
        exception = None
        if record.exc_info and record.exc_info is not True:
            exception = record.exc_info[1]

        user_name = getattr(record, USER_NAME_ATTR, None)
        if user_name is None:
            user_name = _process_user_name()

        return cls(
            timestamp=datetime.fromtimestamp(record.created, tz=UTC),
            rendered_message=None if record.msg is None else record.getMessage(),
            level=getattr(record, "levelno", None),
            logger_name=record.name,
            thread_name=record.threadName,
            user_name=user_name,
            domain=record.processName,
            identity=getattr(record, IDENTITY_ATTR, None),
            location=LocationInfo.from_record(record),
            exception=exception,
            properties=MappingProxyType(_collect_properties(record)),
        )


def _collect_properties(record: logging.LogRecord) -> dict[Any, Any]:
    properties: dict[Any, Any] = {
        key: value
        for key, value in vars(record).items()
        if key not in _STANDARD_ATTRS
    }

    structured = getattr(record, STRUCTURED_DATA_ATTR, None)
    if isinstance(structured, Mapping):
        properties.update(structured)
    else:
        properties.update(current_context())
    return properties
