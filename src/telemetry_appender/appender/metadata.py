"""Metadata extraction from a LogEvent into telemetry properties.

Properties are added in a fixed order:

1. LoggerName, ThreadName
2. ClassName, FileName, MethodName, LineNumber (when location is known)
3. Domain, Identity
4. Context properties, minus empty keys, keys with the reserved "log4net"
   prefix (any casing) and None values; values are stringified with str()

A key is written at most once and the first value wins, so a context
property cannot overwrite a field from steps 1-3. A None value never
produces a key.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from typing import Any

from telemetry_appender.appender.events import LogEvent
from telemetry_appender.errors import MissingArgumentError
from telemetry_appender.telemetry.records import Telemetry

#: Keys starting with this prefix (case-insensitive) are internal and dropped.
RESERVED_PREFIX = "log4net"


def is_reserved_key(key: str) -> bool:
    """Return True if key starts with the reserved prefix, ignoring case.

    Example:
        >>> is_reserved_key("Log4Net.HostName")
        True
        >>> is_reserved_key("UserId")
        False
    """
    return key.casefold().startswith(RESERVED_PREFIX)


def is_excluded_key(key: Any) -> bool:
    """Return True if a context property key must not be copied.

    Excluded keys: None, non-strings, the empty string, and reserved keys.
    """
    if not isinstance(key, str) or not key:
        return True
    return is_reserved_key(key)


def add_property(
    properties: MutableMapping[str, str], key: str, value: str | None
) -> None:
    """Add a property if it has a value and the key is not taken yet.

    Args:
        properties: Mapping to write into.
        key: Property name.
        value: Property value. None means "skip".

    Returns:
        None.

    Raises:
        MissingArgumentError: If key is None.

    Example:
        >>> props = {"LoggerName": "app"}
        >>> add_property(props, "LoggerName", "other")
        >>> add_property(props, "Flag", None)
        >>> props
        {'LoggerName': 'app'}
    """
    if key is None:
        raise MissingArgumentError("key")
    if value is None or key in properties:
        return
    properties[key] = value


def _event_fields(event: LogEvent) -> Iterator[tuple[str, str | None]]:
    yield "LoggerName", event.logger_name
    yield "ThreadName", event.thread_name

    location = event.location
    if location is not None:
        yield "ClassName", location.class_name
        yield "FileName", location.file_name
        yield "MethodName", location.method_name
        yield "LineNumber", location.line_number

    yield "Domain", event.domain
    yield "Identity", event.identity


def _context_properties(event: LogEvent) -> Iterator[tuple[str, str]]:
    for key, value in event.properties.items():
        if is_excluded_key(key) or value is None:
            continue
        yield key, str(value)


def extract_properties(event: LogEvent) -> dict[str, str]:
    """Build the telemetry property mapping for an event.

    Deterministic: the same event always yields an equal mapping.

    Args:
        event: Event to read.

    Returns:
        New dict of string properties in insertion order.

    Raises:
        MissingArgumentError: If event is None.
    """
    if event is None:
        raise MissingArgumentError("event")

    properties: dict[str, str] = {}
    for key, value in _event_fields(event):
        add_property(properties, key, value)
    for key, value in _context_properties(event):
        add_property(properties, key, value)
    return properties


def populate_common_fields(event: LogEvent, telemetry: Telemetry) -> None:
    """Copy timestamp, user identity and properties from event to record.

    Properties already present on the record are kept; extracted values
    only fill keys that are still free.

    Args:
        event: Source event.
        telemetry: Record to fill in place.

    Raises:
        MissingArgumentError: If event or telemetry is None.
    """
    if telemetry is None:
        raise MissingArgumentError("telemetry")
    extracted = extract_properties(event)

    telemetry.timestamp = event.timestamp
    telemetry.context.user.id = event.user_name
    for key, value in extracted.items():
        add_property(telemetry.properties, key, value)
