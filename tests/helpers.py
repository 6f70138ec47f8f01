"""Test helper functions for telemetry-appender.

Example:
    from tests.helpers import make_record

    record = make_record("Order %s placed", 42, level=logging.WARNING)
    handler.append(record)
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Protocol


class RecordingHandler(logging.Handler):
    """Handler that keeps every record it receives."""

    def __init__(self) -> None:
        super().__init__(logging.NOTSET)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def make_record(
    msg: object = "Test message",
    *args: object,
    name: str = "tests.app",
    level: int = logging.INFO,
    pathname: str = "/srv/app/orders.py",
    lineno: int = 42,
    func: str | None = "place_order",
    exc_info: Any = None,
    **attrs: object,
) -> logging.LogRecord:
    """Build a LogRecord the way Logger.makeRecord would.

    Keyword arguments not named above become record attributes, the same
    as passing them through ``extra=``.

    Example:
        >>> record = make_record("hi %s", "bob", user_name="alice")
        >>> record.getMessage()
        'hi bob'
    """
    record = logging.LogRecord(
        name, level, pathname, lineno, msg, args or None, exc_info, func=func
    )
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


def capture_exc_info(exc: BaseException) -> Any:
    """Raise and catch exc, returning sys.exc_info() with a real traceback."""
    try:
        raise exc
    except BaseException:
        return sys.exc_info()


def assert_implements_protocol(instance: object, protocol: type[Protocol]) -> None:
    """Assert that an instance implements a @runtime_checkable Protocol.

    Args:
        instance: Object to check.
        protocol: Protocol class decorated with @runtime_checkable.

    Raises:
        AssertionError: Listing the protocol members the instance lacks.

    Example:
        >>> assert_implements_protocol(InMemoryChannel(), TelemetryChannel)
    """
    if isinstance(instance, protocol):
        return

    protocol_members = {
        attr for attr in set(dir(protocol)) - set(dir(object)) if not attr.startswith("_")
    }
    missing = sorted(m for m in protocol_members if not hasattr(instance, m))
    raise AssertionError(
        f"{type(instance).__name__} does not implement {protocol.__name__}. "
        f"Missing: {', '.join(missing) or 'unknown'}"
    )
