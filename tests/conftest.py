"""Pytest configuration and fixtures for telemetry-appender tests.

Fixtures isolate the two pieces of process-wide state the package keeps:
the active telemetry configuration and the structured logging setup. They
also provide an in-memory client so handler tests can inspect exactly what
was submitted.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from telemetry_appender.observability.logging import reset_logging
from telemetry_appender.telemetry.channel import InMemoryChannel
from telemetry_appender.telemetry.client import TelemetryClient
from telemetry_appender.telemetry.config import (
    INSTRUMENTATION_KEY_ENV,
    TelemetryConfiguration,
    reset_configuration,
)
from tests.helpers import RecordingHandler


@pytest.fixture(autouse=True)
def isolated_configuration(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run each test with no instrumentation key in the environment.

    Clears TELEMETRY_INSTRUMENTATION_KEY and forgets the active
    configuration so clients created during the test re-read the
    (patched) environment.
    """
    monkeypatch.delenv(INSTRUMENTATION_KEY_ENV, raising=False)
    reset_configuration()
    yield
    reset_configuration()


@pytest.fixture
def clean_logging() -> Iterator[None]:
    """Reset structured logging before and after a test."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def channel() -> InMemoryChannel:
    """Empty in-memory channel."""
    return InMemoryChannel(capacity=1000)


@pytest.fixture
def client(channel: InMemoryChannel) -> TelemetryClient:
    """Telemetry client writing to the in-memory channel."""
    return TelemetryClient(TelemetryConfiguration(), channel=channel)


@pytest.fixture
def recording_handler() -> RecordingHandler:
    """Fresh RecordingHandler."""
    return RecordingHandler()
