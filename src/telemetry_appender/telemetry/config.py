"""Default configuration for telemetry clients.

A TelemetryClient built without explicit configuration uses the process-wide
active configuration. The active configuration is created lazily from the
environment on first access and can be replaced at startup.

Example:
    # Read TELEMETRY_INSTRUMENTATION_KEY from the environment (default)
    client = TelemetryClient()

    # Or configure explicitly at startup
    configure(TelemetryConfiguration(instrumentation_key="00000000-..."))
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from telemetry_appender.telemetry.channel import DEFAULT_CHANNEL_CAPACITY

#: Environment variable holding the default instrumentation key.
INSTRUMENTATION_KEY_ENV = "TELEMETRY_INSTRUMENTATION_KEY"

#: Environment variable overriding the default in-memory channel capacity.
CHANNEL_CAPACITY_ENV = "TELEMETRY_CHANNEL_CAPACITY"


@dataclass
class TelemetryConfiguration:
    """Settings a TelemetryClient falls back to.

    Attributes:
        instrumentation_key: Default instrumentation key. None or empty means
            records are submitted without one.
        channel_capacity: Capacity of the InMemoryChannel a client creates
            when no channel is injected.
    """

    instrumentation_key: str | None = None
    channel_capacity: int = DEFAULT_CHANNEL_CAPACITY

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None
    ) -> TelemetryConfiguration:
        """Build a configuration from environment variables.

        Reads TELEMETRY_INSTRUMENTATION_KEY and TELEMETRY_CHANNEL_CAPACITY.
        Blank values are treated as unset.

        Args:
            environ: Mapping to read from. Default: os.environ.

        Returns:
            TelemetryConfiguration with values from the environment and
            defaults for anything unset.

        Raises:
            ValueError: If TELEMETRY_CHANNEL_CAPACITY is not an integer.

        Example:
            >>> TelemetryConfiguration.from_env({"TELEMETRY_INSTRUMENTATION_KEY": "k"})
            TelemetryConfiguration(instrumentation_key='k', channel_capacity=500)
        """
        if environ is None:
            environ = os.environ

        key = environ.get(INSTRUMENTATION_KEY_ENV, "").strip() or None
        capacity_text = environ.get(CHANNEL_CAPACITY_ENV, "").strip()
        capacity = int(capacity_text) if capacity_text else DEFAULT_CHANNEL_CAPACITY
        return cls(instrumentation_key=key, channel_capacity=capacity)


# =============================================================================
# Active Configuration
# =============================================================================

# Thread Safety: configure once at startup before handlers are created.
_active: TelemetryConfiguration | None = None


def get_active_configuration() -> TelemetryConfiguration:
    """Return the process-wide configuration, loading it from the environment once."""
    global _active

    if _active is None:
        _active = TelemetryConfiguration.from_env()
    return _active


def configure(config: TelemetryConfiguration) -> None:
    """Replace the process-wide configuration.

    Only clients created afterwards see the new values; existing clients
    keep the context they were built with.

    Args:
        config: Configuration to make active.
    """
    global _active
    _active = config


def reset_configuration() -> None:
    """Forget the active configuration so the next access re-reads the environment."""
    global _active
    _active = None
