"""Context attached to telemetry records and to the telemetry client.

The client owns one TelemetryContext for its lifetime. Each record carries
its own TelemetryContext, which the client fills from its own context on
submission when a value is not already set on the record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class UserContext:
    """Identity of the user on whose behalf a record was produced."""

    id: str | None = None


@dataclass
class InternalContext:
    """SDK bookkeeping values, set once by the component that owns the client.

    Attributes:
        sdk_version: Identity of the producing adapter, e.g. "logging:1.0.0".
    """

    sdk_version: str | None = None


@dataclass
class TelemetryContext:
    """Attribution values for telemetry records.

    Attributes:
        instrumentation_key: Key identifying the telemetry resource that
            receives records. None means "not configured".
        user: User identity context.
        internal: SDK identity context.
    """

    instrumentation_key: str | None = None
    user: UserContext = field(default_factory=UserContext)
    internal: InternalContext = field(default_factory=InternalContext)

    def get_internal_context(self) -> InternalContext:
        """Return the internal (SDK) context."""
        return self.internal

    def to_tags(self) -> dict[str, Any]:
        """Flatten the context into envelope tags.

        Only values that are set appear in the result, so an envelope never
        carries empty attribution tags.

        Returns:
            Dict with any of "ai.user.id" and "ai.internal.sdkVersion".

        Example:
            >>> ctx = TelemetryContext(user=UserContext(id="alice"))
            >>> ctx.to_tags()
            {'ai.user.id': 'alice'}
        """
        tags: dict[str, Any] = {}
        if self.user.id is not None:
            tags["ai.user.id"] = self.user.id
        if self.internal.sdk_version is not None:
            tags["ai.internal.sdkVersion"] = self.internal.sdk_version
        return tags
