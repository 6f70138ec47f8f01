"""Exception hierarchy for telemetry-appender.

The handler isolates exactly one failure class, MissingArgumentError, and
re-raises it as LogDeliveryError so that a malformed log record is
distinguishable from unrelated bugs. Every other exception propagates
unchanged.
"""

from __future__ import annotations


class TelemetryAppenderError(Exception):
    """Base exception for telemetry-appender."""

    pass


class MissingArgumentError(TelemetryAppenderError, TypeError):
    """Raised when a required argument is None.

    Subclasses TypeError so callers that only know the standard library
    still see a familiar failure class.

    Attributes:
        argument: Name of the argument that was None.
    """

    def __init__(self, argument: str, message: str | None = None) -> None:
        """Initialize with the offending argument name.

        Args:
            argument: Name of the missing argument (e.g., "message", "key").
            message: Optional explanation. Defaults to
                "Value cannot be None: <argument>".

        Returns:
            None (constructor).

        Example:
            >>> err = MissingArgumentError("key")
            >>> str(err)
            'Value cannot be None: key'
        """
        self.argument = argument
        super().__init__(message or f"Value cannot be None: {argument}")


class LogDeliveryError(TelemetryAppenderError):
    """Raised when a log record cannot be converted into telemetry."""

    pass


class AppenderConfigurationError(TelemetryAppenderError):
    """Raised when the handler is activated in an invalid state."""

    pass
