"""Package version, also reported as the SDK identity of the handler."""

__version__ = "1.0.0"
