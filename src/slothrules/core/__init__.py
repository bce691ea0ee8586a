"""Core modules for slothrules - error definitions shared by all stages."""

from slothrules.core.errors import (
    ConfigurationError,
    ExitCode,
    OperationCancelledError,
    SerializationError,
    SinkWriteError,
    SlothRulesError,
    ValidationError,
    format_error_message,
)

__all__ = [
    "ExitCode",
    "SlothRulesError",
    "ConfigurationError",
    "ValidationError",
    "SerializationError",
    "SinkWriteError",
    "OperationCancelledError",
    "format_error_message",
]
