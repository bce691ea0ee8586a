"""
Error taxonomy for slothrules.

Every failure of the rule storage pipeline is reported with one of these
errors so callers can tell which stage failed and pick an exit code.

Exit Codes:
- 0: Success
- 10: Configuration error (invalid settings)
- 12: Validation error (nothing to emit, malformed rule input)
- 13: Serialization error (document could not be encoded)
- 14: Sink error (output destination rejected the write)
- 130: Cancelled before the write stage
- 127: Unknown/internal error
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ExitCode(IntEnum):
    """Suggested exit codes for callers that surface these errors."""

    SUCCESS = 0
    CONFIG_ERROR = 10
    VALIDATION_ERROR = 12
    SERIALIZATION_ERROR = 13
    SINK_ERROR = 14
    UNKNOWN_ERROR = 127
    CANCELLED = 130


class SlothRulesError(Exception):
    """Base exception for slothrules errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    stage: str = "unknown"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(SlothRulesError):
    """Raised for invalid settings."""

    exit_code = ExitCode.CONFIG_ERROR
    stage = "configuration"


class ValidationError(SlothRulesError):
    """Raised when the input cannot produce a rule file."""

    exit_code = ExitCode.VALIDATION_ERROR
    stage = "validation"


class SerializationError(SlothRulesError):
    """Raised when the rule document cannot be encoded."""

    exit_code = ExitCode.SERIALIZATION_ERROR
    stage = "serialization"


class SinkWriteError(SlothRulesError):
    """Raised when the output sink fails the write."""

    exit_code = ExitCode.SINK_ERROR
    stage = "write"


class OperationCancelledError(SlothRulesError):
    """Raised when the caller cancelled the operation before the write."""

    exit_code = ExitCode.CANCELLED
    stage = "write"


def format_error_message(error: SlothRulesError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
