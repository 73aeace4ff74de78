"""
Error types raised by the virtual device testing step.

Every failure is fatal: errors are raised where they are detected and handled
once by the CLI entry point, which logs them and exits with status 1.
"""

from typing import Optional


class StepError(Exception):
    """Base exception for step failures."""

    pass


class ConfigValidationError(StepError):
    """Raised when required configuration is missing or invalid."""

    pass


class TransportError(StepError):
    """Raised when a request cannot be sent or a local file cannot be read or written."""

    pass


class ProtocolError(StepError):
    """Raised when the service answers with an unexpected status or an undecodable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DataFormatError(StepError):
    """Raised when a user supplied list, device line or number is malformed."""

    pass


class PollTimeoutError(StepError):
    """Raised when the test run does not finish within the configured poll timeout."""

    pass
