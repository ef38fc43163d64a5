"""Base error definitions for crclib."""

from typing import Any, Dict


class CrcError(Exception):
    """Base exception for all crclib errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class InvalidArgumentError(CrcError):
    """A required input is missing, empty or malformed."""
    pass


class SourceNotFoundError(CrcError):
    """The file to checksum does not exist."""
    pass


class TruncatedSourceError(CrcError):
    """The source ended before its reported length was read."""
    pass


class ChecksumCancelledError(CrcError):
    """Computation was cancelled between two windows."""
    pass
