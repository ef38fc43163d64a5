"""Common utilities shared by crclib modules."""

from .config import ConfigLoader
from .logging import setup_logging, get_logger, LogContext
from .logging_config import LoggingConfig
from .errors import (
    CrcError, InvalidArgumentError, SourceNotFoundError,
    TruncatedSourceError, ChecksumCancelledError
)

__all__ = [
    'ConfigLoader',
    'LoggingConfig',
    'setup_logging',
    'get_logger',
    'LogContext',
    'CrcError',
    'InvalidArgumentError',
    'SourceNotFoundError',
    'TruncatedSourceError',
    'ChecksumCancelledError',
]
