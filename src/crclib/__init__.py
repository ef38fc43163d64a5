"""Windowed CRC-32 checksums for buffers, streams and files."""

from .checksums import (
    CRC32_POLYNOMIAL, WINDOW_SIZE, WindowFlag, crc_step,
    to_unsigned, format_crc_hex, parse_crc_hex
)
from .byte_source import compute_stream_crc, plan_windows
from .config import CrcLibConfig, ChecksumConfig, DemoConfig
from .services import CrcService, MemoryCrcService
from .common import (
    CrcError, InvalidArgumentError, SourceNotFoundError,
    TruncatedSourceError, ChecksumCancelledError
)

__version__ = "0.1.0"

__all__ = [
    'CRC32_POLYNOMIAL',
    'WINDOW_SIZE',
    'WindowFlag',
    'crc_step',
    'to_unsigned',
    'format_crc_hex',
    'parse_crc_hex',
    'compute_stream_crc',
    'plan_windows',
    'CrcLibConfig',
    'ChecksumConfig',
    'DemoConfig',
    'CrcService',
    'MemoryCrcService',
    'CrcError',
    'InvalidArgumentError',
    'SourceNotFoundError',
    'TruncatedSourceError',
    'ChecksumCancelledError',
]
