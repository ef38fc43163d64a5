"""Checksum services for files and in-memory data."""

from .base import CrcServiceBase, ExpectedCrc
from .file_service import CrcService
from .memory_service import MemoryCrcService

__all__ = [
    'CrcServiceBase',
    'ExpectedCrc',
    'CrcService',
    'MemoryCrcService',
]
