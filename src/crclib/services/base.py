"""Base class for checksum services."""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from ..checksums import WINDOW_SIZE, format_crc_hex, parse_crc_hex
from ..common.errors import CrcError, InvalidArgumentError
from ..common.logging import get_logger
from ..config import ChecksumConfig
from ..progress import LoopProgress, ProgressCallback, null_progress

TSource = TypeVar("TSource")

TService = TypeVar("TService", bound="CrcServiceBase")

ExpectedCrc = Union[int, str]


class CrcServiceBase(ABC, Generic[TSource]):
    """Compute and verify checksums of one kind of source.

    Subclasses validate their source type and run the computation; this class
    offloads it to a worker thread, formats results and compares them.
    """

    source_kind = "source"

    def __init__(
        self, window_size: int = WINDOW_SIZE, logger: Optional[logging.Logger] = None
    ) -> None:
        if window_size < 1:
            raise InvalidArgumentError("Window size must be positive", window_size=window_size)
        self.window_size = window_size
        self.logger = logger or get_logger(f"{__name__}.{type(self).__name__}")

    @classmethod
    def from_config(
        cls: Type[TService], config: ChecksumConfig, logger: Optional[logging.Logger] = None
    ) -> TService:
        """Create a service from checksum configuration."""
        return cls(window_size=config.window_size, logger=logger)

    @abstractmethod
    def _validate(self, source: TSource) -> None:
        """Raise a CrcError if ``source`` cannot be checksummed."""

    @abstractmethod
    def _compute(
        self, source: TSource, progress: ProgressCallback, cancel_event: threading.Event
    ) -> int:
        """Compute the checksum synchronously. Runs in a worker thread."""

    def _describe(self, source: TSource) -> Dict[str, Any]:
        """Structured log fields identifying ``source``."""
        return {"source_kind": self.source_kind}

    async def compute_crc(
        self, source: TSource, progress: Optional[ProgressCallback] = None
    ) -> int:
        """
        Compute the checksum of a source.

        Args:
            source: Source to checksum
            progress: Optional callback receiving the completed percentage.
                It runs on the calling event loop.

        Returns:
            Checksum as unsigned 32-bit integer

        Raises:
            InvalidArgumentError: If the source is missing or unusable
            SourceNotFoundError: If a file source does not exist
            OSError: If reading fails
        """
        fields = self._describe(source)
        self.logger.info(
            f"Starting CRC computation for {self.source_kind}",
            extra={"extra_fields": fields},
        )

        self._validate(source)

        sink = (
            LoopProgress(progress, asyncio.get_running_loop())
            if progress is not None
            else null_progress
        )
        cancel_event = threading.Event()

        try:
            crc = await asyncio.to_thread(self._compute, source, sink, cancel_event)
        except asyncio.CancelledError:
            # The worker stops before its next window
            cancel_event.set()
            self.logger.warning(
                f"CRC computation cancelled for {self.source_kind}",
                extra={"extra_fields": fields},
            )
            raise
        except Exception as e:
            self.logger.error(
                f"An error occurred during CRC computation for {self.source_kind}",
                exc_info=True,
                extra={"extra_fields": {**fields, "error_type": type(e).__name__}},
            )
            raise

        self.logger.info(
            f"Successfully computed CRC for {self.source_kind}. CRC: {crc}",
            extra={"extra_fields": {**fields, "crc": crc}},
        )
        return crc

    async def compute_crc_hex(
        self, source: TSource, progress: Optional[ProgressCallback] = None
    ) -> str:
        """
        Compute the checksum of a source as hex string.

        Returns:
            8-character lowercase hex string (e.g., "6db88320")
        """
        crc = await self.compute_crc(source, progress)
        crc_hex = format_crc_hex(crc)
        self.logger.info(
            f"Successfully computed CRC for {self.source_kind}. CRC (hex): {crc_hex}",
            extra={"extra_fields": {**self._describe(source), "crc_hex": crc_hex}},
        )
        return crc_hex

    async def verify_crc(self, source: TSource, expected: ExpectedCrc) -> bool:
        """
        Verify the checksum of a source against an expected value.

        Args:
            source: Source to verify
            expected: Unsigned 32-bit integer or hex string

        Returns:
            True if the computed checksum equals ``expected``

        Raises:
            InvalidArgumentError: If ``expected`` is malformed or the source is unusable
        """
        fields = self._describe(source)
        self.logger.info(
            f"Starting verification for {self.source_kind} against expected CRC: {expected}",
            extra={"extra_fields": fields},
        )

        try:
            expected_crc = self._parse_expected(expected)
        except CrcError as e:
            self.logger.error(f"{e.message}: {expected!r}", extra={"extra_fields": fields})
            raise

        computed_crc = await self.compute_crc(source)
        is_valid = computed_crc == expected_crc

        self.logger.info(
            f"Verification for {self.source_kind} completed. "
            f"Computed: {computed_crc}, Expected: {expected_crc}, Valid: {is_valid}",
            extra={"extra_fields": {**fields, "valid": is_valid}},
        )
        return is_valid

    def _parse_expected(self, expected: ExpectedCrc) -> int:
        """Normalize an expected checksum to an unsigned integer."""
        if isinstance(expected, bool):
            raise InvalidArgumentError("Expected CRC must be an integer or hex string", value=expected)
        if isinstance(expected, int):
            if not 0 <= expected <= 0xFFFFFFFF:
                raise InvalidArgumentError("Expected CRC is out of 32-bit range", value=expected)
            return expected
        if expected is None or isinstance(expected, str):
            return parse_crc_hex(expected)
        raise InvalidArgumentError("Expected CRC must be an integer or hex string", value=expected)
