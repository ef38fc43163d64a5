"""Windowed reading of seekable byte sources.

Splits a source into windows of at most ``window_size`` bytes, tags each with
its position flag and feeds them to :func:`crclib.checksums.crc_step`.
"""

import io
import logging
import threading
from typing import BinaryIO, Iterator, Optional, Tuple

from .checksums import WINDOW_SIZE, WindowFlag, crc_step, to_unsigned
from .common.errors import (
    ChecksumCancelledError, InvalidArgumentError, TruncatedSourceError
)
from .progress import ProgressCallback, null_progress

logger = logging.getLogger(__name__)


def plan_windows(
    length: int, window_size: int = WINDOW_SIZE
) -> Iterator[Tuple[int, int, WindowFlag]]:
    """
    Partition a source of ``length`` bytes into windows.

    An empty source still produces one empty ``ONLY`` window.

    Args:
        length: Total source length in bytes
        window_size: Maximum window length

    Yields:
        (offset, size, flag) for each window, in order

    Raises:
        InvalidArgumentError: If window_size is smaller than 1
    """
    if window_size < 1:
        raise InvalidArgumentError("Window size must be positive", window_size=window_size)

    if length <= window_size:
        yield 0, length, WindowFlag.ONLY
        return

    for offset in range(0, length, window_size):
        if offset == 0:
            yield offset, window_size, WindowFlag.FIRST
        elif length - window_size > offset:
            yield offset, window_size, WindowFlag.MIDDLE
        else:
            yield offset, length - offset, WindowFlag.LAST


def source_length(stream: BinaryIO) -> int:
    """Return the total length of a seekable stream and rewind it."""
    stream.seek(0, io.SEEK_END)
    length = stream.tell()
    stream.seek(0, io.SEEK_SET)
    return length


def iter_windows(
    stream: BinaryIO,
    length: int,
    window_size: int = WINDOW_SIZE,
    cancel_event: Optional[threading.Event] = None,
) -> Iterator[Tuple[bytearray, WindowFlag, int]]:
    """
    Read the planned windows of a stream positioned at offset 0.

    Each window is a fresh bytearray. Once the consumer asks for the next
    window, the previous one is zeroed, except for an ``ONLY`` window which is
    left as read.

    Args:
        stream: Readable stream positioned at offset 0
        length: Total stream length (see source_length)
        window_size: Maximum window length
        cancel_event: Optional event checked before each window is read

    Yields:
        (window, flag, offset) for each window, in order

    Raises:
        ChecksumCancelledError: If cancel_event is set between windows
        TruncatedSourceError: If the stream ends before ``length`` bytes
    """
    for offset, size, flag in plan_windows(length, window_size):
        if cancel_event is not None and cancel_event.is_set():
            raise ChecksumCancelledError(
                "Checksum computation cancelled", offset=offset, length=length
            )

        window = bytearray(size)
        _fill_window(stream, window, offset)
        yield window, flag, offset

        if flag is not WindowFlag.ONLY:
            window[:] = bytes(size)


def _fill_window(stream: BinaryIO, window: bytearray, offset: int) -> None:
    """Read exactly len(window) bytes, retrying short reads."""
    filled = 0
    while filled < len(window):
        chunk = stream.read(len(window) - filled)
        if not chunk:
            raise TruncatedSourceError(
                "Source ended before its reported length",
                offset=offset + filled,
                expected=offset + len(window),
            )
        window[filled:filled + len(chunk)] = chunk
        filled += len(chunk)


def compute_stream_crc(
    stream: BinaryIO,
    progress: Optional[ProgressCallback] = None,
    window_size: int = WINDOW_SIZE,
    cancel_event: Optional[threading.Event] = None,
) -> int:
    """
    Compute the checksum of an entire seekable stream.

    The whole stream is read regardless of its current position, and it is
    rewound to offset 0 afterwards, also when the computation fails, so the
    caller can reuse it.

    Progress is reported after each window as the window's start offset in
    percent of the length, then once more as exactly 100.0.

    Args:
        stream: Readable, seekable binary stream
        progress: Optional progress sink
        window_size: Maximum window length
        cancel_event: Optional event checked between windows

    Returns:
        Checksum as unsigned 32-bit integer

    Raises:
        ChecksumCancelledError: If cancel_event is set between windows
        TruncatedSourceError: If the stream shrinks while being read
        OSError: If the stream cannot be read
    """
    report = progress or null_progress
    length = source_length(stream)
    logger.debug(f"Computing checksum over {length} bytes (window_size={window_size})")

    state = 0
    try:
        for window, flag, offset in iter_windows(stream, length, window_size, cancel_event):
            state = crc_step(state, window, flag)
            report(offset / length * 100 if length else 0.0)
        report(100.0)
    finally:
        stream.seek(0, io.SEEK_SET)

    return to_unsigned(state)
