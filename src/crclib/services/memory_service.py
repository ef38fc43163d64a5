"""Checksum service for in-memory buffers and streams."""

import io
import threading
from typing import Any, BinaryIO, Dict, Union

from ..byte_source import compute_stream_crc
from ..common.errors import InvalidArgumentError
from ..progress import ProgressCallback
from .base import CrcServiceBase

Buffer = Union[bytes, bytearray, memoryview]
MemorySource = Union[Buffer, BinaryIO]


def _is_buffer(source: Any) -> bool:
    return isinstance(source, (bytes, bytearray, memoryview))


class MemoryCrcService(CrcServiceBase[MemorySource]):
    """Compute and verify checksums of byte buffers and binary streams.

    Streams must be readable and seekable. The whole stream is checksummed
    regardless of its position, and it is rewound to offset 0 afterwards.
    """

    source_kind = "memory"

    def _describe(self, source: MemorySource) -> Dict[str, Any]:
        if _is_buffer(source):
            return {"source_kind": "buffer", "length": memoryview(source).nbytes}
        return {"source_kind": "stream", "stream_type": type(source).__name__}

    def _validate(self, source: MemorySource) -> None:
        if source is None:
            self.logger.error("Input buffer or stream is null.")
            raise InvalidArgumentError("Input buffer or stream is null")

        if _is_buffer(source):
            return

        if not callable(getattr(source, "read", None)):
            self.logger.error(f"Unsupported source type: {type(source).__name__}")
            raise InvalidArgumentError(
                "Source must be a bytes-like object or a binary stream",
                source_type=type(source).__name__,
            )

        if isinstance(source, io.TextIOBase):
            self.logger.error(f"Input stream is a text stream: {type(source).__name__}")
            raise InvalidArgumentError(
                "Stream must be a binary stream", source_type=type(source).__name__
            )

        readable = getattr(source, "readable", None)
        if getattr(source, "closed", False) or readable is None or not readable():
            self.logger.error("Input stream is not readable.")
            raise InvalidArgumentError("Stream must be readable", source_type=type(source).__name__)

        seekable = getattr(source, "seekable", None)
        if seekable is None or not seekable():
            self.logger.error("Input stream is not seekable.")
            raise InvalidArgumentError("Stream must be seekable", source_type=type(source).__name__)

    def _compute(
        self, source: MemorySource, progress: ProgressCallback, cancel_event: threading.Event
    ) -> int:
        if _is_buffer(source):
            with io.BytesIO(source) as stream:
                return compute_stream_crc(stream, progress, self.window_size, cancel_event)
        return compute_stream_crc(source, progress, self.window_size, cancel_event)
