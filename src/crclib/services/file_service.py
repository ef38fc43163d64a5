"""Checksum service for files."""

import os
import threading
from pathlib import Path
from typing import Any, Dict, Union

from ..byte_source import compute_stream_crc
from ..common.errors import InvalidArgumentError, SourceNotFoundError
from ..progress import ProgressCallback
from .base import CrcServiceBase

FilePath = Union[str, os.PathLike]


class CrcService(CrcServiceBase[FilePath]):
    """Compute and verify checksums of files on disk."""

    source_kind = "file"

    def _describe(self, source: FilePath) -> Dict[str, Any]:
        return {"source_kind": self.source_kind, "file_path": str(source)}

    def _validate(self, source: FilePath) -> None:
        if source is None or (isinstance(source, str) and source == ""):
            self.logger.error("File path is null or empty.")
            raise InvalidArgumentError("File path is null or empty", file_path=source)

        if not isinstance(source, (str, os.PathLike)):
            self.logger.error(f"Unsupported file path type: {type(source).__name__}")
            raise InvalidArgumentError("File path must be a string or path", file_path=source)

        if not Path(source).is_file():
            self.logger.error(f"File not found at: {source}")
            raise SourceNotFoundError("File not found", file_path=str(source))

    def _compute(
        self, source: FilePath, progress: ProgressCallback, cancel_event: threading.Event
    ) -> int:
        with open(source, "rb") as f:
            return compute_stream_crc(f, progress, self.window_size, cancel_event)
