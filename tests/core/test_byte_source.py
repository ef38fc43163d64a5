"""Tests for windowed reading of byte sources."""

import io
import random
import threading

import pytest

from crclib.byte_source import (
    compute_stream_crc,
    iter_windows,
    plan_windows,
    source_length,
)
from crclib.checksums import WINDOW_SIZE, WindowFlag
from crclib.common.errors import (
    ChecksumCancelledError,
    InvalidArgumentError,
    TruncatedSourceError,
)

HELLO_WORLD_CRC = 1840808736
EMPTY_CRC = 0xEDB88320

F = WindowFlag.FIRST
M = WindowFlag.MIDDLE
L = WindowFlag.LAST
O = WindowFlag.ONLY


class ShortReadStream(io.BytesIO):
    """BytesIO that returns at most two bytes per read."""

    def read(self, size=-1):
        if size is None or size < 0 or size > 2:
            size = 2
        return super().read(size)


class FailingStream(io.BytesIO):
    """BytesIO whose reads fail."""

    def read(self, size=-1):
        raise OSError("device not ready")


class ShrinkingStream(io.BytesIO):
    """BytesIO that runs dry after six bytes while reporting its full length."""

    def read(self, size=-1):
        remaining = max(0, 6 - self.tell())
        if size is None or size < 0 or size > remaining:
            size = remaining
        return super().read(size)


class TestPlanWindows:
    """Tests for plan_windows partitioning."""

    @pytest.mark.parametrize("length,window_size,expected", [
        (0, 4, [(0, 0, O)]),
        (3, 4, [(0, 3, O)]),
        (4, 4, [(0, 4, O)]),
        (5, 4, [(0, 4, F), (4, 1, L)]),
        (8, 4, [(0, 4, F), (4, 4, L)]),
        (9, 4, [(0, 4, F), (4, 4, M), (8, 1, L)]),
        (10, 4, [(0, 4, F), (4, 4, M), (8, 2, L)]),
        (12, 4, [(0, 4, F), (4, 4, M), (8, 4, L)]),
        (13, 4, [(0, 4, F), (4, 4, M), (8, 4, M), (12, 1, L)]),
        (3, 1, [(0, 1, F), (1, 1, M), (2, 1, L)]),
    ])
    def test_partitions(self, length, window_size, expected):
        """Test window boundaries and flags."""
        assert list(plan_windows(length, window_size)) == expected

    def test_default_window_size(self):
        """Test that sources up to WINDOW_SIZE bytes use one window."""
        assert list(plan_windows(WINDOW_SIZE)) == [(0, WINDOW_SIZE, O)]
        assert list(plan_windows(WINDOW_SIZE + 1)) == [
            (0, WINDOW_SIZE, F),
            (WINDOW_SIZE, 1, L),
        ]

    @pytest.mark.parametrize("length", range(0, 40))
    def test_windows_cover_source(self, length):
        """Test that windows are contiguous and cover the whole source."""
        windows = list(plan_windows(length, 7))

        position = 0
        for offset, size, _ in windows:
            assert offset == position
            assert 0 < size <= 7 or length == 0
            position += size
        assert position == length

        flags = [flag for _, _, flag in windows]
        if len(flags) == 1:
            assert flags == [O]
        else:
            assert flags[0] == F
            assert flags[-1] == L
            assert all(flag == M for flag in flags[1:-1])

    @pytest.mark.parametrize("window_size", [0, -1])
    def test_invalid_window_size(self, window_size):
        """Test that non-positive window sizes are rejected."""
        with pytest.raises(InvalidArgumentError):
            list(plan_windows(10, window_size))


class TestSourceLength:
    """Tests for source_length."""

    def test_length_and_rewind(self):
        """Test that the full length is returned and the stream rewound."""
        stream = io.BytesIO(b"abcdef")
        stream.seek(4)

        assert source_length(stream) == 6
        assert stream.tell() == 0


class TestIterWindows:
    """Tests for iter_windows."""

    def test_yields_window_contents(self):
        """Test that each window holds its slice of the source while in use."""
        data = bytes(range(10))
        stream = io.BytesIO(data)

        seen = []
        for window, flag, offset in iter_windows(stream, len(data), 4):
            seen.append((bytes(window), flag, offset))

        assert seen == [
            (data[0:4], F, 0),
            (data[4:8], M, 4),
            (data[8:10], L, 8),
        ]

    def test_multi_window_buffers_are_cleared(self):
        """Test that FIRST, MIDDLE and LAST windows are zeroed after use."""
        data = b"\x01" * 10
        windows = [window for window, _, _ in iter_windows(io.BytesIO(data), len(data), 4)]

        assert [len(window) for window in windows] == [4, 4, 2]
        assert all(window == bytearray(len(window)) for window in windows)

    def test_only_window_buffer_is_not_cleared(self):
        """Test that the single-window buffer is left as read.

        Only buffers on the multi-window path are cleared.
        """
        data = b"\x01\x02\x03"
        windows = [window for window, _, _ in iter_windows(io.BytesIO(data), len(data), 4)]

        assert windows == [bytearray(data)]

    def test_empty_source_yields_empty_only_window(self):
        """Test that an empty source still yields one window."""
        assert list(iter_windows(io.BytesIO(b""), 0, 4)) == [(bytearray(), O, 0)]

    def test_short_reads_are_retried(self):
        """Test that windows are filled across several short reads."""
        data = bytes(range(10))
        stream = ShortReadStream(data)

        windows = [bytes(window) for window, _, _ in iter_windows(stream, len(data), 10)]

        assert windows == [data]

    def test_truncated_source(self):
        """Test that a source shorter than its length is an error."""
        stream = io.BytesIO(b"abc")

        with pytest.raises(TruncatedSourceError) as exc_info:
            list(iter_windows(stream, 10, 4))

        assert exc_info.value.context == {"offset": 3, "expected": 4}

    def test_cancel_before_first_window(self):
        """Test that a set cancel event stops before reading."""
        stream = io.BytesIO(b"abcdef")
        cancel_event = threading.Event()
        cancel_event.set()

        with pytest.raises(ChecksumCancelledError):
            list(iter_windows(stream, 6, 4, cancel_event))

        assert stream.tell() == 0

    def test_cancel_between_windows(self):
        """Test that cancellation is observed at the next window boundary."""
        stream = io.BytesIO(b"abcdefghij")
        cancel_event = threading.Event()
        windows = iter_windows(stream, 10, 4, cancel_event)

        window, flag, _ = next(windows)
        assert bytes(window) == b"abcd"
        assert flag == F

        cancel_event.set()
        with pytest.raises(ChecksumCancelledError) as exc_info:
            next(windows)

        assert exc_info.value.context["offset"] == 4
        assert stream.tell() == 4


class TestComputeStreamCrc:
    """Tests for compute_stream_crc."""

    def test_hello_world(self, hello_world):
        """Test the recorded checksum through a stream."""
        assert compute_stream_crc(io.BytesIO(hello_world)) == HELLO_WORLD_CRC

    def test_empty_stream(self):
        """Test the checksum of an empty stream."""
        assert compute_stream_crc(io.BytesIO(b"")) == EMPTY_CRC

    def test_rewinds_stream(self, hello_world):
        """Test that the stream is left at offset 0."""
        stream = io.BytesIO(hello_world)

        compute_stream_crc(stream)

        assert stream.tell() == 0

    def test_reads_whole_stream_regardless_of_position(self, hello_world):
        """Test that the current position does not limit the checksum."""
        stream = io.BytesIO(hello_world)
        stream.seek(7)

        assert compute_stream_crc(stream) == HELLO_WORLD_CRC

    def test_idempotent(self, hello_world):
        """Test that the same stream checksums identically twice."""
        stream = io.BytesIO(hello_world)

        assert compute_stream_crc(stream) == compute_stream_crc(stream)

    @pytest.mark.parametrize("window_size", [1, 2, 3, 5, 12, 13, 14, WINDOW_SIZE])
    def test_window_size_does_not_change_result(self, hello_world, window_size):
        """Test single-window and multi-window equivalence."""
        assert compute_stream_crc(io.BytesIO(hello_world), window_size=window_size) == HELLO_WORLD_CRC

    @pytest.mark.parametrize("window_size", [1, 3, 64, 1000, 4096])
    def test_window_size_equivalence_random_data(self, window_size):
        """Test equivalence on random data across window sizes."""
        data = random.Random(window_size).randbytes(4096)

        expected = compute_stream_crc(io.BytesIO(data))

        assert compute_stream_crc(io.BytesIO(data), window_size=window_size) == expected

    def test_all_ones_data_across_windows(self):
        """Test that upper register bits carry across window boundaries."""
        data = b"\xff" * 12

        expected = compute_stream_crc(io.BytesIO(data))

        for window_size in (1, 4, 5, 11):
            assert compute_stream_crc(io.BytesIO(data), window_size=window_size) == expected

    def test_short_reads(self, hello_world):
        """Test that short reads do not change the checksum."""
        assert compute_stream_crc(ShortReadStream(hello_world), window_size=5) == HELLO_WORLD_CRC

    def test_progress_multi_window(self):
        """Test progress values for a multi-window source."""
        reports = []

        compute_stream_crc(io.BytesIO(bytes(10)), progress=reports.append, window_size=4)

        assert reports[:-1] == pytest.approx([0.0, 40.0, 80.0])
        assert reports[-1] == 100.0
        assert reports == sorted(reports)

    def test_progress_single_window(self, hello_world):
        """Test that a single window reports 0.0 then 100.0."""
        reports = []

        compute_stream_crc(io.BytesIO(hello_world), progress=reports.append)

        assert reports == [0.0, 100.0]

    def test_progress_empty_stream(self):
        """Test progress for an empty source."""
        reports = []

        compute_stream_crc(io.BytesIO(b""), progress=reports.append)

        assert reports == [0.0, 100.0]

    def test_read_error_propagates(self, hello_world):
        """Test that I/O errors are raised unchanged."""
        with pytest.raises(OSError, match="device not ready"):
            compute_stream_crc(FailingStream(hello_world))

    def test_cancelled(self, hello_world):
        """Test that a set cancel event aborts without a result."""
        cancel_event = threading.Event()
        cancel_event.set()
        reports = []

        with pytest.raises(ChecksumCancelledError):
            compute_stream_crc(
                io.BytesIO(hello_world), reports.append, window_size=4, cancel_event=cancel_event
            )

        assert reports == []

    def test_rewinds_after_failing_progress(self):
        """Test that the stream is rewound when the progress sink fails."""
        stream = io.BytesIO(bytes(10))

        def failing_progress(percent):
            raise OSError("progress sink gone")

        with pytest.raises(OSError, match="progress sink gone"):
            compute_stream_crc(stream, failing_progress, window_size=4)

        assert stream.tell() == 0

    def test_rewinds_after_cancellation(self):
        """Test that the stream is rewound when cancelled between windows."""
        stream = io.BytesIO(bytes(10))
        cancel_event = threading.Event()

        def cancel_after_first(percent):
            cancel_event.set()

        with pytest.raises(ChecksumCancelledError):
            compute_stream_crc(
                stream, cancel_after_first, window_size=4, cancel_event=cancel_event
            )

        assert stream.tell() == 0

    def test_rewinds_after_truncation(self):
        """Test that the stream is rewound when it ends early."""
        stream = ShrinkingStream(bytes(10))

        with pytest.raises(TruncatedSourceError):
            compute_stream_crc(stream, window_size=4)

        assert stream.tell() == 0
