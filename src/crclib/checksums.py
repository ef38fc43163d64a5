"""Windowed CRC-32 accumulator.

This is not the ``zlib`` CRC-32. Data bits are shifted into the top of the
register instead of being folded into the low byte, and the last window runs
32 extra mixing rounds before the final complement. The bit order is fixed by
checksums already recorded elsewhere and must not change.
"""

import re
from enum import Enum
from functools import lru_cache
from typing import Tuple

from .common.errors import InvalidArgumentError

CRC32_POLYNOMIAL = 0xEDB88320

# ``2 ^ 20`` is XOR, so this is 6_600_000 bytes and not 300000 MiB.
# Windowing does not affect the result; the value is kept as recorded.
WINDOW_SIZE = 100000 * 3 * (2 ^ 20)

_MASK32 = 0xFFFFFFFF
_HEX_PATTERN = re.compile(r"[0-9A-Fa-f]{1,8}")


class WindowFlag(int, Enum):
    """Position of a window within a computation."""

    MIDDLE = 0
    FIRST = 1
    LAST = 2
    ONLY = 3

    @property
    def invert_on_entry(self) -> bool:
        """Start from an all-ones register instead of the carried state."""
        return bool(self & 1)

    @property
    def finalize(self) -> bool:
        """Run the closing mixing rounds and complement."""
        return bool(self & 2)


@lru_cache(maxsize=1)
def _table(polynomial: int = CRC32_POLYNOMIAL) -> Tuple[int, ...]:
    """Generate the reflected CRC-32 table for ``polynomial``."""
    table = []
    for i in range(256):
        crc = i
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ polynomial
            else:
                crc >>= 1
        table.append(crc)
    return tuple(table)


def crc_step(state: int, window: bytes, flag: WindowFlag) -> int:
    """Feed one window into the accumulator.

    The register behaves like a 64-bit signed integer whose bits above 31 are
    either all set or all clear. ``state`` keeps that representation: the low
    32 bits are the register and a negative value means the upper bits are
    set. Pass the returned state unchanged into the next window.

    Each data bit is shifted into bit 31 while the register shifts right,
    XORing the polynomial whenever a set bit falls off the bottom. Data bits
    reach bit 24 at most within one byte, so a whole byte can be applied as
    ``(r >> 8) ^ T[r & 0xFF] ^ (b << 24)``. Clearing bit 31 for a zero data
    bit also clears the upper bits, which therefore survive only while every
    byte is ``0xFF``.

    Args:
        state: Accumulator state from the previous window (0 for the first)
        window: Window bytes
        flag: Position of the window

    Returns:
        New accumulator state
    """
    fcs = -1 if flag.invert_on_entry else state
    register = fcs & _MASK32
    upper_set = fcs < 0

    table = _table()
    for byte in window:
        register = (register >> 8) ^ table[register & 0xFF] ^ (byte << 24)

    if upper_set and window.count(0xFF) != len(window):
        upper_set = False

    fcs = register - (1 << 32) if upper_set else register
    if flag.finalize:
        fcs = _finalize(fcs)
    return fcs


def _finalize(fcs: int) -> int:
    """Run the 32 closing rounds and complement the register.

    The OR mask is 0x7FFFFFFF, so a set low bit saturates bits 0-30 and bit 31
    is taken from the upper bits.
    """
    for _ in range(32):
        if fcs & 1:
            fcs >>= 1
            fcs |= 0x7FFFFFFF
            fcs ^= CRC32_POLYNOMIAL
        else:
            fcs >>= 1
            fcs &= 0x7FFFFFFF
    return fcs ^ -1


def to_unsigned(state: int) -> int:
    """Reinterpret an accumulator state as an unsigned 32-bit checksum."""
    return state & _MASK32


def format_crc_hex(value: int) -> str:
    """
    Format a checksum as hex string.

    Args:
        value: Unsigned 32-bit checksum

    Returns:
        8-character lowercase hex string (e.g., "6db88320")
    """
    return f"{value & _MASK32:08x}"


def parse_crc_hex(text: str) -> int:
    """
    Parse an expected checksum given as hex string.

    Accepts one to eight hex digits in either case, optionally surrounded by
    whitespace. Prefixes, signs and separators are rejected.

    Args:
        text: Hex string (e.g., "6db88320" or "6DB88320")

    Returns:
        Unsigned 32-bit checksum

    Raises:
        InvalidArgumentError: If text is None, empty or not a 32-bit hex value
    """
    if text is None or not text.strip():
        raise InvalidArgumentError("Expected CRC hex string is null or empty", value=text)

    digits = text.strip()
    if not _HEX_PATTERN.fullmatch(digits):
        raise InvalidArgumentError("Invalid hex string format", value=text)

    return int(digits, 16)
