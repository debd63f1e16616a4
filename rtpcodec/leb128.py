"""LEB128 variable-length integer helpers used by AV1 OBUs."""

from __future__ import annotations

from .errors import Leb128Error

_SEVEN_LSB = 0x7F
_MSB = 0x80
_UINT64_MASK = (1 << 64) - 1


def encode_leb128(value: int) -> int:
    """Encode ``value`` as LEB128 packed into an integer, first byte most significant."""
    if value < 0:
        raise ValueError("LEB128 value must not be negative")
    out = 0
    while True:
        out |= value & _SEVEN_LSB
        value >>= 7
        if value == 0:
            return out
        out |= _MSB
        out <<= 8


def decode_leb128(value: int) -> int:
    """Decode an integer produced by :func:`encode_leb128`."""
    out = 0
    while True:
        out |= value & _SEVEN_LSB
        value >>= 8
        if value == 0:
            return out
        out <<= 7


def read_leb128(data: bytes) -> tuple[int, int]:
    """Read a LEB128 value from the start of ``data``.

    Returns the decoded value and the number of bytes it occupied.
    Raises :class:`Leb128Error` if the data ends before the value does.
    """
    encoded = 0
    for count, byte in enumerate(data, start=1):
        encoded |= byte
        if not byte & _MSB:
            return decode_leb128(encoded), count
        encoded = (encoded << 8) & _UINT64_MASK
    raise Leb128Error()


def write_leb128(value: int) -> bytes:
    """Return the LEB128 byte encoding of ``value``."""
    if value < 0:
        raise ValueError("LEB128 value must not be negative")
    out = bytearray()
    while True:
        byte = value & _SEVEN_LSB
        value >>= 7
        if value == 0:
            out.append(byte)
            return bytes(out)
        out.append(byte | _MSB)