"""Absolute capture time header extension.

Times and durations are expressed as integer nanoseconds.
"""

from __future__ import annotations

from dataclasses import dataclass

from .abs_send_time import ntp_to_unix_ns, to_ntp_time
from .errors import TooSmallError

_EXTENSION_SIZE = 8
_EXTENDED_EXTENSION_SIZE = 16
_UINT64_MASK = (1 << 64) - 1
_NS_PER_SECOND = 1_000_000_000


def _to_int64(value: int) -> int:
    value &= _UINT64_MASK
    return value - (1 << 64) if value & (1 << 63) else value


@dataclass
class AbsCaptureTimeExtension:
    """NTP capture timestamp and an optional 32.32 fixed-point clock offset."""

    timestamp: int = 0
    estimated_capture_clock_offset: int | None = None

    def marshal(self) -> bytes:
        """Serialise the extension payload (8 or 16 bytes)."""
        out = (self.timestamp & _UINT64_MASK).to_bytes(8, "big")
        if self.estimated_capture_clock_offset is not None:
            out += (self.estimated_capture_clock_offset & _UINT64_MASK).to_bytes(8, "big")
        return out

    @classmethod
    def unmarshal(cls, data: bytes) -> "AbsCaptureTimeExtension":
        """Parse the extension payload."""
        if len(data) < _EXTENSION_SIZE:
            raise TooSmallError()
        offset = None
        if len(data) >= _EXTENDED_EXTENSION_SIZE:
            offset = int.from_bytes(data[8:16], "big", signed=True)
        return cls(timestamp=int.from_bytes(data[0:8], "big"), estimated_capture_clock_offset=offset)

    def capture_time(self) -> int:
        """Capture time in nanoseconds since the Unix epoch."""
        return ntp_to_unix_ns(self.timestamp)

    def clock_offset_ns(self) -> int | None:
        """Estimated capture clock offset in nanoseconds, or None if absent."""
        if self.estimated_capture_clock_offset is None:
            return None
        offset = self.estimated_capture_clock_offset
        negative = offset < 0
        offset = abs(offset)
        duration = (offset >> 32) * _NS_PER_SECOND + ((offset & 0xFFFFFFFF) * _NS_PER_SECOND >> 32)
        return -duration if negative else duration

    @classmethod
    def from_capture_time(cls, capture_ns: int) -> "AbsCaptureTimeExtension":
        """Build the extension for a capture time in Unix nanoseconds."""
        return cls(timestamp=to_ntp_time(capture_ns))

    @classmethod
    def with_clock_offset(cls, capture_ns: int, offset_ns: int) -> "AbsCaptureTimeExtension":
        """Build the extension with a capture time and a clock offset in nanoseconds."""
        negative = offset_ns < 0
        magnitude = abs(offset_ns)
        seconds = (magnitude // _NS_PER_SECOND) & 0xFFFFFFFF
        fraction = (((magnitude % _NS_PER_SECOND) << 32) // _NS_PER_SECOND) & 0xFFFFFFFF
        offset = _to_int64((seconds << 32) | fraction)
        if negative:
            offset = _to_int64(-offset)
        return cls(timestamp=to_ntp_time(capture_ns), estimated_capture_clock_offset=offset)