"""Absolute send time header extension and NTP timestamp conversion.

Times are expressed as integer nanoseconds since the Unix epoch.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import TooSmallError

_EXTENSION_SIZE = 3
_UINT64_MASK = (1 << 64) - 1
_NS_PER_SECOND = 1_000_000_000
# Seconds between the NTP epoch (1900) and the Unix epoch (1970).
_NTP_EPOCH_OFFSET = 0x83AA7E80


def _to_int64(value: int) -> int:
    value &= _UINT64_MASK
    return value - (1 << 64) if value & (1 << 63) else value


def to_ntp_time(unix_ns: int) -> int:
    """Convert nanoseconds since the Unix epoch to a 64-bit NTP timestamp."""
    unsigned = unix_ns & _UINT64_MASK
    seconds = unsigned // _NS_PER_SECOND + _NTP_EPOCH_OFFSET
    fraction = ((unsigned % _NS_PER_SECOND) << 32) // _NS_PER_SECOND
    return ((seconds << 32) & _UINT64_MASK) | fraction


def ntp_to_unix_ns(ntp: int) -> int:
    """Convert a 64-bit NTP timestamp to nanoseconds since the Unix epoch."""
    seconds = ntp >> 32
    fraction = ((ntp & 0xFFFFFFFF) * _NS_PER_SECOND) >> 32
    seconds = (seconds - _NTP_EPOCH_OFFSET) & _UINT64_MASK
    return _to_int64(seconds * _NS_PER_SECOND + fraction)


@dataclass
class AbsSendTimeExtension:
    """Absolute send time: the 24 bits of a 6.18 fixed-point NTP timestamp."""

    timestamp: int = 0

    def marshal(self) -> bytes:
        """Serialise the extension payload (three bytes)."""
        return (self.timestamp & 0xFFFFFF).to_bytes(3, "big")

    @classmethod
    def unmarshal(cls, data: bytes) -> "AbsSendTimeExtension":
        """Parse the extension payload."""
        if len(data) < _EXTENSION_SIZE:
            raise TooSmallError()
        return cls(timestamp=int.from_bytes(data[:3], "big"))

    def estimate(self, receive_ns: int) -> int:
        """Estimate the absolute send time from the time of reception.

        The estimate is wrong if the transmission delay exceeds 64 seconds.
        """
        receive_ntp = to_ntp_time(receive_ns)
        ntp = (receive_ntp & 0xFFFFFFC000000000) | ((self.timestamp & 0xFFFFFF) << 14)
        if receive_ntp < ntp:
            # The packet cannot have been received before it was sent.
            ntp = (ntp - (0x1000000 << 14)) & _UINT64_MASK
        return ntp_to_unix_ns(ntp)

    @classmethod
    def from_send_time(cls, send_ns: int) -> "AbsSendTimeExtension":
        """Build the extension for a send time in Unix nanoseconds."""
        return cls(timestamp=to_ntp_time(send_ns) >> 14)