"""Client-to-mixer audio level header extension (RFC 6464)."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import AudioLevelOverflowError, TooSmallError

_EXTENSION_SIZE = 1


@dataclass
class AudioLevelExtension:
    """Audio level in -dBov (0..127) and the voice activity flag."""

    level: int = 0
    voice: bool = False

    def marshal(self) -> bytes:
        """Serialise the extension payload."""
        if not 0 <= self.level <= 127:
            raise AudioLevelOverflowError()
        return bytes([(0x80 if self.voice else 0x00) | self.level])

    @classmethod
    def unmarshal(cls, data: bytes) -> "AudioLevelExtension":
        """Parse the extension payload."""
        if len(data) < _EXTENSION_SIZE:
            raise TooSmallError()
        return cls(level=data[0] & 0x7F, voice=bool(data[0] & 0x80))