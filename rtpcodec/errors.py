"""Exceptions raised while parsing and building RTP payloads and extensions."""


class RtpError(ValueError):
    """Base class for every error raised by this package."""


class TooSmallError(RtpError):
    """The buffer is too small to hold the value being parsed."""

    def __init__(self, message: str = "buffer too small") -> None:
        super().__init__(message)


class AudioLevelOverflowError(RtpError):
    """An audio level does not fit in seven bits."""

    def __init__(self, message: str = "audio level overflow") -> None:
        super().__init__(message)


class ShortPacketError(RtpError):
    """The packet ended before all of its declared content."""

    def __init__(self, message: str = "packet is not large enough") -> None:
        super().__init__(message)


class NilPacketError(RtpError):
    """No packet was given."""

    def __init__(self, message: str = "invalid nil packet") -> None:
        super().__init__(message)


class KeyframeAndFragmentError(RtpError):
    """A packet claims to start a keyframe and continue a fragment at once."""

    def __init__(
        self, message: str = "bits Z and N are set. Not possible to have OBU be tail fragment and be keyframe"
    ) -> None:
        super().__init__(message)


class InvalidObuHeaderError(RtpError):
    """An OBU header has forbidden bits set."""

    def __init__(self, message: str = "invalid OBU header") -> None:
        super().__init__(message)


class ShortHeaderError(RtpError):
    """An OBU header is truncated."""

    def __init__(self, message: str = "OBU header is not large enough") -> None:
        super().__init__(message)


class Leb128Error(RtpError):
    """The buffer ended before a LEB128 value was complete."""

    def __init__(self, message: str = "payload ended before LEB128 was finished") -> None:
        super().__init__(message)