"""AV1 Open Bitstream Unit headers and serialisation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from .errors import InvalidObuHeaderError, ShortHeaderError
from .leb128 import write_leb128


class ObuType(IntEnum):
    """OBU types defined by the AV1 specification."""

    SEQUENCE_HEADER = 1
    TEMPORAL_DELIMITER = 2
    FRAME_HEADER = 3
    TILE_GROUP = 4
    METADATA = 5
    FRAME = 6
    REDUNDANT_FRAME_HEADER = 7
    TILE_LIST = 8
    PADDING = 15

    @staticmethod
    def describe(value: int) -> str:
        """Return the specification name of an OBU type value."""
        try:
            return f"OBU_{ObuType(value).name}"
        except ValueError:
            return "OBU_RESERVED"

    def __str__(self) -> str:
        return ObuType.describe(self.value)


def _as_type(value: int) -> int:
    try:
        return ObuType(value)
    except ValueError:
        return value


@dataclass
class ExtensionHeader:
    """OBU extension header: temporal and spatial layer ids."""

    temporal_id: int = 0
    spatial_id: int = 0
    reserved_3bits: int = 0

    def marshal(self) -> int:
        """Return the header as a single byte value."""
        return (
            ((self.temporal_id << 5) | ((self.spatial_id & 0x03) << 3) | (self.reserved_3bits & 0x07))
            & 0xFF
        )


def parse_extension_header(value: int) -> ExtensionHeader:
    """Parse an OBU extension header from one byte."""
    return ExtensionHeader(
        temporal_id=value >> 5,
        spatial_id=(value >> 3) & 0x03,
        reserved_3bits=value & 0x07,
    )


@dataclass
class ObuHeader:
    """OBU header, with an optional extension header."""

    obu_type: int = 0
    extension_header: ExtensionHeader | None = None
    has_size_field: bool = False
    reserved_1bit: bool = False

    def size(self) -> int:
        """Number of bytes the header occupies."""
        return 2 if self.extension_header is not None else 1

    def marshal(self) -> bytes:
        """Serialise the header, including the extension header if any."""
        first = (int(self.obu_type) & 0x0F) << 3
        if self.extension_header is not None:
            first |= 0x04
        if self.has_size_field:
            first |= 0x02
        if self.reserved_1bit:
            first |= 0x01
        out = bytearray([first])
        if self.extension_header is not None:
            out.append(self.extension_header.marshal())
        return bytes(out)


def parse_obu_header(data: bytes) -> ObuHeader:
    """Parse an OBU header from the start of ``data``."""
    if len(data) < 1:
        raise ShortHeaderError("OBU header is not large enough: data is too short")
    first = data[0]
    if first & 0x80:
        raise InvalidObuHeaderError("invalid OBU header: forbidden bit is set")

    header = ObuHeader(
        obu_type=_as_type((first & 0x78) >> 3),
        has_size_field=bool(first & 0x02),
        reserved_1bit=bool(first & 0x01),
    )
    if first & 0x04:
        if len(data) < 2:
            raise ShortHeaderError(
                "OBU header is not large enough: unexpected end of data, expected extension header"
            )
        header.extension_header = parse_extension_header(data[1])
    return header


@dataclass
class Obu:
    """A complete OBU: header and payload."""

    header: ObuHeader
    payload: bytes = field(default=b"")

    def marshal(self) -> bytes:
        """Serialise the OBU in low-overhead bitstream format."""
        out = bytearray(self.header.marshal())
        if self.header.has_size_field:
            out += write_leb128(len(self.payload))
        out += self.payload
        return bytes(out)