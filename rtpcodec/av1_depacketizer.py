"""Depacketizer turning AV1 RTP payloads into a low-overhead OBU bitstream."""

from __future__ import annotations

from .errors import ShortPacketError
from .leb128 import read_leb128, write_leb128
from .obu import ObuType, parse_obu_header

_Z_MASK = 0b10000000
_Y_MASK = 0b01000000
_W_MASK = 0b00110000
_N_MASK = 0b00001000


class Av1Depacketizer:
    """Reads AV1 RTP payloads in order and yields OBUs with obu_size fields.

    A fragmented last OBU is kept until the packet completing it arrives.
    """

    def __init__(self) -> None:
        self._buffer = b""
        self.z = False
        self.y = False
        self.n = False

    def unmarshal(self, payload: bytes) -> bytes:
        """Parse one RTP payload and return the complete OBUs it yields."""
        if len(payload) <= 1:
            raise ShortPacketError()

        aggregation = payload[0]
        obu_z = bool(aggregation & _Z_MASK)
        obu_y = bool(aggregation & _Y_MASK)
        obu_count = (aggregation & _W_MASK) >> 4
        obu_n = bool(aggregation & _N_MASK)
        self.z, self.y, self.n = obu_z, obu_y, obu_n
        if obu_n or not obu_z:
            self._buffer = b""

        out = bytearray()
        obu_offset = 0
        offset = 1
        while offset < len(payload):
            is_first = obu_offset == 0
            is_last = obu_count != 0 and obu_offset == obu_count - 1

            # With W set, the last element carries no length field.
            if obu_count == 0 or not is_last:
                length, read = read_leb128(payload[offset:])
                offset += read
                if obu_count == 0 and offset + length == len(payload):
                    is_last = True
            else:
                length = len(payload) - offset

            if offset + length > len(payload):
                raise ShortPacketError(
                    f"packet is not large enough: OBU size {length} + {offset} offset "
                    f"exceeds payload length {len(payload)}"
                )

            if is_first and obu_z:
                if not self._buffer:
                    # The first fragment was lost; drop this one.
                    if is_last:
                        break
                    offset += length
                    obu_offset += 1
                    continue
                element = self._buffer + payload[offset : offset + length]
                self._buffer = b""
            else:
                element = bytes(payload[offset : offset + length])
            offset += length

            if is_last and obu_y:
                self._buffer = element
                break

            if not element:
                obu_offset += 1
                continue

            header = parse_obu_header(element)
            if header.obu_type in (ObuType.TEMPORAL_DELIMITER, ObuType.TILE_LIST):
                obu_offset += 1
                continue

            header_size = header.size()
            if header.has_size_field:
                obu_size, read = read_leb128(element[header_size:])
                expected = header_size + obu_size + read
                if length != expected:
                    raise ShortPacketError(
                        f"packet is not large enough: OBU size {obu_size} "
                        f"does not match calculated size {expected}"
                    )
                out += element
            else:
                header.has_size_field = True
                out += header.marshal()
                out += write_leb128(len(element) - header_size)
                out += element[header_size:]

            if is_last:
                break
            obu_offset += 1

        if obu_count != 0 and obu_offset != obu_count - 1:
            raise ShortPacketError(
                f"packet is not large enough: OBU count {obu_count} "
                f"does not match number of OBUs {obu_offset}"
            )
        return bytes(out)

    def is_partition_head(self, payload: bytes | None) -> bool:
        """True if the payload does not continue a fragment (Z is 0)."""
        if not payload:
            return False
        return not payload[0] & _Z_MASK