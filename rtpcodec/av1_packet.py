"""AV1 RTP payloader and the aggregation-header packet parser."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import KeyframeAndFragmentError, NilPacketError, RtpError, ShortPacketError
from .leb128 import read_leb128, write_leb128
from .obu import ExtensionHeader, ObuType, parse_obu_header

_Z_MASK = 0b10000000
_Z_SHIFT = 7
_Y_MASK = 0b01000000
_Y_SHIFT = 6
_W_MASK = 0b00110000
_W_SHIFT = 4
_N_MASK = 0b00001000
_N_SHIFT = 3


def leb128_size(value: int) -> tuple[int, bool]:
    """Return the LEB128 encoded size of ``value`` and whether it sits exactly on a size boundary."""
    if value >= 268435456:  # 2^28
        return 5, value == 268435456
    if value >= 2097152:  # 2^21
        return 4, value == 2097152
    if value >= 16384:  # 2^14
        return 3, value == 16384
    if value >= 128:  # 2^7
        return 2, value == 128
    return 1, False


def _compute_write_size(want_to_write: int, can_write: int) -> int:
    """Largest write that fits in ``can_write`` bytes once a LEB128 length is prepended."""
    size, at_edge = leb128_size(want_to_write)
    if can_write >= want_to_write + size:
        return want_to_write
    # One byte less may need a shorter length field that then fits.
    if at_edge and can_write >= want_to_write + size - 1:
        return want_to_write - 1
    return want_to_write - size


class Av1Payloader:
    """Splits a low-overhead AV1 OBU stream into RTP payloads no larger than the MTU."""

    def payload(self, mtu: int, data: bytes | None) -> list[bytes]:
        """Packetize ``data`` into AV1 RTP payloads.

        Parsing stops at the first malformed OBU; what was read before it is still packetized.
        """
        payloads: list[bytearray] = []
        # The aggregation header plus one byte is the smallest useful packet.
        if mtu <= 1 or not data:
            return []

        # An OBU is held back until the next one is seen, so we know whether it ends the packet.
        current_obu = b""
        current_ext: ExtensionHeader | None = None
        obus_in_packet = 0
        new_sequence = False
        start_with_new_packet = False

        offset = 0
        while offset < len(data):
            try:
                header = parse_obu_header(data[offset:])
            except RtpError:
                break
            offset += header.size()

            if header.has_size_field:
                try:
                    obu_size, read = read_leb128(data[offset:])
                except RtpError:
                    break
                offset += read
            else:
                obu_size = len(data) - offset

            # OBUs of different temporal units never share a packet, and a sequence
            # header starts a fresh one.
            need_new_packet = header.obu_type in (ObuType.TEMPORAL_DELIMITER, ObuType.SEQUENCE_HEADER)
            ext = header.extension_header
            if not need_new_packet and ext is not None and current_ext is not None:
                need_new_packet = (
                    ext.spatial_id != current_ext.spatial_id or ext.temporal_id != current_ext.temporal_id
                )
            if ext is not None:
                current_ext = ext

            if obu_size > len(data) - offset:
                break

            if current_obu:
                obus_in_packet = self._append_obu(
                    payloads,
                    current_obu,
                    new_sequence,
                    need_new_packet,
                    start_with_new_packet,
                    mtu,
                    obus_in_packet,
                )
                current_obu = b""
                start_with_new_packet = need_new_packet
                if need_new_packet:
                    new_sequence = False
                    current_ext = None

            # Temporal delimiters and tile lists are dropped when transmitting.
            if header.obu_type in (ObuType.TILE_LIST, ObuType.TEMPORAL_DELIMITER):
                offset += obu_size
                continue

            header.has_size_field = False
            current_obu = header.marshal() + bytes(data[offset : offset + obu_size])
            offset += obu_size
            new_sequence = header.obu_type == ObuType.SEQUENCE_HEADER

        if current_obu:
            self._append_obu(
                payloads,
                current_obu,
                new_sequence,
                True,
                start_with_new_packet,
                mtu,
                obus_in_packet,
            )

        return [bytes(p) for p in payloads]

    @staticmethod
    def _append_obu(
        payloads: list[bytearray],
        obu: bytes,
        is_new_sequence: bool,
        is_last: bool,
        start_with_new_packet: bool,
        mtu: int,
        obu_count: int,
    ) -> int:
        """Append one OBU to ``payloads``, fragmenting as needed; return the OBU count of the last packet."""
        free_space = mtu - len(payloads[-1]) if payloads else 0

        if not payloads or free_space <= 0 or start_with_new_packet:
            packet = bytearray(1)
            if is_new_sequence:
                packet[0] |= 1 << _N_SHIFT
            payloads.append(packet)
            free_space = mtu - 1
            obu_count = 0

        remaining = len(obu)
        to_write = min(remaining, free_space)

        # A non-zero W means the last element carries no length field.
        use_w_field = (is_last or to_write >= free_space) and obu_count < 3
        if use_w_field:
            payloads[-1][0] |= ((obu_count + 1) << _W_SHIFT) & _W_MASK
            payloads[-1] += obu[:to_write]
            obu_count = 0
        elif free_space >= 2:
            # A length-prefixed element needs at least one length byte and one data byte.
            to_write = _compute_write_size(to_write, free_space)
            payloads[-1] += write_leb128(to_write)
            payloads[-1] += obu[:to_write]
            obu_count += 1
        else:
            to_write = 0

        obu = obu[to_write:]
        remaining -= to_write

        while remaining > 0:
            payloads.append(bytearray(1))
            # Only mark a continuation if something was written to the previous packet.
            if to_write != 0:
                payloads[-2][0] |= _Y_MASK
                payloads[-1][0] |= _Z_MASK

            to_write = min(remaining, mtu - 1)
            if is_last or remaining >= mtu - 1:
                payloads[-1][0] |= 1 << _W_SHIFT
            else:
                to_write = _compute_write_size(to_write, mtu - 1)
                payloads[-1] += write_leb128(to_write)

            payloads[-1] += obu[:to_write]
            obu = obu[to_write:]
            remaining -= to_write
            obu_count = 1

        return obu_count


@dataclass
class Av1Packet:
    """An AV1 RTP payload split into its aggregation header flags and OBU elements."""

    z: bool = False
    y: bool = False
    w: int = 0
    n: bool = False
    obu_elements: list[bytes] | None = None

    def unmarshal(self, payload: bytes | None) -> bytes:
        """Parse ``payload`` into this packet and return the bytes after the aggregation header."""
        if payload is None:
            raise NilPacketError()
        if len(payload) < 2:
            raise ShortPacketError()

        first = payload[0]
        self.z = bool((first & _Z_MASK) >> _Z_SHIFT)
        self.y = bool((first & _Y_MASK) >> _Y_SHIFT)
        self.n = bool((first & _N_MASK) >> _N_SHIFT)
        self.w = (first & _W_MASK) >> _W_SHIFT

        if self.z and self.n:
            raise KeyframeAndFragmentError()

        body = bytes(payload[1:])
        self.obu_elements = self._parse_body(body)
        return body

    def _parse_body(self, body: bytes) -> list[bytes]:
        if self.obu_elements is not None:
            return self.obu_elements

        elements: list[bytes] = []
        index = 0
        count = 1
        while index != len(body):
            if count & 0xFF == self.w:
                read = 0
                length = len(body) - index
            else:
                length, read = read_leb128(body[index:])
            index += read
            if len(body) < index + length:
                raise ShortPacketError()
            elements.append(body[index : index + length])
            index += length
            count += 1
        return elements