import pytest

from rtpcodec.av1_depacketizer import Av1Depacketizer
from rtpcodec.errors import Leb128Error, ShortHeaderError, ShortPacketError
from rtpcodec.leb128 import write_leb128
from rtpcodec.obu import ObuHeader, ObuType


def _obu_bytes(header: ObuHeader, payload: bytes) -> bytes:
    out = header.marshal()
    if header.has_size_field:
        out += write_leb128(len(payload))
    return out + payload


def create_obu(obu_type, payload):
    without_size = _obu_bytes(ObuHeader(obu_type=obu_type), payload)
    with_size = _obu_bytes(ObuHeader(obu_type=obu_type, has_size_field=True), payload)
    return without_size, with_size


def _element(data: bytes) -> bytes:
    return write_leb128(len(data)) + data


def test_invalid_packets():
    d = Av1Depacketizer()
    with pytest.raises(ShortPacketError):
        d.unmarshal(b"")
    with pytest.raises(Leb128Error):
        d.unmarshal(bytes([0b11000000, 0xFF]))
    with pytest.raises(ShortPacketError):
        d.unmarshal(b"\x00" + write_leb128(0x99))
    with pytest.raises(ShortPacketError):
        d.unmarshal(b"\x00" + write_leb128(0x01))
    with pytest.raises(ShortPacketError):
        d.unmarshal(bytes([0b00110000]) + write_leb128(1) + b"\x01")


def test_single_obu():
    obu, expected = create_obu(4, b"\x01\x02\x03")
    assert Av1Depacketizer().unmarshal(b"\x00" + _element(obu)) == expected


def test_single_obu_with_padding():
    obu, expected = create_obu(4, b"\x01\x02\x03")
    packet = b"\x00" + _element(obu) + b"\x00\x00\x00"
    assert Av1Depacketizer().unmarshal(packet) == expected


def test_with_obu_size():
    _, obu = create_obu(4, b"\x01\x02\x03")
    assert Av1Depacketizer().unmarshal(b"\x00" + _element(obu)) == obu


@pytest.mark.parametrize(
    "payload,error",
    [
        (bytes([0, 0x02, 0x22, 0xFF]), Leb128Error),
        (bytes([0, 0x05, 0x22, 0x04, 0x03, 0x01, 0x02]), ShortPacketError),
        (bytes([0, 0x05, 0x22, 0x02, 0x03, 0x01, 0x02]), ShortPacketError),
    ],
)
def test_validate_obu_size(payload, error):
    with pytest.raises(error):
        Av1Depacketizer().unmarshal(payload)


def test_drop_buffer():
    d = Av1Depacketizer()
    assert d.unmarshal(bytes([0x41, 0x02, 0x00, 0x01])) == b""
    obu, expected = create_obu(4, b"\x08\x02\x03")
    assert d.unmarshal(bytes([0b00001000]) + _element(obu)) == expected


def test_single_obu_with_w():
    obu, expected = create_obu(4, b"\x01\x02\x03")
    assert Av1Depacketizer().unmarshal(bytes([0b00010000]) + obu) == expected


def test_multiple_full_obus():
    obu1, exp1 = create_obu(4, b"\x01\x02\x03")
    obu2, exp2 = create_obu(4, b"\x04\x05\x06")
    obu3, exp3 = create_obu(4, b"\x07\x08\x09")
    packet = b"\x00" + _element(obu1) + _element(obu2) + _element(obu3)
    assert Av1Depacketizer().unmarshal(packet) == exp1 + exp2 + exp3


def test_multiple_full_obus_with_w():
    obu1, exp1 = create_obu(4, b"\x01\x02\x03")
    obu2, exp2 = create_obu(4, b"\x04\x05\x06")
    obu3, exp3 = create_obu(4, b"\x07\x08\x09")
    packet = bytes([0b00110000]) + _element(obu1) + _element(obu2) + obu3
    assert Av1Depacketizer().unmarshal(packet) == exp1 + exp2 + exp3


def test_fragmented_obus():
    obu1, exp1 = create_obu(1, b"\x01\x02\x03")
    obu2, exp2 = create_obu(7, b"\x04\x05\x06")
    obu3, exp3 = create_obu(7, b"\x07\x08\x09")
    obu4, exp4 = create_obu(3, b"\x0a\x0b\x0c")
    obu5, exp5 = create_obu(6, b"\x0d\x0e\x0f")
    obu6, exp6 = create_obu(7, b"\x10\x11\x12")
    obu7, exp7 = create_obu(3, b"\x13\x14\x15")
    obu8, exp8 = create_obu(6, b"\x16\x17\x18")

    d = Av1Depacketizer()
    packet = bytes([0b01000000]) + _element(obu1) + _element(obu2) + _element(obu3[:2])
    assert d.unmarshal(packet) == exp1 + exp2

    packet = (
        bytes([0b11000000]) + _element(obu3[2:]) + _element(obu4) + _element(obu5) + _element(obu6[:2])
    )
    assert d.unmarshal(packet) == exp3 + exp4 + exp5

    packet = bytes([0b10100000]) + _element(obu6[2:]) + obu7
    assert d.unmarshal(packet) == exp6 + exp7

    assert d.unmarshal(b"\x00" + _element(obu8)) == exp8


def test_drop_lost_fragment():
    d = Av1Depacketizer()
    assert d.unmarshal(bytes([0b01000000]) + write_leb128(3) + b"\x01\x02\x03") == b""
    new_obu, expected = create_obu(ObuType.TILE_GROUP, b"\x04\x05\x06")
    assert d.unmarshal(b"\x00" + _element(new_obu)) == expected


def test_drop_if_lost_fragment():
    d = Av1Depacketizer()
    assert d.unmarshal(bytes([0b10000000]) + write_leb128(3) + b"\x01\x02\x03") == b""
    new_obu, expected = create_obu(ObuType.TILE_GROUP, b"\x04\x05\x06")
    assert d.unmarshal(b"\x00" + _element(new_obu)) == expected

    packet = bytes([0b10000000]) + write_leb128(3) + b"\x01\x02\x03" + _element(new_obu)
    assert d.unmarshal(packet) == expected


def test_is_partition_head():
    d = Av1Depacketizer()
    assert d.is_partition_head(None) is False
    assert d.is_partition_head(b"") is False
    assert d.is_partition_head(bytes([0b11000000])) is False
    assert d.is_partition_head(bytes([0b00000000])) is True


@pytest.mark.parametrize("obu_type", [ObuType.TEMPORAL_DELIMITER, ObuType.TILE_LIST])
def test_ignore_bad_obus(obu_type):
    obu, _ = create_obu(obu_type, b"\x01\x02\x03")
    assert Av1Depacketizer().unmarshal(b"\x00" + _element(obu)) == b""


def test_fragmented_over_multiple():
    full, expected = create_obu(ObuType.TILE_GROUP, bytes(range(1, 9)))
    d = Av1Depacketizer()
    assert d.unmarshal(bytes([0b01000000]) + _element(full[:2])) == b""
    assert d.unmarshal(bytes([0b11000000]) + _element(full[2:5])) == b""
    assert d.unmarshal(bytes([0b11000000]) + _element(full[5:7])) == b""
    assert d.unmarshal(bytes([0b10000000]) + _element(full[7:])) == expected


def test_short_obu_header():
    with pytest.raises(ShortHeaderError):
        Av1Depacketizer().unmarshal(bytes([0x00, 0x01, 0x04]))


def test_aggregation_header_sequence():
    d = Av1Depacketizer()
    cases = [
        (bytes([0x00, 0x01, 0x30]), bytes([0x32, 0x00]), False, False, False),
        (bytes([0x80, 0x01, 0x20]), b"", True, False, False),
        (bytes([0x40, 0x01, 0x04]), b"", False, True, False),
        (bytes([0x08, 0x01, 0x30]), bytes([0x32, 0x00]), False, False, True),
        (bytes([0xC8, 0x01, 0x30]), b"", True, True, True),
    ]
    for data, expected, z, y, n in cases:
        assert d.unmarshal(data) == expected
        assert (d.z, d.y, d.n) == (z, y, n)