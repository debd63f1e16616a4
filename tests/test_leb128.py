import pytest

from rtpcodec.errors import Leb128Error
from rtpcodec.leb128 import decode_leb128, encode_leb128, read_leb128, write_leb128


@pytest.mark.parametrize(
    "value, encoded",
    [(0, 0), (5, 5), (999999, 0xBF843D)],
)
def test_encode_decode(value, encoded):
    assert encode_leb128(value) == encoded
    assert decode_leb128(encoded) == value


def test_read_empty_raises():
    with pytest.raises(Leb128Error):
        read_leb128(b"")


def test_read_unterminated_raises():
    with pytest.raises(Leb128Error):
        read_leb128(bytes([0xFF]))


@pytest.mark.parametrize(
    "value, hex_value",
    [
        (150, "9601"),
        (240, "f001"),
        (400, "9003"),
        (720, "d005"),
        (1200, "b009"),
        (999999, "bf843d"),
        (0, "00"),
        (0xFFFFFFFF, "ffffffff0f"),
    ],
)
def test_write(value, hex_value):
    assert write_leb128(value).hex() == hex_value


@pytest.mark.parametrize("value", [0, 1, 127, 128, 16383, 16384, 999999, 0xFFFFFFFF])
def test_read_write_round_trip(value):
    encoded = write_leb128(value)
    assert read_leb128(encoded + b"\x55\x66") == (value, len(encoded))


def test_write_negative_raises():
    with pytest.raises(ValueError):
        write_leb128(-1)