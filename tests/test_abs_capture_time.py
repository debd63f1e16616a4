import time

import pytest

from rtpcodec.abs_capture_time import AbsCaptureTimeExtension
from rtpcodec.errors import TooSmallError

MS = 1_000_000


def _roundtrip(ext):
    return AbsCaptureTimeExtension.unmarshal(ext.marshal())


def test_roundtrip_without_offset():
    t0 = time.time_ns()
    decoded = _roundtrip(AbsCaptureTimeExtension.from_capture_time(t0))
    assert abs(decoded.capture_time() - t0) <= MS
    assert decoded.clock_offset_ns() is None


@pytest.mark.parametrize("offset_ns", [1250 * MS, -250 * MS])
def test_roundtrip_with_offset(offset_ns):
    t0 = time.time_ns()
    data = AbsCaptureTimeExtension.with_clock_offset(t0, offset_ns).marshal()
    assert len(data) == 16
    decoded = AbsCaptureTimeExtension.unmarshal(data)
    assert abs(decoded.capture_time() - t0) <= MS
    assert decoded.clock_offset_ns() == offset_ns


def test_marshal_length_without_offset():
    assert len(AbsCaptureTimeExtension(timestamp=1).marshal()) == 8


def test_marshal_bytes():
    ext = AbsCaptureTimeExtension(timestamp=0x0102030405060708, estimated_capture_clock_offset=-1)
    assert ext.marshal() == bytes(range(1, 9)) + b"\xff" * 8


def test_unmarshal_too_small():
    with pytest.raises(TooSmallError):
        AbsCaptureTimeExtension.unmarshal(b"\x00" * 7)


def test_unmarshal_short_extended_ignores_offset():
    decoded = AbsCaptureTimeExtension.unmarshal(b"\x00" * 12)
    assert decoded.estimated_capture_clock_offset is None
    assert decoded.timestamp == 0