# rtpcodec

Pure-Python building blocks for RTP media streams, with no dependencies
beyond the standard library.

## What is in it

- `rtpcodec.audio_level` – `AudioLevelExtension` (RFC 6464 audio level and
  voice flag), with `marshal()` and the class method `unmarshal(data)`.
- `rtpcodec.abs_send_time` – `AbsSendTimeExtension` (24-bit absolute send
  time) with `marshal()`, `unmarshal(data)`, `from_send_time(send_ns)` and
  `estimate(receive_ns)`; plus `to_ntp_time(unix_ns)` and
  `ntp_to_unix_ns(ntp)` for 64-bit NTP timestamps.
- `rtpcodec.abs_capture_time` – `AbsCaptureTimeExtension` (NTP capture
  timestamp and optional clock offset) with `marshal()`, `unmarshal(data)`,
  `from_capture_time(capture_ns)`, `with_clock_offset(capture_ns, offset_ns)`,
  `capture_time()` and `clock_offset_ns()`.
- `rtpcodec.av1_packet` – `Av1Payloader.payload(mtu, data)` splits an AV1 OBU
  stream into RTP payloads no larger than `mtu`; `Av1Packet.unmarshal(payload)`
  reads the aggregation header flags (`z`, `y`, `w`, `n`) and the OBU elements;
  `leb128_size(value)` gives the encoded size of a length field.
- `rtpcodec.av1_depacketizer` – `Av1Depacketizer.unmarshal(payload)` turns
  payloads, in order, back into OBUs carrying `obu_size` fields, holding a
  fragmented last OBU until it is completed; `is_partition_head(payload)`.
- `rtpcodec.av1_frame` – `Av1FrameAssembler.read_frames(packet)` joins OBU
  fragments across parsed `Av1Packet`s.
- `rtpcodec.obu` – `ObuType`, `ObuHeader`, `ExtensionHeader`, `Obu`,
  `parse_obu_header(data)` and `parse_extension_header(value)`.
- `rtpcodec.leb128` – `read_leb128(data)`, `write_leb128(value)`,
  `encode_leb128(value)` and `decode_leb128(value)`.

Times and durations are integer nanoseconds; times count from the Unix epoch.
Errors are raised as subclasses of `rtpcodec.errors.RtpError` (itself a
`ValueError`), such as `ShortPacketError`, `TooSmallError` and `Leb128Error`.

## Installation

```
pip install .
```

## Examples

Packetize an AV1 stream and read it back:

```python
from rtpcodec.av1_packet import Av1Payloader
from rtpcodec.av1_depacketizer import Av1Depacketizer

payloader = Av1Payloader()
depacketizer = Av1Depacketizer()

packets = payloader.payload(1200, obu_stream)
restored = b"".join(depacketizer.unmarshal(p) for p in packets)
```

Encode an audio level extension:

```python
from rtpcodec.audio_level import AudioLevelExtension

data = AudioLevelExtension(level=8, voice=True).marshal()   # b"\x88"
ext = AudioLevelExtension.unmarshal(data)
```

Estimate a send time from the absolute send time extension:

```python
import time
from rtpcodec.abs_send_time import AbsSendTimeExtension

ext = AbsSendTimeExtension.from_send_time(time.time_ns())
send_ns = AbsSendTimeExtension.unmarshal(ext.marshal()).estimate(time.time_ns())
```

## What it does not do

The package works on extension payloads and AV1 RTP payloads only. It does
not parse or build RTP packet headers, does not place extensions into an RTP
header, handles no codec other than AV1, and does no network I/O or packet
reordering; payloads must be handed to the depacketizer in order.

## Running the tests

```
pip install .[test]
pytest
```