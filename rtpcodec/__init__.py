"""RTP header extensions, OBU and LEB128 helpers, and AV1 RTP payloading and depayloading."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "leb128",
    "obu",
    "audio_level",
    "abs_send_time",
    "abs_capture_time",
    "av1_depacketizer",
    "av1_packet",
    "av1_frame",
]