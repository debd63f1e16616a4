"""Reassembly of whole OBUs from the elements of consecutive AV1 RTP packets."""

from __future__ import annotations

from .av1_packet import Av1Packet


class Av1FrameAssembler:
    """Joins OBU fragments across packets of one RTP stream.

    Keeps a fragment from the previous packet, so one instance serves the whole stream.
    """

    def __init__(self) -> None:
        self._obu_buffer: bytes | None = None

    def read_frames(self, packet: Av1Packet) -> list[bytes]:
        """Return the complete OBUs that ``packet`` finishes or contains."""
        obus: list[bytes] = []
        continues_fragment = packet.z

        for element in packet.obu_elements or []:
            if continues_fragment:
                continues_fragment = False
                # Nothing to join the fragment to: drop it.
                if self._obu_buffer is None:
                    continue
                element = self._obu_buffer + element
                self._obu_buffer = None
            obus.append(bytes(element))

        if packet.y and obus:
            last = obus.pop()
            if self._obu_buffer is not None or last:
                self._obu_buffer = (self._obu_buffer or b"") + last

        return obus