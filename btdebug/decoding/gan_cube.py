"""Decoder for GAN smart cube notification frames.

The command byte sits at offset 3 of every frame:
- 0x01 Move Data
- 0xED Cube State (full-state snapshot)
- 0xEF Battery Status

Any other opcode decodes as "Unknown" but keeps its numeric value.
"""
from __future__ import annotations

from ..models import DecodedCommand, DecodeRule, UNKNOWN_COMMAND
from .base import FrameDecoder, OPCODE_OFFSET, read_opcode

GAN_DEVICE_KIND = "gan"
GAN_NAME_PREFIX = "GAN"

GAN_COMMANDS = {
    0x01: "Move Data",
    0xED: "Cube State",
    0xEF: "Battery Status",
}


def is_gan_cube(device_kind: str) -> bool:
    """Match the generic kind "gan" or an advertised name like "GAN12ui"."""
    kind = str(device_kind)
    return kind.lower() == GAN_DEVICE_KIND or kind.startswith(GAN_NAME_PREFIX)


class GanCubeDecoder(FrameDecoder):
    """Opcode-table decoder for GAN cubes."""

    def matches(self, device_kind: str) -> bool:
        return is_gan_cube(device_kind)

    def decode(self, frame: bytes) -> DecodedCommand:
        """Decode a GAN cube frame.

        Examples:
            >>> GanCubeDecoder().decode(bytes([0, 0, 0, 0xEF])).name
            'Battery Status'
        """
        opcode = read_opcode(frame, OPCODE_OFFSET)
        return DecodedCommand(
            opcode=opcode,
            name=GAN_COMMANDS.get(opcode, UNKNOWN_COMMAND),
            fields={
                "length": len(frame),
                "payload": bytes(frame[OPCODE_OFFSET + 1:]).hex(),
            },
            raw=bytes(frame),
        )

    @property
    def label(self) -> str:
        return "GAN Cube"


def gan_cube_rule() -> DecodeRule:
    """Default registry rule for GAN cubes."""
    return GanCubeDecoder().as_rule()
