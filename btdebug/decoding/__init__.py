"""Frame decoding layer: registry and vendor decoders."""

from .base import FrameDecoder, OPCODE_OFFSET
from .registry import DecoderRegistry, coerce_frame
from .gan_cube import GanCubeDecoder, GAN_COMMANDS, gan_cube_rule, is_gan_cube

__all__ = [
    "FrameDecoder",
    "OPCODE_OFFSET",
    "DecoderRegistry",
    "coerce_frame",
    "GanCubeDecoder",
    "GAN_COMMANDS",
    "gan_cube_rule",
    "is_gan_cube",
]
