"""Abstract base class for device frame decoders.

Defines the interface a vendor decoder implements so it can be plugged
into the DecoderRegistry, plus small helpers shared by decoders.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from ..errors import MalformedFrame
from ..models import DecodedCommand, DecodeRule

OPCODE_OFFSET = 3


class FrameDecoder(ABC):
    """Abstract decoder for one device family.

    Decoders handle:
    - Deciding which device kinds they understand
    - Turning one raw frame into a DecodedCommand
    """

    @abstractmethod
    def matches(self, device_kind: str) -> bool:
        """Check whether frames from this device kind are understood.

        Args:
            device_kind: Device identifier, usually its advertised name

        Returns:
            True if decode() applies to this device
        """
        pass

    @abstractmethod
    def decode(self, frame: bytes) -> DecodedCommand:
        """Decode one frame.

        Args:
            frame: Raw bytes received from the peripheral

        Returns:
            Decoded command description

        Raises:
            MalformedFrame: If the frame is too short
        """
        pass

    @property
    @abstractmethod
    def label(self) -> str:
        """Device family name used in event messages (e.g. 'GAN Cube')."""
        pass

    def as_rule(self) -> DecodeRule:
        """Wrap this decoder as a registry rule."""
        return DecodeRule(matcher=self.matches, decode=self.decode, label=self.label)


def require_length(frame: bytes, required: int) -> None:
    """Raise MalformedFrame if frame holds fewer than required bytes."""
    if len(frame) < required:
        raise MalformedFrame(
            f"Frame too short: {len(frame)} bytes, need at least {required}",
            frame=frame,
            required=required,
        )


def read_opcode(frame: bytes, offset: int = OPCODE_OFFSET) -> int:
    """Read the opcode byte at a fixed offset."""
    require_length(frame, offset + 1)
    return frame[offset]
