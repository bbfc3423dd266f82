"""Ordered registry of frame decode rules.

Rules are tried in registration order and the first whose matcher accepts
the device kind decodes the frame. Unrecognized devices are a normal
condition: their frames decode as "Unknown" with the opcode read from the
fixed offset.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple, Union

from ..errors import MalformedFrame
from ..events.sink import EventSink
from ..models import DecodedCommand, DecodeRule, MALFORMED_COMMAND, UNKNOWN_COMMAND
from .base import FrameDecoder, OPCODE_OFFSET, read_opcode

logger = logging.getLogger(__name__)

FrameLike = Union[bytes, bytearray, memoryview, Iterable[int]]


class DecoderRegistry:
    """Maps device kinds to decode functions.

    Duplicate rules are allowed; a later rule that can never match first
    is simply never used.
    """

    def __init__(self, sink: Optional[EventSink] = None, opcode_offset: int = OPCODE_OFFSET):
        """Initialize DecoderRegistry.

        Args:
            sink: Where process_frame() reports decoded frames, or None
            opcode_offset: Offset of the opcode for unmatched devices
        """
        self._sink = sink
        self._opcode_offset = opcode_offset
        self._rules: List[DecodeRule] = []

    def register(self, rule: DecodeRule) -> None:
        """Append a rule; earlier rules take priority."""
        self._rules.append(rule)

    def register_decoder(self, decoder: FrameDecoder) -> None:
        """Register a FrameDecoder instance."""
        self.register(decoder.as_rule())

    @property
    def sink(self) -> Optional[EventSink]:
        return self._sink

    @sink.setter
    def sink(self, sink: Optional[EventSink]) -> None:
        self._sink = sink

    @property
    def rules(self) -> Tuple[DecodeRule, ...]:
        return tuple(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def find_rule(self, device_kind: str) -> Optional[DecodeRule]:
        """First rule matching device_kind, or None.

        A matcher that raises counts as not matching.
        """
        for rule in self._rules:
            try:
                if rule.matches(device_kind):
                    return rule
            except Exception as e:
                logger.error(f"Error in matcher of rule {rule.label!r}: {e}")
        return None

    def decode(self, device_kind: str, frame: FrameLike) -> DecodedCommand:
        """Decode a frame from a device.

        Args:
            device_kind: Device identifier
            frame: Raw frame bytes

        Returns:
            DecodedCommand from the first matching rule, or an "Unknown"
            command carrying the opcode at the fixed offset

        Raises:
            MalformedFrame: Frame is not byte-like, too short, or the rule could not decode it
        """
        data = coerce_frame(frame)
        rule = self.find_rule(device_kind)
        if rule is None:
            return DecodedCommand(
                opcode=read_opcode(data, self._opcode_offset),
                name=UNKNOWN_COMMAND,
                fields={"length": len(data)},
                raw=data,
            )
        try:
            return rule.decode(data)
        except MalformedFrame:
            raise
        except Exception as e:
            raise MalformedFrame(f"Cannot decode {rule.label or device_kind} frame: {e}", frame=data) from e

    def process_frame(self, device_kind: str, frame: FrameLike) -> DecodedCommand:
        """Decode a frame and report it to the sink.

        Malformed frames are reported as one error event and yield a
        placeholder command; this never raises for bad peripheral input.
        """
        try:
            command = self.decode(device_kind, frame)
        except MalformedFrame as e:
            if self._sink is not None and self._sink.enabled:
                self._sink.error("%s frame error: %s", device_kind, e, raw=_raw_or_none(e.frame))
            return DecodedCommand(opcode=None, name=MALFORMED_COMMAND, raw=_raw_or_none(e.frame) or b"")

        if self._sink is not None and self._sink.enabled:
            rule = self.find_rule(device_kind)
            label = rule.label if rule is not None and rule.label else device_kind
            self._sink.info(
                "%s Command: %s (0x%x)", label, command.name, command.opcode, raw=command.raw
            )
        return command


def coerce_frame(frame: FrameLike) -> bytes:
    """Normalize a frame to bytes, raising MalformedFrame if impossible."""
    if isinstance(frame, bytes):
        return frame
    if isinstance(frame, (int, str)) or frame is None:
        raise MalformedFrame(f"Frame is not byte-like: {type(frame).__name__}", frame=None)
    try:
        return bytes(frame)
    except (TypeError, ValueError) as e:
        raise MalformedFrame(f"Frame is not byte-like: {e}", frame=None) from e


def _raw_or_none(frame) -> Optional[bytes]:
    return frame if isinstance(frame, bytes) else None
