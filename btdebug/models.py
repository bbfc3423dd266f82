"""Immutable data models for debug events and decoded frames.

All models are frozen dataclasses. They are the contract between the
interception shim, the decoder registry and whatever renders the events.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union


class Severity(Enum):
    """Severity of a debug event."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    SUCCESS = "success"

    @property
    def color(self) -> str:
        """Display color hint for renderers."""
        return _SEVERITY_COLORS[self]

    @property
    def log_level(self) -> int:
        """Matching stdlib logging level."""
        return _SEVERITY_LOG_LEVELS[self]


_SEVERITY_COLORS = {
    Severity.ERROR: "#ff4444",
    Severity.WARN: "#ffbb33",
    Severity.SUCCESS: "#00C851",
    Severity.INFO: "#33b5e5",
}

_SEVERITY_LOG_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARN: logging.WARNING,
    Severity.SUCCESS: logging.INFO,
    Severity.INFO: logging.INFO,
}


@dataclass(frozen=True)
class LogEvent:
    """A single structured debug event.

    Attributes:
        timestamp: Unix timestamp when the event was created
        severity: Event severity
        message: Human-readable message
        raw: Optional raw frame attached for forensic inspection
    """
    timestamp: float
    severity: Severity
    message: str
    raw: Optional[bytes] = None

    def __post_init__(self):
        if self.raw is not None and not isinstance(self.raw, bytes):
            object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def create(
        cls,
        severity: Severity,
        message: str,
        raw: Optional[bytes] = None,
    ) -> LogEvent:
        """Create an event stamped with the current time."""
        return cls(timestamp=time.time(), severity=severity, message=message, raw=raw)


@dataclass(frozen=True)
class DecodedCommand:
    """Structured description of one peripheral frame.

    Attributes:
        opcode: Command byte, or None for the malformed-frame placeholder
        name: Command name ("Unknown" for opcodes outside the table)
        fields: Interpreted fields
        raw: The frame the command was decoded from
    """
    opcode: Optional[int]
    name: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    raw: bytes = b""

    @property
    def is_known(self) -> bool:
        return self.name not in (UNKNOWN_COMMAND, MALFORMED_COMMAND)


UNKNOWN_COMMAND = "Unknown"
MALFORMED_COMMAND = "Malformed Frame"


Matcher = Union[str, Callable[[str], bool]]


@dataclass(frozen=True)
class DecodeRule:
    """Pairs a device-kind matcher with a frame decode function.

    Attributes:
        matcher: Device kind to match (case-insensitive) or a predicate
        decode: Function mapping raw frame bytes to a DecodedCommand
        label: Name used in event messages (e.g. "GAN Cube")
    """
    matcher: Matcher
    decode: Callable[[bytes], DecodedCommand]
    label: str = ""

    def matches(self, device_kind: str) -> bool:
        """Check whether this rule applies to a device kind."""
        if callable(self.matcher):
            return bool(self.matcher(device_kind))
        return str(device_kind).lower() == self.matcher.lower()
