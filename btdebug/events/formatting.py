"""Formatting helpers for debug events.

Pure functions with no side effects. Every helper here degrades to a
placeholder instead of raising, since formatting a value for a log line
must never break the code being observed.
"""
from __future__ import annotations

import dataclasses
import json
import time
from typing import Any, Iterable, Mapping, Optional

from ..models import LogEvent

LOG_PREFIX = "[Bluetooth Debug]"
UNNAMED_DEVICE = "unnamed"
OPTIONS_PLACEHOLDER = "<unserializable options>"
OPTIONS_INDENT = 2


def hex_tokens(data: Iterable[int]) -> str:
    """Render bytes as independently formatted hex tokens.

    Examples:
        >>> hex_tokens(b"\\x00\\x01\\xed")
        '0x0, 0x1, 0xed'
    """
    return ", ".join(f"0x{byte:x}" for byte in data)


def serialize_options(options: Any, indent: Optional[int] = OPTIONS_INDENT) -> str:
    """Serialize a call argument as JSON for logging.

    Dataclasses are converted to dicts first. Anything JSON cannot encode
    yields OPTIONS_PLACEHOLDER.
    """
    try:
        if dataclasses.is_dataclass(options) and not isinstance(options, type):
            options = dataclasses.asdict(options)
        return json.dumps(options, indent=indent)
    except Exception:
        return OPTIONS_PLACEHOLDER


def display_name(device: Any, default: str = UNNAMED_DEVICE) -> str:
    """Best-effort display name of a device handle."""
    try:
        if isinstance(device, Mapping):
            name = device.get("name")
        else:
            name = getattr(device, "name", None)
        return str(name) if name else default
    except Exception:
        return default


def error_message(error: BaseException) -> str:
    """Message of an exception, falling back to its type name."""
    try:
        message = str(error)
    except Exception:
        message = ""
    return message if message else type(error).__name__


def interpolate(message: str, args: tuple) -> str:
    """Apply %-style arguments the way logging does, without raising."""
    if not args:
        return message
    try:
        return message % args
    except Exception:
        return " ".join([message] + [_safe_repr(arg) for arg in args])


def format_event(event: LogEvent, with_timestamp: bool = False) -> str:
    """Render an event as a single log line.

    The raw payload is appended as hex tokens. If that fails the line is
    still produced without it.
    """
    line = event.message
    if event.raw is not None:
        try:
            line = f"{line} | Raw Data: {hex_tokens(event.raw)}"
        except Exception:
            pass
    if with_timestamp:
        line = f"[{format_timestamp(event.timestamp)}] {line}"
    return line


def format_timestamp(timestamp: float) -> str:
    """Local wall-clock time as HH:MM:SS."""
    return time.strftime("%H:%M:%S", time.localtime(timestamp))


def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception:
        return f"<{type(value).__name__}>"
