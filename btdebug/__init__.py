"""Bluetooth debugging toolkit - request-device interception and frame decoding."""

from .models import (
    Severity,
    LogEvent,
    DecodedCommand,
    DecodeRule,
)
from .errors import MalformedFrame
from .events import EventSink, LoggingSubscriber, LogBuffer
from .decoding import DecoderRegistry, FrameDecoder, GanCubeDecoder
from .interception import InterceptionState, intercept, install
from .debugger import BluetoothDebugger, enable_debugging

__all__ = [
    "Severity",
    "LogEvent",
    "DecodedCommand",
    "DecodeRule",
    "MalformedFrame",
    "EventSink",
    "LoggingSubscriber",
    "LogBuffer",
    "DecoderRegistry",
    "FrameDecoder",
    "GanCubeDecoder",
    "InterceptionState",
    "intercept",
    "install",
    "BluetoothDebugger",
    "enable_debugging",
]
