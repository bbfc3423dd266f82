"""Event layer: sink, subscribers and formatting helpers."""

from .sink import EventSink, Subscription
from .subscribers import LoggingSubscriber, LogBuffer
from .formatting import (
    format_event,
    hex_tokens,
    serialize_options,
    display_name,
)

__all__ = [
    "EventSink",
    "Subscription",
    "LoggingSubscriber",
    "LogBuffer",
    "format_event",
    "hex_tokens",
    "serialize_options",
    "display_name",
]
