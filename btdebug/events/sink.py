"""Event sink that fans debug events out to subscribers.

The sink owns no rendering logic. Subscribers (console logger, in-memory
buffer, a UI panel, a test harness) receive LogEvent objects and decide
how to show them.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from ..models import LogEvent, Severity
from .formatting import LOG_PREFIX, format_event, interpolate

logger = logging.getLogger(__name__)

FALLBACK_LOGGER_NAME = "btdebug"

EventHandler = Callable[[LogEvent], None]


class Subscription:
    """Handle returned by EventSink.subscribe.

    Calling the handle unsubscribes the handler.
    """

    def __init__(self, sink: EventSink, handler: EventHandler):
        self._sink = sink
        self.handler = handler

    def __call__(self) -> None:
        self._sink.unsubscribe(self)


class EventSink:
    """Distributes LogEvents to zero or more subscribers.

    Dispatch is synchronous and in subscription order, so each subscriber
    sees events in emission order. A failing subscriber is logged and
    skipped; the others still receive the event.

    When nobody is subscribed, events go to a fallback stdlib logger so
    diagnostics are not lost before a UI exists.

    The ``enabled`` flag is checked before any other work, including
    message interpolation.
    """

    def __init__(self, enabled: bool = True, fallback: Optional[logging.Logger] = None):
        """Initialize EventSink.

        Args:
            enabled: Whether events are emitted at all
            fallback: Logger used when there are no subscribers
        """
        self.enabled = enabled
        self._fallback = fallback or logging.getLogger(FALLBACK_LOGGER_NAME)
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: EventHandler) -> Subscription:
        """Subscribe a handler to all future events.

        Args:
            handler: Function that receives LogEvent objects

        Returns:
            Subscription handle; pass it to unsubscribe() or call it
        """
        subscription = Subscription(self, handler)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription. Unknown handles are ignored."""
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def emit(self, event: LogEvent) -> None:
        """Deliver an event to every subscriber. Never raises."""
        if not self.enabled:
            return

        with self._lock:
            subscriptions = list(self._subscriptions)

        if not subscriptions:
            self._emit_fallback(event)
            return

        for subscription in subscriptions:
            try:
                subscription.handler(event)
            except Exception as e:
                logger.error(f"Error in event subscriber: {e}")

    def log(
        self,
        severity: Severity,
        message: str,
        *args,
        raw: Optional[bytes] = None,
    ) -> None:
        """Build and emit an event; %-style args are applied lazily."""
        if not self.enabled:
            return
        self.emit(LogEvent.create(severity, interpolate(message, args), raw=_coerce_raw(raw)))

    def info(self, message: str, *args, raw: Optional[bytes] = None) -> None:
        self.log(Severity.INFO, message, *args, raw=raw)

    def warn(self, message: str, *args, raw: Optional[bytes] = None) -> None:
        self.log(Severity.WARN, message, *args, raw=raw)

    def error(self, message: str, *args, raw: Optional[bytes] = None) -> None:
        self.log(Severity.ERROR, message, *args, raw=raw)

    def success(self, message: str, *args, raw: Optional[bytes] = None) -> None:
        self.log(Severity.SUCCESS, message, *args, raw=raw)

    def _emit_fallback(self, event: LogEvent) -> None:
        try:
            self._fallback.log(event.severity.log_level, "%s %s", LOG_PREFIX, format_event(event))
        except Exception as e:
            logger.error(f"Fallback event output failed: {e}")


def _coerce_raw(raw) -> Optional[bytes]:
    """Raw payload as bytes, or None if it cannot be converted."""
    if raw is None or isinstance(raw, bytes):
        return raw
    if isinstance(raw, (int, str)):
        return None
    try:
        return bytes(raw)
    except (TypeError, ValueError):
        return None
