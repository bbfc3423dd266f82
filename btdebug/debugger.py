"""Bluetooth debugger bootstrap.

Wires the event sink, decoder registry and interception shim together into
one context object that the application creates once and keeps.
"""
from __future__ import annotations

from typing import Any, List, Optional

from .decoding import DecoderRegistry, gan_cube_rule
from .decoding.gan_cube import GAN_DEVICE_KIND
from .decoding.registry import FrameLike
from .events import EventSink, LoggingSubscriber, LogBuffer
from .events.subscribers import DEFAULT_MAX_ENTRIES
from .interception import DEFAULT_METHOD_NAME, InterceptionState, install
from .models import DecodedCommand, Severity


class BluetoothDebugger:
    """Facade over the debugging facility.

    This class manages:
    1. The event sink and its subscribers (console + LogBuffer)
    2. The decoder registry with the default GAN cube rule
    3. Installation of the request-device shim

    A single ``enabled`` flag turns all event emission off. Calls through
    the shim and frame decoding keep working while disabled.
    """

    def __init__(
        self,
        enabled: Optional[bool] = None,
        console: bool = True,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        sink: Optional[EventSink] = None,
        registry: Optional[DecoderRegistry] = None,
    ):
        """Initialize BluetoothDebugger.

        Args:
            enabled: Whether events are emitted initially; None keeps the
                flag of a supplied sink and enables a new one
            console: Mirror events to the ``btdebug`` logger
            max_entries: Size of the in-memory log history
            sink: Existing EventSink, or None to create one
            registry: Existing DecoderRegistry, or None to create one with
                the default rules. A supplied registry keeps its own rules
                and is given this debugger's sink if it has none.
        """
        if sink is None:
            sink = EventSink(enabled=True if enabled is None else enabled)
        elif enabled is not None:
            sink.enabled = enabled
        self.sink = sink
        self.buffer = LogBuffer(max_entries=max_entries)
        self.state = InterceptionState()

        self.sink.subscribe(self.buffer)
        if console:
            self.sink.subscribe(LoggingSubscriber())

        if registry is None:
            registry = DecoderRegistry(sink=self.sink)
            registry.register(gan_cube_rule())
        elif registry.sink is None:
            registry.sink = self.sink
        self.registry = registry

    @property
    def enabled(self) -> bool:
        return self.sink.enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self.sink.enabled = bool(value)

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    @property
    def is_monitoring(self) -> bool:
        return self.state.installed

    def monitor(self, host: Any, method_name: str = DEFAULT_METHOD_NAME) -> bool:
        """Start observing host.method_name calls.

        Returns:
            True if the shim was installed by this call
        """
        installed = install(host, method_name, self.sink, self.state)
        if installed:
            self.sink.success("Started monitoring Bluetooth operations")
        return installed

    def observe_frame(self, device_kind: str, frame: FrameLike) -> DecodedCommand:
        """Decode a frame from a connected peripheral and log it."""
        return self.registry.process_frame(device_kind, frame)

    def debug_gan_cube(self, frame: FrameLike) -> DecodedCommand:
        return self.observe_frame(GAN_DEVICE_KIND, frame)

    def log(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.sink.log(severity, message)

    def clear_logs(self) -> None:
        """Empty the log history and note that it was cleared."""
        self.buffer.clear()
        self.sink.info("Logs cleared")

    def lines(self) -> List[str]:
        return self.buffer.lines()


def enable_debugging(
    host: Any,
    method_name: str = DEFAULT_METHOD_NAME,
    **kwargs,
) -> BluetoothDebugger:
    """Create a debugger and start monitoring host.

    Keyword arguments are passed to BluetoothDebugger. Keep the returned
    object; it is the only handle to the facility.
    """
    debugger = BluetoothDebugger(**kwargs)
    debugger.monitor(host, method_name)
    return debugger
