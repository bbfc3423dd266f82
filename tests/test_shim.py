"""Unit tests for the request-device interception shim."""

import asyncio
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock

from btdebug.events import EventSink
from btdebug.events.formatting import OPTIONS_PLACEHOLDER
from btdebug.interception import (
    InterceptionState,
    intercept,
    install,
    is_intercepted,
    is_shim,
)
from btdebug.models import Severity


class NotFoundError(Exception):
    """Raised by FakeBluetooth when nothing is chosen."""


class FakeBluetooth:
    """Stand-in for a host API exposing request_device()."""

    def __init__(self, device=None, error=None):
        self.device = device
        self.error = error
        self.calls = []

    async def request_device(self, options=None):
        """Request a device."""
        self.calls.append(options)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.device


class ShimTestCase(unittest.IsolatedAsyncioTestCase):
    """Common setup: a sink collecting events."""

    def setUp(self):
        self.sink = EventSink()
        self.events = []
        self.sink.subscribe(self.events.append)

    @property
    def severities(self):
        return [e.severity for e in self.events]


class TestPassThrough(ShimTestCase):
    """Wrapped calls behave exactly like the original."""

    async def test_resolved_value_unchanged(self):
        device = SimpleNamespace(name="GAN12ui")
        host = FakeBluetooth(device=device)
        install(host, "request_device", self.sink)

        result = await host.request_device({"filters": [{"namePrefix": "GAN"}]})

        self.assertIs(result, device)
        self.assertEqual(host.calls, [{"filters": [{"namePrefix": "GAN"}]}])
        self.assertEqual(self.severities, [Severity.INFO, Severity.SUCCESS])
        self.assertTrue(self.events[0].message.startswith("requestDevice called with options: {"))
        self.assertIn('"namePrefix": "GAN"', self.events[0].message)
        self.assertEqual(self.events[1].message, "Device selected: GAN12ui")

    async def test_rejected_error_unchanged(self):
        error = NotFoundError("User cancelled the requestDevice() chooser.")
        host = FakeBluetooth(error=error)
        install(host, "request_device", self.sink)

        with self.assertRaises(NotFoundError) as cm:
            await host.request_device({"acceptAllDevices": True})

        self.assertIs(cm.exception, error)
        self.assertEqual(str(cm.exception), "User cancelled the requestDevice() chooser.")
        self.assertIsNotNone(cm.exception.__traceback__)
        self.assertEqual(self.severities, [Severity.INFO, Severity.ERROR])
        self.assertEqual(
            self.events[1].message,
            "requestDevice error: User cancelled the requestDevice() chooser.",
        )

    async def test_keyword_arguments_forwarded(self):
        host = FakeBluetooth(device=SimpleNamespace(name="x"))
        install(host, "request_device", self.sink)

        await host.request_device(options={"acceptAllDevices": True})

        self.assertEqual(host.calls, [{"acceptAllDevices": True}])
        self.assertIn('"acceptAllDevices": true', self.events[0].message)

    async def test_unnamed_device(self):
        host = FakeBluetooth(device=SimpleNamespace(name=None))
        install(host, "request_device", self.sink)
        await host.request_device({"acceptAllDevices": True})
        self.assertEqual(self.events[-1].message, "Device selected: unnamed")

    async def test_unserializable_options(self):
        """Serialization failure degrades to a placeholder."""
        host = FakeBluetooth(device=SimpleNamespace(name="x"))
        install(host, "request_device", self.sink)

        options = {"filters": [{"services": {0xFFF0}}]}
        result = await host.request_device(options)

        self.assertEqual(result.name, "x")
        self.assertEqual(host.calls, [options])
        self.assertEqual(
            self.events[0].message,
            f"requestDevice called with options: {OPTIONS_PLACEHOLDER}",
        )

    async def test_sync_delegate(self):
        wrapper = intercept(lambda options=None: {"name": "sync"}, self.sink)
        result = await wrapper({})
        self.assertEqual(result, {"name": "sync"})
        self.assertEqual(self.events[-1].message, "Device selected: sync")

    async def test_sync_delegate_error(self):
        def failing(options=None):
            raise ValueError("bad options")

        wrapper = intercept(failing, self.sink)
        with self.assertRaises(ValueError):
            await wrapper({})
        self.assertEqual(self.severities, [Severity.INFO, Severity.ERROR])

    async def test_wrapper_metadata(self):
        host = FakeBluetooth()
        install(host, "request_device", self.sink)
        self.assertEqual(host.request_device.__name__, "request_device")
        self.assertEqual(host.request_device.__doc__, "Request a device.")

    async def test_async_mock_delegate(self):
        delegate = AsyncMock(return_value=SimpleNamespace(name="mocked"))
        wrapper = intercept(delegate, self.sink, label="scan")

        result = await wrapper({"acceptAllDevices": True})

        delegate.assert_awaited_once_with({"acceptAllDevices": True})
        self.assertEqual(result.name, "mocked")
        self.assertTrue(self.events[0].message.startswith("scan called with options:"))

    async def test_no_arguments(self):
        host = FakeBluetooth(device=SimpleNamespace(name="x"))
        install(host, "request_device", self.sink)
        await host.request_device()
        self.assertEqual(self.events[0].message, "requestDevice called with options: null")

    async def test_device_name_lookup_fails(self):
        """A device whose name property raises is still returned."""

        class OpaqueDevice:
            @property
            def name(self):
                raise RuntimeError("GATT server disconnected")

        device = OpaqueDevice()
        host = FakeBluetooth(device=device)
        install(host, "request_device", self.sink)

        result = await host.request_device({"acceptAllDevices": True})

        self.assertIs(result, device)
        self.assertEqual(self.events[-1].message, "Device selected: unnamed")

    async def test_error_without_printable_message(self):
        """The original error is re-raised even when str() fails on it."""

        class SilentError(Exception):
            def __str__(self):
                raise RuntimeError("no message")

        error = SilentError()
        host = FakeBluetooth(error=error)
        install(host, "request_device", self.sink)

        with self.assertRaises(SilentError) as cm:
            await host.request_device({"acceptAllDevices": True})

        self.assertIs(cm.exception, error)
        self.assertEqual(self.events[-1].severity, Severity.ERROR)
        self.assertEqual(self.events[-1].message, "requestDevice error: SilentError")


class TestInstall(ShimTestCase):
    """Installation is idempotent and never wraps itself."""

    async def test_install_twice_single_layer(self):
        host = FakeBluetooth(device=SimpleNamespace(name="cube"))
        original = host.request_device
        state = InterceptionState()

        self.assertTrue(install(host, "request_device", self.sink, state))
        self.assertFalse(install(host, "request_device", self.sink, state))

        await host.request_device({"acceptAllDevices": True})

        self.assertEqual(self.severities, [Severity.INFO, Severity.SUCCESS])
        self.assertEqual(state.delegate, original)
        self.assertFalse(is_shim(state.delegate))

    async def test_install_with_fresh_state_detects_wrapper(self):
        """A second installer does not wrap an existing wrapper."""
        host = FakeBluetooth(device=SimpleNamespace(name="cube"))
        self.assertTrue(install(host, "request_device", self.sink))
        self.assertFalse(install(host, "request_device", self.sink, InterceptionState()))

        await host.request_device({"acceptAllDevices": True})
        self.assertEqual(len(self.events), 2)

    async def test_state_recorded(self):
        host = FakeBluetooth()
        state = InterceptionState()
        install(host, "request_device", self.sink, state)

        self.assertTrue(state.installed)
        self.assertIs(state.target, host)
        self.assertEqual(state.method_name, "request_device")
        self.assertTrue(is_intercepted(host, "request_device"))

    async def test_state_cannot_be_reinstalled(self):
        state = InterceptionState()
        state.mark_installed(object(), "request_device", lambda: None)
        with self.assertRaises(RuntimeError):
            state.mark_installed(object(), "request_device", lambda: None)

    async def test_missing_api(self):
        self.assertFalse(install(None, "request_device", self.sink))
        self.assertFalse(install(SimpleNamespace(), "request_device", self.sink))

        self.assertEqual(self.severities, [Severity.ERROR, Severity.ERROR])
        self.assertEqual(self.events[0].message, "Bluetooth API is not available")

    async def test_missing_api_does_not_mark_installed(self):
        state = InterceptionState()
        install(None, "request_device", self.sink, state)
        self.assertFalse(state.installed)

    async def test_install_on_class(self):
        """Options are logged, not the instance, when a class is patched."""

        class ClassBluetooth:
            async def request_device(self, options=None):
                return SimpleNamespace(name="GAN12ui", owner=self)

        self.assertTrue(install(ClassBluetooth, "request_device", self.sink))
        host = ClassBluetooth()

        result = await host.request_device({"filters": [{"namePrefix": "GAN"}]})

        self.assertIs(result.owner, host)
        self.assertTrue(is_intercepted(ClassBluetooth, "request_device"))
        self.assertIn('"namePrefix": "GAN"', self.events[0].message)
        self.assertEqual(self.events[1].message, "Device selected: GAN12ui")

    async def test_install_on_class_keyword_options(self):
        class ClassBluetooth:
            async def request_device(self, options=None):
                return SimpleNamespace(name="x")

        install(ClassBluetooth, "request_device", self.sink)
        await ClassBluetooth().request_device(options={"acceptAllDevices": True})
        self.assertIn('"acceptAllDevices": true', self.events[0].message)

    async def test_install_on_class_staticmethod(self):
        class StaticBluetooth:
            @staticmethod
            async def request_device(options=None):
                return SimpleNamespace(name="static")

        install(StaticBluetooth, "request_device", self.sink)
        result = await StaticBluetooth().request_device({"acceptAllDevices": True})

        self.assertEqual(result.name, "static")
        self.assertIn('"acceptAllDevices": true', self.events[0].message)

    async def test_plain_target_not_intercepted(self):
        self.assertFalse(is_intercepted(FakeBluetooth(), "request_device"))
        self.assertFalse(is_intercepted(None, "request_device"))


class TestConcurrency(ShimTestCase):
    """Overlapping calls keep per-call event order."""

    async def test_overlapping_calls(self):
        class NamedHost:
            async def request_device(self, options):
                await asyncio.sleep(options["delay"])
                return SimpleNamespace(name=options["name"])

        host = NamedHost()
        install(host, "request_device", self.sink)

        results = await asyncio.gather(
            host.request_device({"name": "slow", "delay": 0.02}),
            host.request_device({"name": "fast", "delay": 0}),
        )

        self.assertEqual([r.name for r in results], ["slow", "fast"])
        messages = [e.message for e in self.events]
        self.assertEqual(len(messages), 4)
        for name in ("slow", "fast"):
            called = next(i for i, m in enumerate(messages) if "called" in m and f'"{name}"' in m)
            selected = messages.index(f"Device selected: {name}")
            self.assertLess(called, selected)

    async def test_disabled_sink(self):
        self.sink.enabled = False
        device = SimpleNamespace(name="quiet")
        host = FakeBluetooth(device=device)
        install(host, "request_device", self.sink)

        result = await host.request_device({"acceptAllDevices": True})

        self.assertIs(result, device)
        self.assertEqual(self.events, [])

    async def test_disabled_sink_error_still_raised(self):
        self.sink.enabled = False
        host = FakeBluetooth(error=NotFoundError("none"))
        install(host, "request_device", self.sink)

        with self.assertRaises(NotFoundError):
            await host.request_device({"acceptAllDevices": True})
        self.assertEqual(self.events, [])


if __name__ == "__main__":
    unittest.main()
