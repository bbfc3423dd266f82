"""Interception shim for the asynchronous request-device entry point.

The shim observes each call without changing its contract: it reports the
call, awaits the original implementation, reports the outcome and then
returns the original value or re-raises the original exception.
"""
from __future__ import annotations

import functools
import inspect
import logging
import types
from typing import Any, Callable, Optional

from ..events.formatting import display_name, error_message, serialize_options
from ..events.sink import EventSink
from .state import InterceptionState

logger = logging.getLogger(__name__)

DEFAULT_METHOD_NAME = "request_device"
DEFAULT_LABEL = "requestDevice"

# Set on every wrapper; points at the function it delegates to.
SHIM_DELEGATE_ATTR = "_btdebug_delegate"


def intercept(
    delegate: Callable,
    sink: EventSink,
    label: str = DEFAULT_LABEL,
    receiver: bool = False,
) -> Callable:
    """Wrap a request-device function with event reporting.

    Args:
        delegate: Original request-device callable (async or sync)
        sink: Event sink to report to
        label: Name used in event messages
        receiver: The first positional argument is the instance the
            method was looked up on, not the options

    Returns:
        Async function with the same call signature as delegate
    """

    @functools.wraps(delegate, updated=())
    async def wrapper(*args, **kwargs):
        if sink.enabled:
            call_args = args[1:] if receiver else args
            options = call_args[0] if call_args else kwargs.get("options")
            sink.info("%s called with options: %s", label, serialize_options(options))

        try:
            result = delegate(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
        except Exception as error:
            if sink.enabled:
                sink.error("%s error: %s", label, error_message(error))
            raise

        if sink.enabled:
            sink.success("Device selected: %s", display_name(result))
        return result

    setattr(wrapper, SHIM_DELEGATE_ATTR, delegate)
    return wrapper


def is_shim(func: Any) -> bool:
    """Check whether func is a wrapper produced by intercept()."""
    return inspect.isfunction(func) and SHIM_DELEGATE_ATTR in vars(func)


def is_intercepted(target: Any, method_name: str = DEFAULT_METHOD_NAME) -> bool:
    """Check whether target.method_name is currently wrapped."""
    return is_shim(getattr(target, method_name, None))


def install(
    target: Any,
    method_name: str,
    sink: EventSink,
    state: Optional[InterceptionState] = None,
    label: str = DEFAULT_LABEL,
) -> bool:
    """Replace target.method_name with an intercepting wrapper.

    Safe to call repeatedly: once installed (per state, or because the
    method is already a wrapper) further calls do nothing.

    Args:
        target: Host API object, or class, exposing the request-device method
        method_name: Attribute name of the method
        sink: Event sink the wrapper reports to
        state: Installation state; a fresh one is used if None
        label: Name used in event messages

    Returns:
        True if the method was wrapped by this call, False otherwise
    """
    state = state if state is not None else InterceptionState()

    if state.installed:
        logger.debug(f"Interception already installed on {state.method_name}, skipping")
        return False

    current = getattr(target, method_name, None) if target is not None else None
    if current is None or not callable(current):
        sink.error("Bluetooth API is not available")
        return False

    if is_shim(current):
        logger.debug(f"{method_name} is already intercepted, skipping")
        return False

    state.mark_installed(target, method_name, current)
    if inspect.isclass(target):
        # Plain functions on a class are called with the instance first;
        # static and class methods come back from getattr already bound.
        if isinstance(inspect.getattr_static(target, method_name), types.FunctionType):
            wrapper = intercept(state.delegate, sink, label=label, receiver=True)
        else:
            wrapper = staticmethod(intercept(state.delegate, sink, label=label))
    else:
        wrapper = intercept(state.delegate, sink, label=label)
    setattr(target, method_name, wrapper)
    return True
