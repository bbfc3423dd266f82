"""Interception layer: request-device shim and its installation state."""

from .state import InterceptionState
from .shim import (
    DEFAULT_METHOD_NAME,
    intercept,
    install,
    is_intercepted,
    is_shim,
)

__all__ = [
    "InterceptionState",
    "DEFAULT_METHOD_NAME",
    "intercept",
    "install",
    "is_intercepted",
    "is_shim",
]
