"""Installation state of the request-device shim."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass
class InterceptionState:
    """Tracks whether the shim is installed and what it delegates to.

    Set once by install(). After that the delegate never changes, so the
    shim can never end up delegating to itself.

    Attributes:
        installed: Whether the shim has been installed
        target: Object whose method was replaced
        method_name: Name of the replaced method
        delegate: Original (unwrapped) entry point
    """
    installed: bool = False
    target: Any = None
    method_name: Optional[str] = None
    delegate: Optional[Callable] = None

    def mark_installed(self, target: Any, method_name: str, delegate: Callable) -> None:
        if self.installed:
            raise RuntimeError("Interception is already installed")
        self.target = target
        self.method_name = method_name
        self.delegate = delegate
        self.installed = True
