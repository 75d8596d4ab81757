"""Toggle capture prevention on the active display surface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .channel import MethodCall, MethodResult
from .surfaces import DisplaySurface

_logger = logging.getLogger(__name__)

SET_SECURE_MODE = "setSecureMode"

ChangeObserver = Callable[[bool], None]


@dataclass(frozen=True)
class ToggleCommand:
    """One inbound request. ``secure`` defaults to ``False``."""

    name: str
    secure: bool = False

    @classmethod
    def from_method_call(cls, call: MethodCall) -> "ToggleCommand":
        # Anything other than a real boolean, including 0/1, counts as absent.
        value = call.argument("secure")
        return cls(name=call.method, secure=value if isinstance(value, bool) else False)


class SecureDisplayToggle:
    """Apply or remove the "prevent capture" attribute on a display surface.

    The surface owns the bit; this class only calls its setters. Unknown
    command names answer with the not-implemented outcome and leave the
    surface untouched. The error outcome is never produced here.
    """

    def __init__(self, surface: DisplaySurface, *, on_change: Optional[ChangeObserver] = None) -> None:
        self.surface = surface
        self.on_change = on_change
        self._handlers: Dict[str, Callable[[ToggleCommand], MethodResult]] = {
            SET_SECURE_MODE: self._set_secure_mode,
        }

    def handle(self, command: ToggleCommand) -> MethodResult:
        handler = self._handlers.get(command.name)
        if handler is None:
            return MethodResult.not_implemented()
        return handler(command)

    def __call__(self, call: MethodCall) -> MethodResult:
        return self.handle(ToggleCommand.from_method_call(call))

    def _set_secure_mode(self, command: ToggleCommand) -> MethodResult:
        if command.secure:
            self.surface.set_secure()
        else:
            self.surface.clear_secure()
        _logger.debug("Secure mode %s", "enabled" if command.secure else "disabled")
        if self.on_change is not None:
            # The surface already changed; observer failures must not turn into an error reply.
            try:
                self.on_change(command.secure)
            except Exception:
                _logger.exception("Secure mode observer failed")
        return MethodResult.success(None)


__all__ = ["SET_SECURE_MODE", "SecureDisplayToggle", "ToggleCommand"]
