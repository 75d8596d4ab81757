"""Screen-facing wrapper around the secure display channel."""

from __future__ import annotations

from dataclasses import dataclass

from .channel import MethodChannel
from .secure_display import SET_SECURE_MODE


@dataclass
class SecureModeReport:
    secure: bool
    message: str


def request_secure_mode(channel: MethodChannel, secure: bool, *, current: bool) -> SecureModeReport:
    """Ask the host for *secure* and report the state the screen should show.

    On anything but success the screen keeps *current*.
    """

    result = channel.invoke_method(SET_SECURE_MODE, {"secure": secure})
    if result.is_success:
        return SecureModeReport(secure=secure, message="Capture blocked" if secure else "Capture allowed")
    return SecureModeReport(secure=current, message=f"Secure mode unavailable ({result.outcome.value})")


__all__ = ["SecureModeReport", "request_secure_mode"]
