"""Wire the secure display toggle into a messenger."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from .channel import BinaryMessenger, MethodChannel
from .policy import SecurityPolicy, policy as default_policy
from .secure_display import SecureDisplayToggle
from .surfaces import DisplaySurface

_logger = logging.getLogger(__name__)

Recorder = Callable[[bool], object]


def configure_engine(
    messenger: BinaryMessenger,
    surface: DisplaySurface,
    *,
    policy: Optional[SecurityPolicy] = None,
    recorder: Optional[Recorder] = None,
) -> Tuple[MethodChannel, SecureDisplayToggle]:
    """Register the toggle on the configured channel and apply the start posture.

    When auditing is enabled and no *recorder* is given, changes are written
    to the signed audit trail.
    """

    active_policy = policy or default_policy
    if recorder is None and active_policy.audit_enabled:
        from .audit import record_secure_mode

        recorder = record_secure_mode

    toggle = SecureDisplayToggle(surface, on_change=recorder)
    channel = MethodChannel(active_policy.channel_name, messenger)
    channel.set_method_call_handler(toggle)
    if active_policy.secure_on_start:
        surface.set_secure()
    _logger.info(
        "Secure display channel %s ready (secure_on_start=%s, audit=%s)",
        active_policy.channel_name,
        active_policy.secure_on_start,
        recorder is not None,
    )
    return channel, toggle


__all__ = ["configure_engine"]
