"""Centralised configuration for the secure display channel.

Values can be overridden by environment variables so that a packaged build can
be retargeted (channel name, start-up posture, auditing) without code changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_CHANNEL = "com.nuttgram.app/security"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _load_str(name: str, default: str) -> str:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _load_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


@dataclass(frozen=True)
class SecurityPolicy:
    """Holds runtime tunables for the secure display channel."""

    channel_name: str = DEFAULT_CHANNEL
    secure_on_start: bool = False
    audit_enabled: bool = False


def load_policy() -> SecurityPolicy:
    """Load the policy considering environment overrides."""

    return SecurityPolicy(
        channel_name=_load_str("NUTTGRAM_SECURITY_CHANNEL", DEFAULT_CHANNEL),
        secure_on_start=_load_bool("NUTTGRAM_SECURE_ON_START", False),
        audit_enabled=_load_bool("NUTTGRAM_AUDIT", False),
    )


policy = load_policy()


__all__ = ["DEFAULT_CHANNEL", "SecurityPolicy", "load_policy", "policy"]
