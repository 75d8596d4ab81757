"""Secure display toggle exposed to the UI layer over a method channel."""

from __future__ import annotations

from .channel import (
    BinaryMessenger,
    JSONMethodCodec,
    MethodCall,
    MethodChannel,
    MethodCodecError,
    MethodResult,
    Outcome,
)
from .engine import configure_engine
from .secure_display import SET_SECURE_MODE, SecureDisplayToggle, ToggleCommand
from .surfaces import (
    AndroidWindowSurface,
    DisplaySurface,
    InMemorySurface,
    SurfaceUnavailable,
    WindowsCaptureSurface,
    default_surface,
)

__all__ = [
    "AndroidWindowSurface",
    "BinaryMessenger",
    "DisplaySurface",
    "InMemorySurface",
    "JSONMethodCodec",
    "MethodCall",
    "MethodChannel",
    "MethodCodecError",
    "MethodResult",
    "Outcome",
    "SET_SECURE_MODE",
    "SecureDisplayToggle",
    "SurfaceUnavailable",
    "ToggleCommand",
    "WindowsCaptureSurface",
    "configure_engine",
    "default_surface",
]
