import importlib.util
from types import SimpleNamespace

import pytest

from nuttgram_security import surfaces
from nuttgram_security.surfaces import (
    WDA_EXCLUDEFROMCAPTURE,
    WDA_MONITOR,
    WDA_NONE,
    AndroidWindowSurface,
    InMemorySurface,
    SurfaceUnavailable,
    WindowsCaptureSurface,
)

FLAG_SECURE = 0x2000
FLAG_KEEP_SCREEN_ON = 0x80


class FakeWindow:
    def __init__(self, flags=0):
        self.flags = flags

    def setFlags(self, flags, mask):  # noqa: N802
        self.flags = (self.flags & ~mask) | (flags & mask)

    def clearFlags(self, flags):  # noqa: N802
        self.flags &= ~flags

    def getAttributes(self):  # noqa: N802
        return SimpleNamespace(flags=self.flags)


class FakeActivity:
    def __init__(self, window):
        self.window = window

    def getWindow(self):  # noqa: N802
        return self.window


class FakeUser32:
    def __init__(self, supports_exclude=True):
        self.supports_exclude = supports_exclude
        self.affinity = WDA_NONE
        self.calls = []

    def SetWindowDisplayAffinity(self, hwnd, mode):  # noqa: N802
        self.calls.append((hwnd, mode))
        if mode == WDA_EXCLUDEFROMCAPTURE and not self.supports_exclude:
            return 0
        self.affinity = mode
        return 1

    def GetWindowDisplayAffinity(self, hwnd, ref):  # noqa: N802
        ref._obj.value = self.affinity
        return 1


def make_android(flags=0):
    window = FakeWindow(flags)
    posted = []
    surface = AndroidWindowSurface(
        activity=FakeActivity(window),
        layout_params=SimpleNamespace(FLAG_SECURE=FLAG_SECURE),
        ui_thread=posted.append,
    )
    return surface, window, posted


def test_in_memory_surface_starts_disabled():
    surface = InMemorySurface()
    assert not surface.is_secure
    surface.set_secure()
    surface.set_secure()
    assert surface.is_secure
    surface.clear_secure()
    assert not surface.is_secure


def test_android_surface_posts_to_ui_thread():
    surface, window, posted = make_android()

    surface.set_secure()
    assert not surface.is_secure
    assert len(posted) == 1

    posted.pop()()
    assert surface.is_secure
    assert window.flags == FLAG_SECURE


def test_android_surface_keeps_unrelated_flags():
    surface, window, posted = make_android(flags=FLAG_KEEP_SCREEN_ON)

    surface.set_secure()
    surface.clear_secure()
    for task in posted:
        task()

    assert window.flags == FLAG_KEEP_SCREEN_ON
    assert not surface.is_secure


def test_windows_surface_prefers_exclude_from_capture():
    user32 = FakeUser32()
    surface = WindowsCaptureSurface(hwnd=42, user32=user32)

    surface.set_secure()
    assert user32.calls == [(42, WDA_EXCLUDEFROMCAPTURE)]
    assert surface.is_secure

    surface.clear_secure()
    assert user32.calls[-1] == (42, WDA_NONE)
    assert not surface.is_secure


def test_windows_surface_falls_back_to_monitor():
    user32 = FakeUser32(supports_exclude=False)
    surface = WindowsCaptureSurface(hwnd=7, user32=user32)

    surface.set_secure()

    assert user32.calls == [(7, WDA_EXCLUDEFROMCAPTURE), (7, WDA_MONITOR)]
    assert surface.is_secure


def test_default_surface_on_desktop(monkeypatch):
    monkeypatch.delenv("ANDROID_ARGUMENT", raising=False)
    monkeypatch.setattr(surfaces.sys, "platform", "linux")

    assert isinstance(surfaces.default_surface(), InMemorySurface)


def test_default_surface_without_window_handle_on_windows(monkeypatch):
    monkeypatch.delenv("ANDROID_ARGUMENT", raising=False)
    monkeypatch.setattr(surfaces.sys, "platform", "win32")

    assert isinstance(surfaces.default_surface(None), InMemorySurface)


@pytest.mark.skipif(importlib.util.find_spec("jnius") is not None, reason="pyjnius installed")
def test_android_surface_requires_pyjnius(monkeypatch):
    monkeypatch.setenv("ANDROID_ARGUMENT", "/data/app")

    with pytest.raises(SurfaceUnavailable):
        surfaces.default_surface()
