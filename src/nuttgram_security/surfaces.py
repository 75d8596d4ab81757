"""Display surfaces that own the capture-prevention bit.

On Android the bit is ``WindowManager.LayoutParams.FLAG_SECURE`` on the
activity window, reached through pyjnius. On Windows it is the window display
affinity. Everywhere else (desktop runs, tests) an in-memory surface keeps the
bit so the channel behaves the same way.
"""

from __future__ import annotations

import ctypes
import logging
import os
import sys
from typing import Any, Callable, Optional, Protocol

_logger = logging.getLogger(__name__)

UiThreadPoster = Callable[[Callable[[], None]], None]

WDA_NONE = 0x00000000
WDA_MONITOR = 0x00000001
WDA_EXCLUDEFROMCAPTURE = 0x00000011


class SurfaceUnavailable(RuntimeError):
    """Raised when the platform cannot provide the requested surface."""


class DisplaySurface(Protocol):
    @property
    def is_secure(self) -> bool:
        ...

    def set_secure(self) -> None:
        ...

    def clear_secure(self) -> None:
        ...


class InMemorySurface:
    """Surface used on desktop builds and in tests."""

    def __init__(self, secure: bool = False) -> None:
        self._secure = secure

    @property
    def is_secure(self) -> bool:
        return self._secure

    def set_secure(self) -> None:
        self._secure = True

    def clear_secure(self) -> None:
        self._secure = False

    def __repr__(self) -> str:
        return f"InMemorySurface(secure={self._secure})"


def _android_ui_thread(activity: Any) -> UiThreadPoster:
    """Return a poster that runs callables on the Android UI thread."""

    from jnius import PythonJavaClass, java_method

    pending = set()

    class _Runnable(PythonJavaClass):
        __javainterfaces__ = ["java/lang/Runnable"]

        def __init__(self, fn: Callable[[], None]) -> None:
            super().__init__()
            self.fn = fn

        @java_method("()V")
        def run(self) -> None:
            try:
                self.fn()
            finally:
                pending.discard(self)

    def post(fn: Callable[[], None]) -> None:
        runnable = _Runnable(fn)
        # Java only holds a weak proxy; keep the Python side alive until run().
        pending.add(runnable)
        activity.runOnUiThread(runnable)

    return post


class AndroidWindowSurface:
    """FLAG_SECURE on the python-for-android activity window.

    Mutations are posted to the Android UI thread and applied later, while
    ``is_secure`` reads the live window flags. A read straight after
    ``set_secure()`` or ``clear_secure()`` can still show the previous state.
    """

    def __init__(
        self,
        activity: Any = None,
        layout_params: Any = None,
        ui_thread: Optional[UiThreadPoster] = None,
    ) -> None:
        if activity is None or layout_params is None:
            try:
                from jnius import autoclass
            except ImportError as exc:
                raise SurfaceUnavailable("pyjnius is not available on this platform") from exc
            if activity is None:
                activity = autoclass("org.kivy.android.PythonActivity").mActivity
            if layout_params is None:
                layout_params = autoclass("android.view.WindowManager$LayoutParams")
        self.activity = activity
        self.flag = layout_params.FLAG_SECURE
        self._post = ui_thread or _android_ui_thread(activity)

    @property
    def is_secure(self) -> bool:
        attributes = self.activity.getWindow().getAttributes()
        return bool(attributes.flags & self.flag)

    def set_secure(self) -> None:
        def _apply() -> None:
            self.activity.getWindow().setFlags(self.flag, self.flag)
            _logger.debug("FLAG_SECURE set on activity window")

        self._post(_apply)

    def clear_secure(self) -> None:
        def _apply() -> None:
            self.activity.getWindow().clearFlags(self.flag)
            _logger.debug("FLAG_SECURE cleared on activity window")

        self._post(_apply)


class WindowsCaptureSurface:
    """Window display affinity on a Win32 top-level window."""

    def __init__(self, hwnd: int, user32: Any = None) -> None:
        if user32 is None:
            windll = getattr(ctypes, "windll", None)
            if windll is None:
                raise SurfaceUnavailable("user32 is only available on Windows")
            user32 = windll.user32
        self.hwnd = hwnd
        self.user32 = user32

    @property
    def is_secure(self) -> bool:
        affinity = ctypes.c_ulong(WDA_NONE)
        if not self.user32.GetWindowDisplayAffinity(self.hwnd, ctypes.byref(affinity)):
            return False
        return affinity.value != WDA_NONE

    def set_secure(self) -> None:
        if self.user32.SetWindowDisplayAffinity(self.hwnd, WDA_EXCLUDEFROMCAPTURE):
            return
        # WDA_EXCLUDEFROMCAPTURE needs Windows 10 2004; older builds black out instead.
        if not self.user32.SetWindowDisplayAffinity(self.hwnd, WDA_MONITOR):
            _logger.warning("SetWindowDisplayAffinity failed for hwnd %s", self.hwnd)

    def clear_secure(self) -> None:
        if not self.user32.SetWindowDisplayAffinity(self.hwnd, WDA_NONE):
            _logger.warning("Could not reset display affinity for hwnd %s", self.hwnd)


def running_on_android() -> bool:
    return "ANDROID_ARGUMENT" in os.environ


def default_surface(hwnd: Optional[int] = None) -> DisplaySurface:
    """Pick the surface matching the current platform."""

    if running_on_android():
        return AndroidWindowSurface()
    if sys.platform == "win32" and hwnd:
        return WindowsCaptureSurface(hwnd)
    _logger.info("No native display surface, capture prevention is simulated")
    return InMemorySurface()


__all__ = [
    "AndroidWindowSurface",
    "DisplaySurface",
    "InMemorySurface",
    "SurfaceUnavailable",
    "WindowsCaptureSurface",
    "default_surface",
    "running_on_android",
]
