"""KivyMD host application exposing the secure display channel."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from kivy.core.window import Window
from kivy.lang import Builder
from kivy.properties import BooleanProperty, StringProperty
from kivy.uix.screenmanager import Screen
from kivy.utils import platform
from kivymd.app import MDApp

from .channel import BinaryMessenger, MethodChannel
from .engine import configure_engine
from .policy import policy
from .presenter import request_secure_mode
from .surfaces import DisplaySurface, default_surface

_logger = logging.getLogger(__name__)

KV = """
<SecureModeScreen>:
    name: "secure"
    MDBoxLayout:
        orientation: "vertical"
        padding: dp(24)
        spacing: dp(18)
        MDLabel:
            text: "Secure mode"
            font_style: "H5"
            halign: "center"
        MDBoxLayout:
            adaptive_height: True
            spacing: dp(12)
            MDLabel:
                text: "Block screenshots and screen recording"
                size_hint_y: None
                height: self.texture_size[1]
            MDSwitch:
                active: root.secure
                on_active: root.request_secure(self.active)
        MDLabel:
            text: root.status_text
            halign: "center"
            theme_text_color: "Secondary"
"""


class SecureModeScreen(Screen):
    secure = BooleanProperty(False)
    status_text = StringProperty("")

    def request_secure(self, secure: bool) -> None:
        app = MDApp.get_running_app()
        report = request_secure_mode(app.channel, secure, current=self.secure)
        self.secure = report.secure
        self.status_text = report.message


def _window_handle() -> Optional[int]:
    if sys.platform != "win32":
        return None
    info = Window.get_window_info()
    return getattr(info, "window", None)


class SecureHostApp(MDApp):
    messenger: Optional[BinaryMessenger] = None
    channel: Optional[MethodChannel] = None
    surface: Optional[DisplaySurface] = None

    def build(self):
        self.title = "Nuttgram"
        if platform != "android":
            Window.size = (420, 760)

        self.messenger = BinaryMessenger()
        self.surface = default_surface(_window_handle())
        _logger.info("Display surface: %r", self.surface)
        self.channel, _toggle = configure_engine(self.messenger, self.surface, policy=policy)

        Builder.load_string(KV)
        screen = SecureModeScreen()
        screen.secure = policy.secure_on_start
        return screen


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    SecureHostApp().run()


if __name__ == "__main__":
    main()
