"""
Notification backends. Console: print to stdout. Desktop: system tray balloon via PySide6 QSystemTrayIcon.
NotifierGroup delivers to each backend in order and stops at the first failure (no rollback).
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Protocol

from radarwatch.errors import NotificationFailed

logger = logging.getLogger("radarwatch.notify")

QPA_PLATFORM_FALLBACK = "xcb;wayland;offscreen"


class Notifier(Protocol):
    def notify(self, title: str, message: str) -> None: ...


class ConsoleNotifier:
    def notify(self, title: str, message: str) -> None:
        print(f"[{title}] {message}", flush=True)


def _has_display() -> bool:
    if sys.platform in ("win32", "darwin"):
        return True
    return bool(os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))


class DesktopNotifier:
    """
    Tray balloon notifications. The QApplication and tray icon are created on first use.
    Headless hosts (no display or no system tray) raise NotificationFailed.
    """

    def __init__(self, app_name: str, icon_path: Optional[Path] = None, timeout_ms: int = 5000):
        self.app_name = app_name
        self.icon_path = icon_path
        self.timeout_ms = timeout_ms
        self._app = None
        self._tray = None
        self._message_icon = None

    def _ensure_tray(self):
        if self._tray is not None:
            return self._tray
        # QApplication aborts the process without a display, check first
        if not _has_display():
            raise NotificationFailed("desktop", "no display available")
        if sys.platform not in ("win32", "darwin"):
            # An unreachable X or Wayland server is a Qt fatal error; fall back to offscreen,
            # which reports no system tray.
            os.environ.setdefault("QT_QPA_PLATFORM", QPA_PLATFORM_FALLBACK)

        from PySide6.QtGui import QIcon
        from PySide6.QtWidgets import QApplication, QStyle, QSystemTrayIcon

        app = QApplication.instance() or QApplication([self.app_name])
        app.setApplicationName(self.app_name)
        app.setQuitOnLastWindowClosed(False)
        if not QSystemTrayIcon.isSystemTrayAvailable():
            raise NotificationFailed("desktop", "system tray not available")

        tray = QSystemTrayIcon()
        if self.icon_path and Path(self.icon_path).exists():
            tray.setIcon(QIcon(str(self.icon_path)))
        else:
            tray.setIcon(app.style().standardIcon(QStyle.StandardPixmap.SP_MessageBoxWarning))
        tray.setToolTip(self.app_name)
        tray.show()
        self._app = app
        self._tray = tray
        self._message_icon = QSystemTrayIcon.MessageIcon.Warning
        return tray

    def notify(self, title: str, message: str) -> None:
        tray = self._ensure_tray()
        try:
            tray.showMessage(title, message, self._message_icon, self.timeout_ms)
            self._app.processEvents()
        except Exception as e:
            raise NotificationFailed("desktop", str(e)) from e


class NotifierGroup:
    """Fan-out to every backend in a fixed order; fail fast."""

    def __init__(self, notifiers: list[Notifier]):
        self.notifiers = list(notifiers)

    def notify(self, title: str, message: str) -> None:
        for n in self.notifiers:
            try:
                n.notify(title, message)
            except NotificationFailed:
                raise
            except Exception as e:
                raise NotificationFailed(type(n).__name__, str(e)) from e
