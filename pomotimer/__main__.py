"""Allow running PomoTimer as a module: python -m pomotimer."""

import logging
import sys

from PyQt6.QtGui import QColor, QIcon, QPainter, QPixmap
from PyQt6.QtWidgets import QApplication, QSystemTrayIcon

from .app import PomodoroPlugin
from .audio.sounds import SoundManager
from .settings import load_settings
from .storage.db import init_db


def _make_icon() -> QIcon:
    """Placeholder tray icon: a tomato-red circle."""
    pixmap = QPixmap(64, 64)
    pixmap.fill(QColor(0, 0, 0, 0))
    p = QPainter(pixmap)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    p.setBrush(QColor("#E5533D"))
    p.setPen(QColor("#E5533D").darker(120))
    p.drawEllipse(4, 4, 56, 56)
    p.end()
    return QIcon(pixmap)


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()

    app = QApplication(sys.argv)
    app.setApplicationName("PomoTimer")
    app.setOrganizationName("PomoTimer")
    app.setQuitOnLastWindowClosed(False)

    tray_icon = None
    if QSystemTrayIcon.isSystemTrayAvailable():
        tray_icon = QSystemTrayIcon(_make_icon())
    else:
        logging.getLogger(__name__).warning("No system tray; running without one")

    plugin = PomodoroPlugin(
        app_settings=settings,
        tray_icon=tray_icon,
        sound_manager=SoundManager(),
    )
    if tray_icon is not None:
        tray_icon.setContextMenu(plugin.build_menu())
        tray_icon.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
