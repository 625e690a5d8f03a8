"""Desktop shell preferences with JSON persistence.

Timer durations and auto-start flags live in ``TimerSettings`` and are
saved through the engine's store.  This file only holds what the tray
shell itself needs.  Stored at:
    ~/Library/Application Support/PomoTimer/settings.json

Usage::

    settings = load_settings()
    settings.sound_volume = 50
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)

# Same directory as the database
APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "PomoTimer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class AppSettings:
    """Shell-level preferences."""

    sound_volume: int = 70                 # 0-100
    tray_notifications: bool = True
    log_level: str = "INFO"


def load_settings() -> AppSettings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            valid_keys = {f.name for f in fields(AppSettings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return AppSettings(**filtered)
    except Exception:
        logger.warning("Could not read %s, using defaults", SETTINGS_PATH, exc_info=True)
    return AppSettings()


def save_settings(settings: AppSettings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
