"""Notification chimes, synthesised with numpy and played with QSoundEffect.

WAV files are generated once and cached in the app-support directory.

Sound names
-----------
- ``timer_start``       two soft rising notes
- ``session_complete``  four-note arpeggio with a held last note
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

logger = logging.getLogger(__name__)

# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "PomoTimer"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SOUND_NAMES = (
    "timer_start",
    "session_complete",
)

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _envelope(length: int, attack: int, release: int) -> np.ndarray:
    """Linear attack/release envelope (durations in samples)."""
    env = np.ones(length, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    r = min(release, length - a)
    if r > 0:
        env[length - r:] = np.linspace(1.0, 0.0, r)
    return env


def _tone(freq: float, duration_s: float, level: float) -> np.ndarray:
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t) * level


def _silence(duration_s: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * duration_s))


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert float samples in -1..1 to 16-bit mono PCM WAV bytes."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_start() -> bytes:
    """Timer start: G4 then C5, short and quiet."""
    parts: list[np.ndarray] = []
    for freq in (392.00, 523.25):
        tone = _tone(freq, 0.11, 0.45)
        parts.append(tone * _envelope(len(tone), attack=120, release=900))
        parts.append(_silence(0.02))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_complete() -> bytes:
    """Session complete: C5 E5 G5 C6, last note held with an overtone."""
    notes = (523.25, 659.25, 783.99, 1046.50)
    parts: list[np.ndarray] = []
    for i, freq in enumerate(notes):
        if i == len(notes) - 1:
            tone = _tone(freq, 0.4, 0.5) + _tone(freq * 2, 0.4, 0.08)
            parts.append(tone * _envelope(len(tone), attack=80, release=int(SAMPLE_RATE * 0.25)))
        else:
            tone = _tone(freq, 0.1, 0.5)
            parts.append(tone * _envelope(len(tone), attack=60, release=400))
            parts.append(_silence(0.02))
    return _to_wav_bytes(np.concatenate(parts))


_GENERATORS: dict[str, Callable[[], bytes]] = {
    "timer_start": _generate_start,
    "session_complete": _generate_complete,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Caches and plays the chimes.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(70)
        mgr.play("session_complete")
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100)."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> None:
        """Play a sound by name.  No-op if disabled or name unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is not None:
            effect.play()

    @property
    def volume(self) -> int:
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, generate in _GENERATORS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(generate())
                logger.debug("Generated %s", path)

    def _load_effects(self) -> None:
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[name] = effect
