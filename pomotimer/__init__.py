"""PomoTimer: a Pomodoro session engine and tray plugin."""

__version__ = "0.1.0"
