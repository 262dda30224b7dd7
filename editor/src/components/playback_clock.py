"""Real-time driver for the playback controller"""

import time

from PyQt5.QtCore import QObject, QTimer

from constants import PLAYBACK_TICK_MS


class PlaybackClock(QObject):
    """Ticks a PlaybackController with wall-clock deltas while it plays"""

    def __init__(self, playback, parent=None):
        super().__init__(parent)
        self.playback = playback
        self._last_tick = None
        self.timer = QTimer(self)
        self.timer.setInterval(PLAYBACK_TICK_MS)
        self.timer.timeout.connect(self._tick)
        self.playback.add_listener(self._on_playback_changed)

    def _on_playback_changed(self):
        if self.playback.is_playing and not self.timer.isActive():
            self._last_tick = time.monotonic()
            self.timer.start()
        elif not self.playback.is_playing and self.timer.isActive():
            self.timer.stop()
            self._last_tick = None

    def _tick(self):
        now = time.monotonic()
        delta = now - self._last_tick if self._last_tick is not None else 0.0
        self._last_tick = now
        self.playback.advance(delta)
