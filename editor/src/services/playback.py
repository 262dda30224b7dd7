"""
Drill Team Choreographer - Playback

Interpolates horses between adjacent frames for a given time and drives
a stopped/playing/paused state machine over a shared current time.

Horses are matched across frames by label (ids change when frames are
copied). A horse present only in the earlier frame holds still; a horse
present only in the later frame is not shown until its frame begins.
"""

import logging
from enum import Enum
from typing import Callable, List, NamedTuple, Optional

from constants import PLAYBACK_SPEEDS, DEFAULT_PLAYBACK_SPEED
from models.transform import Vec2
from utils.geometry import normalize_angle, wrap_angle


def lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


def lerp_point(start, end, t: float) -> Vec2:
    return Vec2(lerp(start.x, end.x, t), lerp(start.y, end.y, t))


def lerp_angle(start: float, end: float, t: float) -> float:
    """Interpolate along the shortest arc, result in [0, 2pi)"""
    start_norm = normalize_angle(start)
    diff = wrap_angle(normalize_angle(end) - start_norm)
    return normalize_angle(start_norm + diff * t)


class FrameInterpolation(NamedTuple):
    frame_index: int
    next_frame_index: Optional[int]
    t: float


def get_frame_interpolation(frames, time: float) -> Optional[FrameInterpolation]:
    """Locate the frame pair bracketing time

    Returns:
        None for an empty drill. A single frame gives (0, None, 0). Time
        past the end gives (last, None, 1).
    """
    if not frames:
        return None
    if len(frames) == 1:
        return FrameInterpolation(0, None, 0.0)

    time = max(0.0, time)
    for i, frame in enumerate(frames):
        if frame.timestamp <= time < frame.timestamp + frame.duration:
            t = (time - frame.timestamp) / frame.duration if frame.duration > 0 else 0.0
            next_index = i + 1 if i < len(frames) - 1 else None
            return FrameInterpolation(i, next_index, max(0.0, min(1.0, t)))

    return FrameInterpolation(len(frames) - 1, None, 1.0)


def interpolate_horse(from_horse, to_horse, t: float):
    """Horse part-way between two frames (gait and flags from the earlier frame)"""
    return from_horse.clone(
        position=lerp_point(from_horse.position, to_horse.position, t),
        direction=lerp_angle(from_horse.direction, to_horse.direction, t),
    )


def get_interpolated_horses(frames, time: float) -> List:
    """Horses as they stand at time"""
    interpolation = get_frame_interpolation(frames, time)
    if interpolation is None:
        return []

    frame = frames[interpolation.frame_index]
    if interpolation.next_frame_index is None:
        return [h.clone() for h in frame.horses]

    next_frame = frames[interpolation.next_frame_index]
    by_label = {str(h.label): h for h in next_frame.horses}
    horses = []
    for horse in frame.horses:
        match = by_label.get(str(horse.label))
        if match is None:
            horses.append(horse.clone())
        else:
            horses.append(interpolate_horse(horse, match, interpolation.t))
    return horses


def snap_playback_speed(speed: float) -> float:
    """Closest supported playback speed"""
    best = PLAYBACK_SPEEDS[0]
    for candidate in PLAYBACK_SPEEDS:
        if abs(candidate - speed) < abs(best - speed):
            best = candidate
    return best


class PlaybackState(Enum):
    STOPPED = 'stopped'
    PLAYING = 'playing'
    PAUSED = 'paused'


class PlaybackController:
    """Advances the current time across frames

    Time can come from real-time ticks (advance) or from an attached
    external clock such as an audio track (sync_from_clock). The clock
    must provide current_time() and seek(seconds).
    """

    def __init__(self, get_drill: Callable, on_frame_change: Callable[[int], None] = None):
        """
        Args:
            get_drill: Returns the drill being played (or None)
            on_frame_change: Called with the frame index whenever playback
                moves into a different frame
        """
        self._get_drill = get_drill
        self._on_frame_change = on_frame_change
        self.state = PlaybackState.STOPPED
        self.current_time = 0.0
        self.playback_speed = DEFAULT_PLAYBACK_SPEED
        self.current_frame_index = 0
        self._clock = None
        self._clock_offset = 0.0
        self._listeners = []
        self._logger = logging.getLogger('Playback')

    # ========================================
    # Queries
    # ========================================

    def _frames(self):
        drill = self._get_drill()
        return drill.frames if drill is not None else []

    @property
    def total_duration(self) -> float:
        return sum(frame.duration for frame in self._frames())

    @property
    def is_playing(self) -> bool:
        return self.state == PlaybackState.PLAYING

    def interpolated_horses(self):
        return get_interpolated_horses(self._frames(), self.current_time)

    # ========================================
    # State machine
    # ========================================

    def play(self):
        if self.state == PlaybackState.PLAYING or not self._frames():
            return
        if self.state == PlaybackState.STOPPED and self.current_time >= self.total_duration:
            self.current_time = 0.0
        self.state = PlaybackState.PLAYING
        if self._clock is not None:
            self._clock.seek(self.current_time + self._clock_offset)
        self._logger.info(f"Play from {self.current_time:.2f}s at x{self.playback_speed}")
        self._notify_listeners()

    def pause(self):
        if self.state != PlaybackState.PLAYING:
            return
        self.state = PlaybackState.PAUSED
        self._logger.info(f"Paused at {self.current_time:.2f}s")
        self._notify_listeners()

    def toggle(self):
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def stop(self):
        """Stop and rewind to the start"""
        self.state = PlaybackState.STOPPED
        self.current_time = 0.0
        if self._clock is not None:
            self._clock.seek(self._clock_offset)
        self._update_frame_index()
        self._logger.info("Stopped")
        self._notify_listeners()

    def seek(self, time: float):
        """Scrub to time (seconds). Works in any state."""
        self.current_time = max(0.0, float(time))
        if self._clock is not None:
            self._clock.seek(self.current_time + self._clock_offset)
        self._update_frame_index()
        self._notify_listeners()

    def set_playback_speed(self, speed: float):
        self.playback_speed = snap_playback_speed(speed)
        self._notify_listeners()

    # ========================================
    # Time sources
    # ========================================

    def advance(self, delta_seconds: float):
        """Move time forward by a real-time tick, scaled by playback speed"""
        if self.state != PlaybackState.PLAYING:
            return
        self._move_to(self.current_time + delta_seconds * self.playback_speed)

    def attach_clock(self, clock, offset: float = 0.0):
        """Follow an external clock; drill time = clock time - offset"""
        self._clock = clock
        self._clock_offset = offset

    def detach_clock(self):
        self._clock = None
        self._clock_offset = 0.0

    def sync_from_clock(self):
        if self._clock is None or self.state != PlaybackState.PLAYING:
            return
        self._move_to(max(0.0, self._clock.current_time() - self._clock_offset))

    def _move_to(self, time: float):
        total = self.total_duration
        if time >= total:
            self.current_time = total
            self.state = PlaybackState.STOPPED
            self._update_frame_index()
            self._logger.info("Reached end of drill")
        else:
            self.current_time = time
            self._update_frame_index()
        self._notify_listeners()

    def _update_frame_index(self):
        frames = self._frames()
        if not frames:
            return
        index = len(frames) - 1
        for i, frame in enumerate(frames):
            if frame.timestamp <= self.current_time < frame.timestamp + frame.duration:
                index = i
                break
        if index != self.current_frame_index:
            self.current_frame_index = index
            if self._on_frame_change is not None:
                self._on_frame_change(index)

    # ========================================
    # Listeners
    # ========================================

    def add_listener(self, callback):
        """Call callback() after every time or state change"""
        self._listeners.append(callback)

    def _notify_listeners(self):
        for callback in list(self._listeners):
            try:
                callback()
            except Exception as e:
                self._logger.warning(f"Error notifying listener: {e}")
