"""
Tests for playback interpolation and the playback state machine.
"""
import math
import pytest

from models.transform import Vec2
from services.playback import (
    lerp, lerp_angle, get_frame_interpolation, get_interpolated_horses,
    snap_playback_speed, PlaybackController, PlaybackState
)


class FakeClock:
    """External time source standing in for an audio track"""

    def __init__(self):
        self.time = 0.0
        self.seeks = []

    def current_time(self):
        return self.time

    def seek(self, seconds):
        self.seeks.append(seconds)
        self.time = seconds


@pytest.fixture
def controller(two_frame_drill):
    changes = []
    playback = PlaybackController(lambda: two_frame_drill, on_frame_change=changes.append)
    playback.frame_changes = changes
    return playback


# ══════════════════════════════════════════════════════════════════════════
# Interpolation
# ══════════════════════════════════════════════════════════════════════════

class TestInterpolation:

    def test_lerp(self):
        assert lerp(2.0, 4.0, 0.25) == 2.5

    def test_lerp_angle_short_way(self):
        result = lerp_angle(math.radians(350), math.radians(10), 0.5)
        assert min(result, 2 * math.pi - result) == pytest.approx(0.0, abs=1e-9)

    def test_lerp_angle_quarter(self):
        assert lerp_angle(0.0, math.pi / 2, 0.5) == pytest.approx(math.pi / 4)

    @pytest.mark.parametrize("time,expected", [
        (0.0, (0, 1, 0.0)),
        (2.5, (0, 1, 0.5)),
        (5.0, (1, None, 0.0)),
        (7.5, (1, None, 0.5)),
        (10.0, (1, None, 1.0)),
        (-2.0, (0, 1, 0.0)),
    ])
    def test_frame_interpolation(self, two_frame_drill, time, expected):
        result = get_frame_interpolation(two_frame_drill.frames, time)
        assert (result.frame_index, result.next_frame_index) == expected[:2]
        assert result.t == pytest.approx(expected[2])

    def test_empty_and_single_frame(self, two_frame_drill):
        assert get_frame_interpolation([], 1.0) is None
        single = get_frame_interpolation(two_frame_drill.frames[:1], 3.0)
        assert tuple(single) == (0, None, 0.0)

    def test_horses_halfway(self, two_frame_drill):
        horses = get_interpolated_horses(two_frame_drill.frames, 2.5)
        moving = next(h for h in horses if h.label == 1)
        still = next(h for h in horses if h.label == 2)
        assert moving.position == Vec2(5.0, 0.0)
        assert still.position == Vec2(-10.0, 5.0)

    def test_unmatched_horse_holds_still(self, two_frame_drill):
        two_frame_drill.frames[1].horses.pop()
        horses = get_interpolated_horses(two_frame_drill.frames, 2.5)
        assert next(h for h in horses if h.label == 2).position == Vec2(-10.0, 5.0)

    def test_interpolation_does_not_touch_frames(self, two_frame_drill):
        get_interpolated_horses(two_frame_drill.frames, 2.5)
        assert two_frame_drill.frames[0].horses[0].position == Vec2(0.0, 0.0)

    @pytest.mark.parametrize("requested,snapped", [
        (0.4, 0.5), (1.2, 1.0), (1.3, 1.5), (5.0, 2.0),
    ])
    def test_snap_playback_speed(self, requested, snapped):
        assert snap_playback_speed(requested) == snapped


# ══════════════════════════════════════════════════════════════════════════
# State machine
# ══════════════════════════════════════════════════════════════════════════

class TestPlaybackController:

    def test_starts_stopped(self, controller):
        assert controller.state == PlaybackState.STOPPED
        assert controller.total_duration == 10.0

    def test_advance_only_while_playing(self, controller):
        controller.advance(1.0)
        assert controller.current_time == 0.0
        controller.play()
        controller.advance(1.0)
        assert controller.current_time == pytest.approx(1.0)

    def test_playback_speed_scales_time(self, controller):
        controller.set_playback_speed(2.0)
        controller.play()
        controller.advance(1.0)
        assert controller.current_time == pytest.approx(2.0)

    def test_frame_change_callback(self, controller):
        controller.play()
        controller.advance(4.0)
        assert controller.frame_changes == []
        controller.advance(2.0)
        assert controller.frame_changes == [1]
        assert controller.current_frame_index == 1

    def test_reaching_end_stops_at_total(self, controller):
        controller.play()
        controller.advance(25.0)
        assert controller.state == PlaybackState.STOPPED
        assert controller.current_time == 10.0

    def test_play_after_end_restarts(self, controller):
        controller.play()
        controller.advance(25.0)
        controller.play()
        assert controller.current_time == 0.0
        assert controller.is_playing

    def test_pause_and_resume(self, controller):
        controller.play()
        controller.advance(3.0)
        controller.pause()
        controller.advance(3.0)
        assert controller.state == PlaybackState.PAUSED
        assert controller.current_time == pytest.approx(3.0)
        controller.toggle()
        assert controller.is_playing
        assert controller.current_time == pytest.approx(3.0)

    def test_stop_rewinds(self, controller):
        controller.play()
        controller.advance(6.0)
        controller.stop()
        assert controller.current_time == 0.0
        assert controller.current_frame_index == 0

    def test_seek_clamps_negative(self, controller):
        controller.seek(-4.0)
        assert controller.current_time == 0.0
        controller.seek(7.0)
        assert controller.current_frame_index == 1

    def test_interpolated_horses_follow_time(self, controller):
        controller.seek(2.5)
        moving = next(h for h in controller.interpolated_horses() if h.label == 1)
        assert moving.position.x == pytest.approx(5.0)

    def test_empty_drill_does_not_play(self):
        playback = PlaybackController(lambda: None)
        playback.play()
        assert playback.state == PlaybackState.STOPPED

    def test_listeners_notified(self, controller):
        calls = []
        controller.add_listener(lambda: calls.append(controller.state))
        controller.play()
        controller.pause()
        assert calls == [PlaybackState.PLAYING, PlaybackState.PAUSED]


# ══════════════════════════════════════════════════════════════════════════
# External clock
# ══════════════════════════════════════════════════════════════════════════

class TestExternalClock:

    def test_sync_reads_clock_minus_offset(self, controller):
        clock = FakeClock()
        controller.attach_clock(clock, offset=2.0)
        controller.play()
        assert clock.seeks == [2.0]
        clock.time = 5.5
        controller.sync_from_clock()
        assert controller.current_time == pytest.approx(3.5)

    def test_seek_moves_clock(self, controller):
        clock = FakeClock()
        controller.attach_clock(clock, offset=1.0)
        controller.seek(4.0)
        assert clock.time == pytest.approx(5.0)

    def test_sync_ignored_when_not_playing(self, controller):
        clock = FakeClock()
        controller.attach_clock(clock)
        clock.time = 4.0
        controller.sync_from_clock()
        assert controller.current_time == 0.0

    def test_detach(self, controller):
        clock = FakeClock()
        controller.attach_clock(clock)
        controller.detach_clock()
        controller.seek(3.0)
        assert clock.seeks == []
