"""
Tests for gait speeds, direction arrows and movement-based frame duration.
"""
import math
import pytest

from models.frame import Frame
from models.gait import Gait
from services.kinematics import (
    gait_speed, arrow_length, arrow_end_position, gait_from_arrow_length,
    snap_angle_to_45, direction_and_gait_from_drag, max_distance_moved,
    effective_speed, compute_duration_from_movement
)
from conftest import make_horse

HORSE_LENGTH = 2.7


# ══════════════════════════════════════════════════════════════════════════
# Gaits
# ══════════════════════════════════════════════════════════════════════════

class TestGaits:

    @pytest.mark.parametrize("gait,speed", [
        (Gait.WALK, 1.0),
        (Gait.TROT, 2.0),
        (Gait.CANTER, 3.0),
        ('trot', 2.0),
    ])
    def test_gait_speed(self, gait, speed):
        assert gait_speed(gait) == speed

    def test_gait_order(self):
        assert Gait.WALK < Gait.TROT < Gait.CANTER
        assert sorted([Gait.CANTER, Gait.WALK, Gait.TROT]) == [Gait.WALK, Gait.TROT, Gait.CANTER]

    def test_parse_rejects_unknown_gait(self):
        with pytest.raises(ValueError, match="gallop"):
            Gait.parse("gallop")

    @pytest.mark.parametrize("gait,multiplier", [
        (Gait.WALK, 1.0),
        (Gait.TROT, 1.5),
        (Gait.CANTER, 2.0),
    ])
    def test_arrow_length(self, gait, multiplier):
        assert arrow_length(gait, HORSE_LENGTH) == pytest.approx(HORSE_LENGTH * multiplier)

    def test_arrow_tip_starts_at_horse_nose(self):
        x, y = arrow_end_position(Gait.WALK, 10.0)
        assert (x, y) == (15.0, 0.0)


# ══════════════════════════════════════════════════════════════════════════
# Arrow drag
# ══════════════════════════════════════════════════════════════════════════

class TestArrowDrag:

    @pytest.mark.parametrize("length_in_horses,gait", [
        (1.0, Gait.WALK),
        (1.24, Gait.WALK),
        (1.25, Gait.TROT),
        (1.5, Gait.TROT),
        (1.75, Gait.CANTER),
        (3.0, Gait.CANTER),
    ])
    def test_gait_from_arrow_length(self, length_in_horses, gait):
        assert gait_from_arrow_length(length_in_horses * HORSE_LENGTH, HORSE_LENGTH) == gait

    def test_drag_straight_ahead_keeps_direction(self):
        direction, gait = direction_and_gait_from_drag(HORSE_LENGTH, 0.0, 1.0, HORSE_LENGTH)
        assert direction == pytest.approx(1.0)
        assert gait == Gait.WALK

    def test_drag_sideways_turns_horse(self):
        # +y local is a quarter turn clockwise on screen (y-down)
        direction, gait = direction_and_gait_from_drag(0.0, 2 * HORSE_LENGTH, 0.0, HORSE_LENGTH)
        assert direction == pytest.approx(math.pi / 2)
        assert gait == Gait.CANTER

    def test_drag_with_snap(self):
        direction, _ = direction_and_gait_from_drag(1.0, 0.9, 0.0, HORSE_LENGTH, snap_to_45=True)
        assert direction == pytest.approx(math.pi / 4)

    def test_snap_wraps_to_zero(self):
        assert snap_angle_to_45(math.radians(350)) == pytest.approx(0.0)


# ══════════════════════════════════════════════════════════════════════════
# Movement-based duration
# ══════════════════════════════════════════════════════════════════════════

class TestFrameDuration:

    def _frames(self, distance, speed=None, multiplier=None):
        first = Frame(id='f1', index=0, duration=5.0, horses=[make_horse('a', 1, 0.0, 0.0)],
                      speed=speed, speed_multiplier=multiplier)
        second = Frame(id='f2', index=1, duration=5.0, horses=[make_horse('b', 1, distance, 0.0)])
        return first, second

    def test_matches_horses_by_label(self):
        first, second = self._frames(12.0)
        assert max_distance_moved(first, second) == pytest.approx(12.0)

    def test_no_matching_labels(self):
        first = Frame(id='f1', index=0, horses=[make_horse('a', 1, 0, 0)])
        second = Frame(id='f2', index=1, horses=[make_horse('b', 2, 30, 0)])
        assert max_distance_moved(first, second) == 0.0

    def test_effective_speed_defaults_to_walk(self):
        first, _ = self._frames(0.0)
        assert effective_speed(first) == 1.0

    def test_effective_speed_with_multiplier(self):
        first, _ = self._frames(0.0, speed=Gait.TROT, multiplier=1.5)
        assert effective_speed(first) == pytest.approx(3.0)

    def test_duration_is_distance_over_speed(self):
        first, second = self._frames(12.0, speed=Gait.TROT)
        assert compute_duration_from_movement(first, second) == pytest.approx(6.0)

    @pytest.mark.parametrize("distance,expected", [
        (0.1, 0.5),
        (1000.0, 120.0),
    ])
    def test_duration_is_clamped(self, distance, expected):
        first, second = self._frames(distance)
        assert compute_duration_from_movement(first, second) == expected

    def test_last_frame_keeps_duration(self):
        first, _ = self._frames(10.0)
        assert compute_duration_from_movement(first, None) == 5.0

    def test_zero_speed_keeps_duration(self):
        first, second = self._frames(10.0, multiplier=0.0)
        assert compute_duration_from_movement(first, second) == 5.0
