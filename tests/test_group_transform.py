"""
Tests for the group transform engine.

The engine fixture works on three horses at arena (-10, 0), (10, 0) and
(0, 5) on an 800 x 400 canvas: canvas (300, 200), (500, 200), (400, 250).
Their minimal enclosing circle is centered on (400, 200) with radius 100.

Verifies:
- A whole rotate/scale gesture is one undoable history entry
- Net-zero rotation leaves the group unchanged
- The bounding circle is frozen while dragging
- Selection changes reset gesture state
"""
import math
import pytest

from models.transform import Vec2
from services.group_transform import Idle, RotateSession, ScaleSession


def horse_state(document):
    return {h.id: (h.position, h.direction) for h in document.get_current_frame().horses}


def horse_by_label(document, label):
    return next(h for h in document.get_current_frame().horses if h.label == label)


# ══════════════════════════════════════════════════════════════════════════
# Bounding circle and handles
# ══════════════════════════════════════════════════════════════════════════

class TestBoundingCircle:

    def test_padded_minimal_circle(self, engine):
        circle = engine.compute_bounding_circle()
        assert circle.center.x == pytest.approx(400.0)
        assert circle.center.y == pytest.approx(200.0)
        assert circle.radius == pytest.approx(120.0)

    def test_empty_selection(self, engine, editor_state):
        editor_state.clear_selection()
        circle = engine.compute_bounding_circle()
        assert circle.center == Vec2(0.0, 0.0)
        assert circle.radius == 0.0

    def test_handle_positions(self, engine):
        handles = engine.handle_positions()
        assert handles['rotate'].y == pytest.approx(65.0)
        assert handles['scale'].x == pytest.approx(535.0)
        assert handles['distribute'].y == pytest.approx(335.0)

    def test_frozen_while_dragging(self, engine, populated_document):
        frozen = engine.get_bounding_circle()
        engine.begin_drag()
        frame = populated_document.get_current_frame()
        populated_document.update_horse(frame.id, frame.horses[0].id, {'position': Vec2(-35, -15)}, skip_history=True)

        assert engine.get_bounding_circle() == frozen
        assert engine.compute_bounding_circle() != frozen

        engine.end_drag()
        assert engine.get_bounding_circle() != frozen


# ══════════════════════════════════════════════════════════════════════════
# Rotation
# ══════════════════════════════════════════════════════════════════════════

class TestRotation:

    def test_first_sample_only_activates(self, engine, populated_document):
        before = horse_state(populated_document)
        engine.rotate_from_pointer(500, 200)
        assert isinstance(engine.state.rotate, RotateSession)
        assert horse_state(populated_document) == before

    def test_quarter_turn(self, engine, populated_document):
        engine.rotate_from_pointer(500, 200)
        engine.rotate_from_pointer(400, 300)
        assert engine.end_rotate() is True

        first = horse_by_label(populated_document, 1)
        third = horse_by_label(populated_document, 3)
        assert first.position.x == pytest.approx(0.0, abs=1e-9)
        assert first.position.y == pytest.approx(-10.0)
        assert first.direction == pytest.approx(math.pi / 2)
        assert third.position.x == pytest.approx(-5.0)
        assert third.position.y == pytest.approx(0.0, abs=1e-9)
        assert third.direction == pytest.approx(1.0 + math.pi / 2)

    def test_gesture_is_one_history_entry(self, engine, populated_document):
        before = populated_document.get_document().clone()
        engine.rotate_from_pointer(500, 200)
        for degrees in range(5, 95, 5):
            angle = math.radians(degrees)
            engine.rotate_from_pointer(400 + 100 * math.cos(angle), 200 + 100 * math.sin(angle))
        engine.end_rotate()

        assert len(populated_document.history) == 1
        assert populated_document.history.get_current_description() == "Rotate group"

        populated_document.undo()
        assert populated_document.get_document() == before

    def test_net_zero_rotation_is_identity(self, engine, populated_document):
        before = horse_state(populated_document)
        engine.rotate_from_pointer(500, 200)
        angle = math.radians(30)
        engine.rotate_from_pointer(400 + 100 * math.cos(angle), 200 + 100 * math.sin(angle))
        engine.rotate_from_pointer(500, 200)
        engine.end_rotate()

        after = horse_state(populated_document)
        for horse_id, (position, direction) in before.items():
            assert after[horse_id][0].x == pytest.approx(position.x, abs=1e-9)
            assert after[horse_id][0].y == pytest.approx(position.y, abs=1e-9)
            assert after[horse_id][1] == pytest.approx(direction, abs=1e-9)

    def test_there_and_back_keeps_negative_direction(self, engine, populated_document):
        first = horse_by_label(populated_document, 1)
        frame_id = populated_document.get_current_frame().id
        populated_document.update_horse(frame_id, first.id, {'direction': -math.pi / 2}, skip_history=True)

        engine.rotate_from_pointer(400, 100)
        engine.rotate_from_pointer(500, 150)
        engine.rotate_from_pointer(400, 100)
        engine.end_rotate()

        first = horse_by_label(populated_document, 1)
        assert first.direction == pytest.approx(-math.pi / 2)
        assert first.position.x == pytest.approx(-10.0)
        assert first.position.y == pytest.approx(0.0, abs=1e-9)

    def test_direction_is_not_wrapped(self, engine, populated_document):
        first = horse_by_label(populated_document, 1)
        frame_id = populated_document.get_current_frame().id
        populated_document.update_horse(frame_id, first.id, {'direction': 6.0}, skip_history=True)

        engine.rotate_from_pointer(500, 200)
        engine.rotate_from_pointer(400, 300)
        engine.end_rotate()

        assert horse_by_label(populated_document, 1).direction == pytest.approx(6.0 + math.pi / 2)

    def test_crossing_the_seam_takes_short_way(self, engine):
        engine.rotate_from_pointer(300, 201)   # just below the -x axis, angle near +pi
        engine.rotate_from_pointer(300, 199)   # just above it, angle near -pi
        assert abs(engine.state.rotate.total_rotation) < 0.1

    def test_release_without_movement(self, engine, populated_document):
        engine.rotate_from_pointer(500, 200)
        assert engine.end_rotate() is False
        assert len(populated_document.history) == 0
        assert isinstance(engine.state.rotate, Idle)


# ══════════════════════════════════════════════════════════════════════════
# Scale
# ══════════════════════════════════════════════════════════════════════════

class TestScale:

    def test_scale_up(self, engine, populated_document):
        engine.scale_from_pointer(500, 200)
        engine.scale_from_pointer(520, 200)
        engine.scale_from_pointer(550, 200)
        assert engine.end_scale() is True

        assert horse_by_label(populated_document, 1).position.x == pytest.approx(-15.0)
        assert horse_by_label(populated_document, 3).position.y == pytest.approx(7.5)
        # Scale leaves directions alone
        assert horse_by_label(populated_document, 3).direction == pytest.approx(1.0)
        assert len(populated_document.history) == 1

    def test_zero_initial_distance_does_not_activate(self, engine, populated_document):
        engine.scale_from_pointer(400, 200)
        assert isinstance(engine.state.scale, Idle)
        assert engine.end_scale() is False

    def test_undo_restores_every_horse(self, engine, populated_document):
        before = populated_document.get_document().clone()
        engine.scale_from_pointer(500, 200)
        engine.scale_from_pointer(450, 200)
        engine.end_scale()
        populated_document.undo()
        assert populated_document.get_document() == before


# ══════════════════════════════════════════════════════════════════════════
# Radial distribution
# ══════════════════════════════════════════════════════════════════════════

class TestRadialDistribution:

    def test_pushes_inner_horse_out(self, engine, populated_document):
        assert engine.radial_distribute() is True
        third = horse_by_label(populated_document, 3)
        assert third.position.x == pytest.approx(0.0, abs=1e-9)
        assert third.position.y == pytest.approx(10.0)
        assert third.direction == pytest.approx(0.0)
        assert len(populated_document.history) == 1

    def test_empty_selection(self, engine, editor_state, populated_document):
        editor_state.clear_selection()
        assert engine.radial_distribute() is False
        assert len(populated_document.history) == 0


# ══════════════════════════════════════════════════════════════════════════
# Selection tracking
# ══════════════════════════════════════════════════════════════════════════

class TestSelectionTracking:

    def test_same_set_keeps_session(self, engine, editor_state):
        engine.on_selection_changed()
        engine.rotate_from_pointer(500, 200)
        engine.on_selection_changed(list(reversed(editor_state.selected_horse_ids)))
        assert isinstance(engine.state.rotate, RotateSession)

    def test_new_set_resets_session(self, engine, editor_state):
        engine.on_selection_changed()
        engine.scale_from_pointer(500, 200)
        engine.on_selection_changed(editor_state.selected_horse_ids[:1])
        assert isinstance(engine.state.scale, Idle)

    def test_ignored_while_dragging(self, engine, editor_state):
        engine.on_selection_changed()
        engine.begin_drag()
        engine.rotate_from_pointer(500, 200)
        engine.on_selection_changed([])
        assert isinstance(engine.state.rotate, RotateSession)
