"""
Tests for the Drill / Frame / Horse data model.

Verifies:
- Timestamp invariant across frame edits
- Structural clones share nothing mutable
- Frame copies with fresh ids keep labels
"""
import pytest

from models.drill import Drill
from models.frame import Frame, SubPattern
from models.horse import Horse
from models.transform import Vec2
from conftest import make_horse


def assert_timestamps_consistent(drill):
    elapsed = 0.0
    for i, frame in enumerate(drill.frames):
        assert frame.index == i
        assert frame.timestamp == pytest.approx(elapsed)
        elapsed += frame.duration


# ══════════════════════════════════════════════════════════════════════════
# Timestamp invariant
# ══════════════════════════════════════════════════════════════════════════

class TestTimestampInvariant:

    def test_new_drill_has_one_frame_at_zero(self):
        drill = Drill.create("Ride")
        assert len(drill.frames) == 1
        assert drill.frames[0].timestamp == 0.0
        assert drill.frames[0].duration == 5.0

    def test_insert_at_start(self, document):
        document.insert_frame(0, duration=5.0)
        drill = document.get_document()
        assert [f.timestamp for f in drill.frames] == [0.0, 5.0]

    def test_sequence_of_edits(self, document):
        first = document.get_current_frame()
        document.set_frame_duration(first.id, 3.0)
        document.add_frame()
        document.insert_frame(1, duration=2.5)
        document.add_frame()
        drill = document.get_document()
        document.set_frame_duration(drill.frames[2].id, 7.0)
        document.move_frame(3, 0)
        document.delete_frame(document.get_document().frames[1].id)
        assert_timestamps_consistent(document.get_document())

    def test_undo_keeps_invariant(self, document):
        document.insert_frame(0, duration=2.0)
        document.add_frame()
        document.undo()
        assert_timestamps_consistent(document.get_document())

    def test_total_duration(self, two_frame_drill):
        assert two_frame_drill.total_duration == 10.0


# ══════════════════════════════════════════════════════════════════════════
# Cloning
# ══════════════════════════════════════════════════════════════════════════

class TestCloning:

    def test_clone_is_equal_but_independent(self, two_frame_drill):
        copy = two_frame_drill.clone()
        assert copy == two_frame_drill
        copy.frames[0].horses[0].position = Vec2(30, 10)
        copy.frames[0].sub_patterns.append(SubPattern(id='sp'))
        assert two_frame_drill.frames[0].horses[0].position == Vec2(0.0, 0.0)
        assert two_frame_drill.frames[0].sub_patterns == []

    def test_horse_clone_with_changes(self):
        horse = make_horse('h', 3, 1.0, 2.0)
        moved = horse.clone(position=Vec2(5, 5))
        assert moved.id == 'h'
        assert horse.position == Vec2(1.0, 2.0)

    def test_copy_with_new_ids_keeps_labels(self):
        frame = Frame(id='f', index=0, horses=[make_horse('a', 1, 0, 0), make_horse('b', 2, 1, 1)])
        frame.sub_patterns = [SubPattern(id='sp', horse_ids=['a', 'b'])]
        frame.horses[0].sub_pattern_id = 'sp'

        copy = frame.copy_with_new_ids()

        assert copy.id != 'f'
        assert [h.label for h in copy.horses] == [1, 2]
        assert not {h.id for h in copy.horses} & {'a', 'b'}
        assert copy.sub_patterns[0].id != 'sp'
        assert copy.sub_patterns[0].horse_ids == [h.id for h in copy.horses]
        assert copy.horses[0].sub_pattern_id == copy.sub_patterns[0].id

    def test_horse_index_unknown(self):
        frame = Frame(id='f', index=0)
        with pytest.raises(ValueError, match="missing"):
            frame.horse_index('missing')


# ══════════════════════════════════════════════════════════════════════════
# Dict round trip
# ══════════════════════════════════════════════════════════════════════════

class TestDictFormat:

    def test_horse_fields_are_camel_case(self):
        horse = Horse(id='h', label=1, position=Vec2(1, 2), sub_pattern_id='sp')
        data = horse.to_dict()
        assert data['subPatternId'] == 'sp'
        assert data['speed'] == 'walk'
        assert Horse.from_dict(data) == horse

    def test_frame_optional_fields(self):
        frame = Frame(id='f', index=0, is_key_frame=True, maneuver_name="Circle left")
        data = frame.to_dict()
        assert data['isKeyFrame'] is True
        assert data['maneuverName'] == "Circle left"
        assert 'speed' not in data

    def test_drill_from_dict_rebuilds_timestamps(self, two_frame_drill):
        data = two_frame_drill.to_dict()
        data['frames'][1]['timestamp'] = 99.0
        drill = Drill.from_dict(data)
        assert drill.frames[1].timestamp == 5.0
