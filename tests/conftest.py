"""
Shared fixtures for Drill Team Choreographer tests.

Provides reusable drills, a fresh document store, editor state and a
group transform engine bound to an 800x400 canvas.
"""
import sys
import os
import pytest

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))

# Widget tests run without a display
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

from models.document import DrillDocument
from models.drill import Drill
from models.editor_state import EditorState
from models.frame import Frame
from models.gait import Gait
from models.horse import Horse
from models.transform import Vec2
from services.group_transform import GroupTransformEngine


CANVAS_WIDTH = 800
CANVAS_HEIGHT = 400


# ── Sample drills ───────────────────────────────────────────────────────

def make_horse(horse_id, label, x, y, direction=0.0, speed=Gait.WALK):
    return Horse(id=horse_id, label=label, position=Vec2(x, y), direction=direction, speed=speed)


def make_two_frame_drill():
    """Two 5 s frames; horse 1 walks 10 m along +x, horse 2 stands still"""
    first = Frame(id='f1', index=0, duration=5.0, horses=[
        make_horse('a1', 1, 0.0, 0.0),
        make_horse('a2', 2, -10.0, 5.0),
    ])
    second = Frame(id='f2', index=1, duration=5.0, horses=[
        make_horse('b1', 1, 10.0, 0.0),
        make_horse('b2', 2, -10.0, 5.0),
    ])
    drill = Drill(id='drill-1', name='Quadrille', frames=[first, second])
    drill.recompute_timestamps()
    return drill


@pytest.fixture
def two_frame_drill():
    """Drill with two frames and two horses matched by label"""
    return make_two_frame_drill()


@pytest.fixture
def document():
    """Fresh document with one empty frame"""
    doc = DrillDocument()
    doc.create_new_drill("Test Drill")
    return doc


@pytest.fixture
def editor_state():
    return EditorState()


@pytest.fixture
def populated_document(document):
    """Document whose first frame holds three horses; history starts empty"""
    frame = document.get_current_frame()
    document.add_horse(frame.id, Vec2(-10.0, 0.0))
    document.add_horse(frame.id, Vec2(10.0, 0.0))
    document.add_horse(frame.id, Vec2(0.0, 5.0), direction=1.0)
    document.history.clear()
    return document


@pytest.fixture
def engine(populated_document, editor_state):
    """Group transform engine over the populated document, all horses selected"""
    frame = populated_document.get_current_frame()
    editor_state.set_selection([h.id for h in frame.horses])
    return GroupTransformEngine(
        get_frame=populated_document.get_current_frame,
        get_selection=lambda: editor_state.selected_horse_ids,
        commit=lambda frame_id, updates, skip_history, description: populated_document.batch_update_horses(
            frame_id, updates, skip_history=skip_history, description=description
        ),
        canvas_width=CANVAS_WIDTH,
        canvas_height=CANVAS_HEIGHT,
    )
