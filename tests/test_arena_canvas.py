"""
Widget tests for the arena canvas and the main window (offscreen Qt).

An 840x480 canvas fits an 800x400 arena at offset (20, 20), so stage
pixels are canvas pixels shifted by 20 at zoom 1.
"""
import json
import pytest
from PyQt5.QtCore import Qt, QPoint

from components.arena_canvas import ArenaCanvas
from components.interaction_controller import InteractionController
from services.file_operations import save_drill_to_file
from services.playback import PlaybackController


@pytest.fixture
def canvas(qtbot, populated_document, editor_state, engine):
    editor_state.clear_selection()
    playback = PlaybackController(populated_document.get_document)
    controller = InteractionController(populated_document, editor_state, engine, playback)
    widget = ArenaCanvas(populated_document, editor_state, engine, controller, playback)
    qtbot.addWidget(widget)
    widget.resize(840, 480)
    widget.show()
    qtbot.waitExposed(widget)
    return widget


# ══════════════════════════════════════════════════════════════════════════
# Arena canvas
# ══════════════════════════════════════════════════════════════════════════

class TestArenaCanvas:

    def test_resize_updates_engine_canvas(self, canvas, engine):
        assert canvas.arena.offset_x == pytest.approx(20.0)
        assert engine.canvas_width == pytest.approx(800.0)
        assert engine.canvas_height == pytest.approx(400.0)

    def test_click_selects_horse(self, qtbot, canvas, editor_state, populated_document):
        first = populated_document.get_current_frame().horses[0]
        qtbot.mouseClick(canvas, Qt.LeftButton, pos=QPoint(320, 220))
        assert editor_state.selected_horse_ids == [first.id]

    def test_ctrl_click_adds_to_selection(self, qtbot, canvas, editor_state):
        qtbot.mouseClick(canvas, Qt.LeftButton, pos=QPoint(320, 220))
        qtbot.mouseClick(canvas, Qt.LeftButton, Qt.ControlModifier, QPoint(520, 220))
        assert len(editor_state.selected_horse_ids) == 2

    def test_zoom_keeps_point_under_cursor(self, canvas, editor_state):
        canvas.zoom_in(QPoint(420, 220))
        assert editor_state.zoom == pytest.approx(1.25)
        anchor = canvas.stage_to_canvas(420, 220)
        assert anchor.x == pytest.approx(400.0)
        assert anchor.y == pytest.approx(200.0)
        assert canvas.get_zoom_percent() == 125

    def test_zoom_reset(self, canvas, editor_state):
        canvas.zoom_in(QPoint(100, 100))
        canvas.zoom_reset()
        assert editor_state.zoom == 1.0
        assert (editor_state.pan.x, editor_state.pan.y) == (0.0, 0.0)

    def test_zoom_is_clamped(self, canvas, editor_state):
        for _ in range(10):
            canvas.zoom_in()
        assert editor_state.zoom == 3.0

    def test_escape_cancels_drag(self, qtbot, canvas, populated_document):
        canvas.controller.pointer_down(300, 200)
        canvas.controller.pointer_move(350, 200)
        qtbot.keyClick(canvas, Qt.Key_Escape)
        assert canvas.controller.drag is None
        assert populated_document.get_current_frame().horses[0].position.x == pytest.approx(-10.0)

    def test_visible_horses_follow_playback(self, canvas, populated_document):
        assert len(canvas.visible_horses()) == 3
        canvas.playback.play()
        assert len(canvas.visible_horses()) == 3
        canvas.playback.stop()

    def test_paint_with_group_selected(self, canvas, editor_state, populated_document):
        editor_state.set_selection([h.id for h in populated_document.get_current_frame().horses])
        canvas.repaint()


# ══════════════════════════════════════════════════════════════════════════
# Main window
# ══════════════════════════════════════════════════════════════════════════

class TestDrillEditorWindow:

    @pytest.fixture
    def window(self, qtbot, tmp_path):
        from main import DrillEditor
        editor = DrillEditor(config_dir=str(tmp_path / 'config'))
        qtbot.addWidget(editor)
        return editor

    def test_starts_with_one_empty_frame(self, window):
        drill = window.document.get_document()
        assert len(drill.frames) == 1
        assert not window.history_manager.can_undo()
        assert "Drill Team Choreographer" in window.windowTitle()

    def test_load_file(self, window, two_frame_drill, tmp_path):
        path = str(tmp_path / 'quadrille.drill.json')
        save_drill_to_file(two_frame_drill, path)

        window.file_actions.load_file(path)

        assert window.document.get_document().name == 'Quadrille'
        assert window.current_file == path
        assert window.recent_files[0] == path
        assert 'quadrille.drill.json' in window.windowTitle()
        assert not window.history_manager.can_undo()

    def test_save_writes_file_and_config(self, window, tmp_path):
        path = str(tmp_path / 'saved.drill.json')
        window.file_actions._save_to_file(path)
        window._save_config()

        with open(path, encoding='utf-8') as f:
            assert json.load(f)['format'] == 'drill-json'
        with open(window.config_file, encoding='utf-8') as f:
            assert json.load(f)['recent_files'] == [path]

    def test_undo_refused_while_playing(self, window):
        frame = window.document.get_current_frame()
        window.document.set_frame_duration(frame.id, 8.0)
        window.playback.play()
        window.undo()
        assert window.document.get_current_frame().duration == 8.0
        window.playback.stop()
        window.undo()
        assert window.document.get_current_frame().duration != 8.0
