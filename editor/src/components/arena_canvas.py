"""Arena canvas - the editable view of the current frame.

Mouse and touch input is mapped from widget (stage) pixels to canvas
pixels and handed to the InteractionController; the canvas itself only
paints and routes events.
"""

import logging

from PyQt5.QtCore import Qt, QEvent, pyqtSignal
from PyQt5.QtWidgets import QWidget

from components.canvas_widgets.arena_rendering_mixin import ArenaRenderingMixin
from components.canvas_widgets.arena_zoom_pan_mixin import ArenaZoomPanMixin
from models.transform import Vec2
from utils.coordinate_transforms import calculate_arena_dimensions


class ArenaCanvas(ArenaRenderingMixin, ArenaZoomPanMixin, QWidget):
    """Arena widget drawing horses and routing pointer input"""

    view_changed = pyqtSignal()

    def __init__(self, document, editor_state, engine, controller, playback=None, parent=None):
        super().__init__(parent)
        self.document = document
        self.editor_state = editor_state
        self.engine = engine
        self.controller = controller
        self.playback = playback

        self.arena = calculate_arena_dimensions(800, 480)
        self.is_panning = False
        self.last_mouse_pos = None
        self._logger = logging.getLogger('ArenaCanvas')

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setAttribute(Qt.WA_AcceptTouchEvents)
        self.setMinimumSize(400, 260)

        self.document.add_listener(self.update)
        self.editor_state.add_selection_listener(lambda ids: self.update())
        if self.playback is not None:
            self.playback.add_listener(self.update)

    def _is_playing(self):
        return self.playback is not None and self.playback.is_playing

    def visible_horses(self):
        """Interpolated horses while playing, else the current frame's"""
        if self.playback is not None and self.playback.is_playing:
            return self.playback.interpolated_horses()
        frame = self.document.get_current_frame()
        return list(frame.horses) if frame is not None else []

    def resizeEvent(self, event):
        self.arena = calculate_arena_dimensions(self.width(), self.height())
        self.engine.set_canvas_size(self.arena.width, self.arena.height)
        super().resizeEvent(event)

    # ========================================
    # Mouse
    # ========================================

    def _event_canvas_pos(self, event):
        return self.stage_to_canvas(event.pos().x(), event.pos().y())

    def mousePressEvent(self, event):
        if self._handle_pan_mouse_press(event):
            return
        if event.button() != Qt.LeftButton:
            return
        pos = self._event_canvas_pos(event)
        modifiers = event.modifiers()
        additive = bool(modifiers & (Qt.ControlModifier | Qt.MetaModifier))
        snap = bool(modifiers & Qt.ShiftModifier)
        self.controller.pointer_down(pos.x, pos.y, additive=additive, snap=snap)
        self.update()

    def mouseMoveEvent(self, event):
        if self._handle_pan_mouse_move(event):
            return
        pos = self._event_canvas_pos(event)
        if self.controller.drag is not None:
            self.controller.pointer_move(pos.x, pos.y)
            self.update()
        else:
            self._update_hover_cursor(pos)

    def mouseReleaseEvent(self, event):
        if self._handle_pan_mouse_release(event):
            return
        if event.button() != Qt.LeftButton:
            return
        pos = self._event_canvas_pos(event)
        self.controller.pointer_up(pos.x, pos.y)
        self.update()

    def _update_hover_cursor(self, pos):
        handle = self.controller.group_handle_at(pos.x, pos.y)
        if handle is not None:
            self.setCursor(handle.get_cursor())
        elif self.controller.arrow_at(pos.x, pos.y) is not None:
            self.setCursor(Qt.CrossCursor)
        elif self.controller.horse_at(pos.x, pos.y) is not None:
            self.setCursor(Qt.OpenHandCursor)
        else:
            self.setCursor(Qt.ArrowCursor)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape:
            self.controller.cancel()
            self.update()
            return
        super().keyPressEvent(event)

    # ========================================
    # Touch
    # ========================================

    def event(self, event):
        if event.type() in (QEvent.TouchBegin, QEvent.TouchUpdate, QEvent.TouchEnd, QEvent.TouchCancel):
            self._handle_touch(event)
            event.accept()
            return True
        return super().event(event)

    def _handle_touch(self, event):
        points = [
            Vec2(p.pos().x(), p.pos().y())
            for p in event.touchPoints()
            if p.state() != Qt.TouchPointReleased
        ]
        to_canvas = lambda p: self.stage_to_canvas(p.x, p.y)
        offset = Vec2(self.arena.offset_x, self.arena.offset_y)

        if event.type() == QEvent.TouchCancel:
            self.controller.cancel()
            self.controller.pinch = None
        elif event.type() == QEvent.TouchEnd or len(points) < len(event.touchPoints()):
            self.controller.touch_end(points)
        elif event.type() == QEvent.TouchBegin or event.touchPointStates() & Qt.TouchPointPressed:
            self.controller.touch_begin(points, to_canvas=to_canvas)
        else:
            self.controller.touch_update(points, offset=offset, to_canvas=to_canvas)
        self.update()
        self.view_changed.emit()
