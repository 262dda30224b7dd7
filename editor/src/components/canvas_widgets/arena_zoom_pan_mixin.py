"""Mixin for handling zoom and pan in the arena canvas.

Provides viewport navigation including:
- Zoom in/out/reset with zoom-to-cursor
- Pan with middle mouse drag
- Stage <-> canvas coordinate mapping
"""

from PyQt5.QtCore import Qt

from constants import DEFAULT_ZOOM
from utils.coordinate_transforms import stage_to_canvas, canvas_to_stage

ZOOM_STEP = 1.25


class ArenaZoomPanMixin:
    """Mixin providing zoom and pan functionality for the arena canvas."""

    # Expected state variables (initialized in main class):
    # - editor_state: EditorState holding zoom and pan
    # - arena: ArenaDimensions of the arena inside the widget
    # - is_panning: bool
    # - last_mouse_pos: QPoint

    def zoom_in(self, cursor_pos=None):
        """Zoom in by 25%."""
        self._set_zoom_around(self.editor_state.zoom * ZOOM_STEP, cursor_pos)

    def zoom_out(self, cursor_pos=None):
        """Zoom out by 25%."""
        self._set_zoom_around(self.editor_state.zoom / ZOOM_STEP, cursor_pos)

    def zoom_reset(self):
        """Reset zoom to 100% and drop any pan."""
        self.editor_state.reset_view()
        self.update()

    def get_zoom_percent(self):
        return int(round(self.editor_state.zoom * 100))

    def _set_zoom_around(self, zoom, cursor_pos=None):
        """Change zoom keeping the arena point under the cursor fixed."""
        old_zoom = self.editor_state.zoom
        self.editor_state.set_zoom(zoom)
        new_zoom = self.editor_state.zoom
        if cursor_pos is not None and new_zoom != old_zoom:
            anchor = self.stage_to_canvas(cursor_pos.x(), cursor_pos.y())
            pan_x = cursor_pos.x() - self.arena.offset_x - anchor.x * new_zoom
            pan_y = cursor_pos.y() - self.arena.offset_y - anchor.y * new_zoom
            self.editor_state.set_pan(pan_x, pan_y)
        if new_zoom <= DEFAULT_ZOOM and cursor_pos is None:
            self.editor_state.set_pan(0.0, 0.0)
        self.update()

    # ========================================
    # Coordinate mapping
    # ========================================

    def stage_to_canvas(self, x, y):
        """Widget pixels to arena canvas pixels."""
        pan = self.editor_state.pan
        return stage_to_canvas(x, y, self.arena.offset_x, self.arena.offset_y,
                               self.editor_state.zoom, pan.x, pan.y)

    def canvas_to_stage(self, x, y):
        """Arena canvas pixels to widget pixels."""
        pan = self.editor_state.pan
        return canvas_to_stage(x, y, self.arena.offset_x, self.arena.offset_y,
                               self.editor_state.zoom, pan.x, pan.y)

    # ========================================
    # Mouse Event Handlers
    # ========================================

    def wheelEvent(self, event):
        """Handle mouse wheel for zoom."""
        delta = event.angleDelta().y()
        if delta > 0:
            self.zoom_in(event.pos())
        elif delta < 0:
            self.zoom_out(event.pos())

    def _handle_pan_mouse_press(self, event):
        """Handle mouse press for panning. Returns True if event was handled."""
        if event.button() == Qt.MiddleButton:
            self.is_panning = True
            self.last_mouse_pos = event.globalPos()
            self.setCursor(Qt.ClosedHandCursor)
            return True
        return False

    def _handle_pan_mouse_move(self, event):
        """Handle mouse move for panning. Returns True if event was handled."""
        if self.is_panning and self.last_mouse_pos:
            delta = event.globalPos() - self.last_mouse_pos
            self.last_mouse_pos = event.globalPos()
            pan = self.editor_state.pan
            self.editor_state.set_pan(pan.x + delta.x(), pan.y + delta.y())
            self.update()
            return True
        return False

    def _handle_pan_mouse_release(self, event):
        """Handle mouse release for panning. Returns True if event was handled."""
        if event.button() == Qt.MiddleButton and self.is_panning:
            self.is_panning = False
            self.last_mouse_pos = None
            self.setCursor(Qt.ArrowCursor)
            return True
        return False
