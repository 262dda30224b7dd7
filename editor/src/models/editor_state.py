"""Editor view state: selection, display toggles, zoom and pan."""

import logging
from typing import Callable, Iterable, List

from constants import MIN_ZOOM, MAX_ZOOM, DEFAULT_ZOOM
from models.transform import Vec2


def clamp_zoom(zoom: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


class EditorState:
    """Selection and viewport state shared by the canvas and the window"""

    def __init__(self):
        self._selected: List[str] = []
        self.show_direction_arrows = True
        self.snap_to_grid = False
        self.zoom = DEFAULT_ZOOM
        self.pan = Vec2(0.0, 0.0)
        self._selection_listeners: List[Callable[[List[str]], None]] = []
        self._logger = logging.getLogger('EditorState')

    # ========================================
    # Selection
    # ========================================

    @property
    def selected_horse_ids(self) -> List[str]:
        return list(self._selected)

    def is_selected(self, horse_id: str) -> bool:
        return horse_id in self._selected

    def set_selection(self, horse_ids: Iterable[str]):
        unique = []
        for horse_id in horse_ids:
            if horse_id not in unique:
                unique.append(horse_id)
        self._apply_selection(unique)

    def add_to_selection(self, horse_id: str):
        if horse_id not in self._selected:
            self._apply_selection(self._selected + [horse_id])

    def remove_from_selection(self, horse_id: str):
        if horse_id in self._selected:
            self._apply_selection([h for h in self._selected if h != horse_id])

    def toggle_selection(self, horse_id: str):
        if horse_id in self._selected:
            self.remove_from_selection(horse_id)
        else:
            self.add_to_selection(horse_id)

    def clear_selection(self):
        self._apply_selection([])

    def _apply_selection(self, horse_ids: List[str]):
        changed = sorted(horse_ids) != sorted(self._selected)
        self._selected = horse_ids
        if changed:
            self._logger.debug(f"Selection changed: {len(horse_ids)} horse(s)")
            for callback in list(self._selection_listeners):
                try:
                    callback(self.selected_horse_ids)
                except Exception as e:
                    self._logger.warning(f"Error notifying selection listener: {e}")

    def add_selection_listener(self, callback: Callable[[List[str]], None]):
        """Call callback(selected_ids) whenever the selected set changes"""
        self._selection_listeners.append(callback)

    def remove_selection_listener(self, callback):
        if callback in self._selection_listeners:
            self._selection_listeners.remove(callback)

    # ========================================
    # Display toggles
    # ========================================

    def toggle_direction_arrows(self):
        self.show_direction_arrows = not self.show_direction_arrows

    def toggle_snap_to_grid(self):
        self.snap_to_grid = not self.snap_to_grid

    # ========================================
    # Viewport
    # ========================================

    def set_zoom(self, zoom: float):
        self.zoom = clamp_zoom(zoom)

    def set_pan(self, x: float, y: float):
        self.pan = Vec2(x, y)

    def reset_view(self):
        self.zoom = DEFAULT_ZOOM
        self.pan = Vec2(0.0, 0.0)
