"""
Drill Team Choreographer - Group Transform Engine

Rotates, scales and radially distributes the selected horses of the
current frame as one group, driven by the bounding-circle handles.

All group math happens in canvas space about a pivot that is the center
of the minimal enclosing circle of the selected horses' canvas positions.

Gesture lifecycle (rotate and scale each have their own session):

    Idle --first pointer sample--> Active
        snapshot horse positions/directions, freeze the pivot
    Active --pointer sample--> Active
        accumulate the delta, re-apply the total transform to the
        snapshot and write it provisionally (no history)
    Active --release--> Idle
        restore the snapshot (no history), then write the final
        transform once with history so a single undo reverts it

The engine never reaches for global state: the current frame, the
selection and the write path are injected at construction.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Union

from constants import BOUNDING_CIRCLE_PADDING, HANDLE_OFFSET
from models.transform import Vec2, BoundingCircle
from services.distribution import radial_distribute
from utils.coordinate_transforms import point_to_canvas, canvas_to_point
from utils.geometry import (
    minimal_enclosing_circle, distance, rotate_point_around, scale_point_around,
    wrap_angle
)


# frame_id, {horse_id: changes}, skip_history, description
CommitFn = Callable[[str, Dict[str, dict], bool, str], None]


@dataclass
class Idle:
    """No gesture in progress"""


@dataclass
class RotateSession:
    frame_id: str
    snapshot: Dict[str, Tuple[Vec2, float]]  # horse id -> (arena position, direction)
    pivot: Vec2                              # canvas pixels
    previous_angle: float
    total_rotation: float = 0.0
    samples: int = 0


@dataclass
class ScaleSession:
    frame_id: str
    snapshot: Dict[str, Tuple[Vec2, float]]
    pivot: Vec2
    initial_distance: float
    scale: float = 1.0
    samples: int = 0


@dataclass
class GestureState:
    """Per-gesture state owned by the engine"""
    rotate: Union[Idle, RotateSession] = field(default_factory=Idle)
    scale: Union[Idle, ScaleSession] = field(default_factory=Idle)
    dragging: bool = False
    frozen_circle: Optional[BoundingCircle] = None


@dataclass(frozen=True)
class _CanvasHorse:
    id: str
    position: Vec2
    direction: float


class GroupTransformEngine:
    """Group rotate / scale / radial distribute for the current selection"""

    def __init__(self, get_frame: Callable, get_selection: Callable[[], List[str]],
                 commit: CommitFn, canvas_width: float = 800.0, canvas_height: float = 400.0):
        """
        Args:
            get_frame: Returns the frame being edited (or None)
            get_selection: Returns the selected horse ids
            commit: Writes horse updates to the document
            canvas_width, canvas_height: Arena canvas size in pixels
        """
        self._get_frame = get_frame
        self._get_selection = get_selection
        self._commit = commit
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.state = GestureState()
        self._last_selection_key = ''
        self._logger = logging.getLogger('GroupTransformEngine')

    def set_canvas_size(self, width: float, height: float):
        self.canvas_width = width
        self.canvas_height = height

    # ========================================
    # Selection helpers
    # ========================================

    def selected_horses(self):
        frame = self._get_frame()
        if frame is None:
            return []
        selected = set(self._get_selection())
        return [h for h in frame.horses if h.id in selected]

    def _to_canvas(self, point) -> Vec2:
        return point_to_canvas(point, self.canvas_width, self.canvas_height)

    def _to_arena(self, point) -> Vec2:
        return canvas_to_point(point.x, point.y, self.canvas_width, self.canvas_height)

    def _pivot(self, horses) -> BoundingCircle:
        """Minimal enclosing circle of the horses in canvas space (unpadded)"""
        return minimal_enclosing_circle(self._to_canvas(h.position) for h in horses)

    @staticmethod
    def _snapshot(horses) -> Dict[str, Tuple[Vec2, float]]:
        return {h.id: (h.position, h.direction or 0.0) for h in horses}

    # ========================================
    # Bounding circle
    # ========================================

    def compute_bounding_circle(self) -> BoundingCircle:
        """Live bounding circle of the selection, padded, in canvas pixels"""
        horses = self.selected_horses()
        if not horses:
            return BoundingCircle(Vec2(0.0, 0.0), 0.0)
        circle = self._pivot(horses)
        return BoundingCircle(circle.center, circle.radius + BOUNDING_CIRCLE_PADDING)

    def get_bounding_circle(self) -> BoundingCircle:
        """Bounding circle for handle placement

        Frozen at drag start while any drag is active so the handles do
        not chase the horses moving under them.
        """
        if self.state.dragging and self.state.frozen_circle is not None:
            return self.state.frozen_circle
        return self.compute_bounding_circle()

    def handle_positions(self, circle: BoundingCircle = None) -> Dict[str, Vec2]:
        """Canvas positions of the rotate (top), scale (right) and distribute (bottom) handles"""
        if circle is None:
            circle = self.get_bounding_circle()
        cx, cy = circle.center
        reach = circle.radius + HANDLE_OFFSET
        return {
            'rotate': Vec2(cx, cy - reach),
            'scale': Vec2(cx + reach, cy),
            'distribute': Vec2(cx, cy + reach),
        }

    @property
    def is_dragging(self) -> bool:
        return self.state.dragging

    def begin_drag(self):
        """Freeze the bounding circle for the duration of a drag"""
        self.state.frozen_circle = self.compute_bounding_circle()
        self.state.dragging = True
        self._logger.debug(f"Drag started, circle frozen at {self.state.frozen_circle}")

    def end_drag(self):
        self.state.dragging = False
        self.state.frozen_circle = None
        self._logger.debug("Drag ended")

    # ========================================
    # Rotation
    # ========================================

    def _rotated_updates(self, session: RotateSession) -> Dict[str, dict]:
        updates = {}
        for horse_id, (position, direction) in session.snapshot.items():
            rotated = rotate_point_around(self._to_canvas(position), session.pivot, session.total_rotation)
            updates[horse_id] = {
                'position': self._to_arena(rotated),
                'direction': direction + session.total_rotation,
            }
        return updates

    def rotate_from_pointer(self, pointer_x: float, pointer_y: float):
        """Feed a pointer sample (canvas pixels) while the rotate handle is held

        The first sample only starts the session. Later samples rotate the
        group by the angle swept around the frozen pivot since the previous
        sample.
        """
        session = self.state.rotate
        if isinstance(session, Idle):
            frame = self._get_frame()
            horses = self.selected_horses()
            if frame is None or not horses:
                return
            pivot = self._pivot(horses).center
            self.state.rotate = RotateSession(
                frame_id=frame.id,
                snapshot=self._snapshot(horses),
                pivot=pivot,
                previous_angle=math.atan2(pointer_y - pivot.y, pointer_x - pivot.x),
            )
            self._logger.debug(f"Rotate started for {len(horses)} horses around {pivot}")
            return

        current_angle = math.atan2(pointer_y - session.pivot.y, pointer_x - session.pivot.x)
        delta = wrap_angle(current_angle - session.previous_angle)
        session.previous_angle = current_angle
        session.total_rotation += delta
        session.samples += 1

        self._commit(session.frame_id, self._rotated_updates(session), True, "Rotate group")
        self._logger.debug(f"Rotate by {math.degrees(delta):.2f} (total {math.degrees(session.total_rotation):.2f})")

    def end_rotate(self) -> bool:
        """Finish the rotate gesture

        Returns:
            True if a rotation was committed to history
        """
        session = self.state.rotate
        self.state.rotate = Idle()
        if isinstance(session, Idle):
            return False
        if session.samples == 0:
            self._logger.debug("Rotate released without movement")
            return False

        self._restore(session)
        self._commit(session.frame_id, self._rotated_updates(session), False, "Rotate group")
        self._logger.info(f"Rotated {len(session.snapshot)} horses by {math.degrees(session.total_rotation):.2f} degrees")
        return True

    # ========================================
    # Scale
    # ========================================

    def _scaled_updates(self, session: ScaleSession) -> Dict[str, dict]:
        updates = {}
        for horse_id, (position, _direction) in session.snapshot.items():
            scaled = scale_point_around(self._to_canvas(position), session.pivot, session.scale)
            updates[horse_id] = {'position': self._to_arena(scaled)}
        return updates

    def scale_from_pointer(self, pointer_x: float, pointer_y: float):
        """Feed a pointer sample (canvas pixels) while the scale handle is held

        Scale factor is the pointer's distance from the frozen pivot divided
        by its distance at the first sample. A first sample on the pivot
        itself cannot define a ratio and is ignored.
        """
        session = self.state.scale
        if isinstance(session, Idle):
            frame = self._get_frame()
            horses = self.selected_horses()
            if frame is None or not horses:
                return
            pivot = self._pivot(horses).center
            initial_distance = math.hypot(pointer_x - pivot.x, pointer_y - pivot.y)
            if initial_distance == 0:
                return
            self.state.scale = ScaleSession(
                frame_id=frame.id,
                snapshot=self._snapshot(horses),
                pivot=pivot,
                initial_distance=initial_distance,
            )
            self._logger.debug(f"Scale started for {len(horses)} horses around {pivot}")
            return

        current_distance = math.hypot(pointer_x - session.pivot.x, pointer_y - session.pivot.y)
        session.scale = current_distance / session.initial_distance
        session.samples += 1

        self._commit(session.frame_id, self._scaled_updates(session), True, "Scale group")
        self._logger.debug(f"Scale factor {session.scale:.3f}")

    def end_scale(self) -> bool:
        """Finish the scale gesture

        Returns:
            True if a scale was committed to history
        """
        session = self.state.scale
        self.state.scale = Idle()
        if isinstance(session, Idle):
            return False
        if session.samples == 0:
            self._logger.debug("Scale released without movement")
            return False

        self._restore(session)
        self._commit(session.frame_id, self._scaled_updates(session), False, "Scale group")
        self._logger.info(f"Scaled {len(session.snapshot)} horses by {session.scale:.3f}")
        return True

    def _restore(self, session: Union[RotateSession, ScaleSession]):
        """Put every horse back to its pre-gesture snapshot without history"""
        updates = {
            horse_id: {'position': position, 'direction': direction}
            for horse_id, (position, direction) in session.snapshot.items()
        }
        self._commit(session.frame_id, updates, True, "Restore group")

    # ========================================
    # Radial distribution
    # ========================================

    def radial_distribute(self) -> bool:
        """Push the selected horses out onto the group circle

        Each horse keeps its polar angle around the pivot and moves to the
        distance of the farthest horse, facing along the closer tangent.

        Returns:
            True if anything was committed
        """
        frame = self._get_frame()
        horses = self.selected_horses()
        if frame is None or not horses:
            return False

        center = self._pivot(horses).center
        placed = [_CanvasHorse(h.id, self._to_canvas(h.position), h.direction or 0.0) for h in horses]
        radius = max(distance(center, h.position) for h in placed)
        results = radial_distribute(placed, center, radius)
        if not results:
            return False

        updates = {
            horse_id: {'position': self._to_arena(result.position), 'direction': result.direction}
            for horse_id, result in results.items()
        }
        self._commit(frame.id, updates, False, "Distribute radially")
        self._logger.info(f"Radially distributed {len(updates)} horses (radius {radius:.1f}px)")
        return True

    # ========================================
    # Selection tracking
    # ========================================

    def on_selection_changed(self, horse_ids: List[str] = None):
        """Reset gesture state when the selected set changes

        Sets are compared by their sorted ids. Ignored while a drag is
        active; the drag keeps its state until release.
        """
        if self.state.dragging:
            self._logger.debug("Selection changed during drag, keeping gesture state")
            return
        if horse_ids is None:
            horse_ids = self._get_selection()
        key = ','.join(sorted(horse_ids))
        if key == self._last_selection_key:
            return
        self._last_selection_key = key
        self.reset()

    def reset(self):
        """Drop any rotate/scale session"""
        self.state.rotate = Idle()
        self.state.scale = Idle()
