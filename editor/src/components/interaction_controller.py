"""
Drill Team Choreographer - Interaction Controller

Turns pointer and touch input into document, selection and group
transform calls. Contains no Qt code so it can be driven directly.

Pointer coordinates are canvas pixels (inside the arena rectangle,
before zoom and pan). Touch points for pinch zoom are stage (widget)
pixels, since pinch changes the zoom/pan that maps stage to canvas.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from constants import DRAG_DISTANCE_THRESHOLD, HORSE_HIT_RADIUS, HORSE_LENGTH_METERS
from components.transform_widgets import DragContext, GroupHandles, DirectionArrowHandle
from models.editor_state import clamp_zoom
from models.transform import Vec2
from services.kinematics import direction_and_gait_from_drag
from utils.coordinate_transforms import point_to_canvas, canvas_to_point, meters_to_pixels
from utils.geometry import distance, midpoint


@dataclass
class PinchSession:
    initial_distance: float
    initial_zoom: float
    initial_pan: Vec2
    initial_center: Vec2


def compute_pinch(session: PinchSession, current_distance: float, current_center, offset):
    """Zoom and pan for a two-finger pinch

    Zoom follows the ratio of finger distances (clamped). Pan is chosen
    so the arena point that was under the initial pinch midpoint stays
    under the current midpoint.

    Args:
        session: Pinch state captured when the second finger went down
        current_distance: Current distance between the fingers (stage px)
        current_center: Current pinch midpoint (stage px)
        offset: Arena offset inside the widget (stage px)

    Returns:
        (zoom, pan)
    """
    if session.initial_distance <= 0:
        return session.initial_zoom, session.initial_pan

    zoom = clamp_zoom(session.initial_zoom * current_distance / session.initial_distance)

    arena_x = (session.initial_center.x - (offset.x + session.initial_pan.x)) / session.initial_zoom
    arena_y = (session.initial_center.y - (offset.y + session.initial_pan.y)) / session.initial_zoom

    pan = Vec2(
        current_center.x - (offset.x + arena_x * zoom),
        current_center.y - (offset.y + arena_y * zoom),
    )
    return zoom, pan


class InteractionController:
    """Pointer/touch state machine for the arena"""

    def __init__(self, document, editor_state, engine, playback=None):
        self.document = document
        self.editor_state = editor_state
        self.engine = engine
        self.playback = playback
        self.group_handles = GroupHandles()
        self.arrow_handle = DirectionArrowHandle()
        self.drag: Optional[DragContext] = None
        self.pinch: Optional[PinchSession] = None
        self.marquee: Optional[tuple] = None  # (start, end) canvas pixels while selecting
        self._logger = logging.getLogger('InteractionController')

    # ========================================
    # Helpers
    # ========================================

    @property
    def canvas_width(self):
        return self.engine.canvas_width

    @property
    def canvas_height(self):
        return self.engine.canvas_height

    def _locked(self) -> bool:
        return self.playback is not None and self.playback.is_playing

    def _to_canvas(self, point) -> Vec2:
        return point_to_canvas(point, self.canvas_width, self.canvas_height)

    def _to_arena(self, x, y) -> Vec2:
        return canvas_to_point(x, y, self.canvas_width, self.canvas_height)

    def horse_length_px(self) -> float:
        return meters_to_pixels(HORSE_LENGTH_METERS, self.canvas_width)

    def horse_at(self, x, y):
        """Topmost horse under a canvas position (last drawn wins)"""
        frame = self.document.get_current_frame()
        if frame is None:
            return None
        for horse in reversed(frame.horses):
            if distance(self._to_canvas(horse.position), Vec2(x, y)) <= HORSE_HIT_RADIUS:
                return horse
        return None

    def arrow_at(self, x, y):
        """Selected horse whose direction arrow tip is under a canvas position"""
        if not self.editor_state.show_direction_arrows:
            return None
        frame = self.document.get_current_frame()
        if frame is None:
            return None
        length = self.horse_length_px()
        for horse in reversed(frame.horses):
            if not self.editor_state.is_selected(horse.id):
                continue
            if self.arrow_handle.hit_test(x, y, self._to_canvas(horse.position), horse.direction, horse.speed, length):
                return horse
        return None

    def group_handle_at(self, x, y):
        if len(self.editor_state.selected_horse_ids) < 2:
            return None
        return self.group_handles.get_handle_at_pos(x, y, self.engine.get_bounding_circle())

    # ========================================
    # Pointer
    # ========================================

    def pointer_down(self, x, y, additive=False, snap=False):
        """Press at a canvas position

        Args:
            additive: Ctrl/Cmd held - toggle selection instead of replacing
            snap: Shift held - snap arrow direction to 45 degrees
        """
        if self._locked() or self.pinch is not None:
            return
        frame = self.document.get_current_frame()
        if frame is None:
            return
        start = Vec2(x, y)

        handle = self.group_handle_at(x, y)
        if handle is not None:
            self.drag = DragContext(operation=handle.name, start=start, current=start, frame_id=frame.id)
            self.drag.metadata['handle'] = handle
            if handle.name != 'distribute':
                self.engine.begin_drag()
            return

        horse = self.arrow_at(x, y)
        if horse is not None:
            self.drag = DragContext(operation='arrow', start=start, current=start, horse_id=horse.id,
                                    frame_id=frame.id, snap=snap, snapshot={horse.id: horse})
            return

        horse = self.horse_at(x, y)
        if horse is not None:
            if additive:
                self.editor_state.toggle_selection(horse.id)
            elif not self.editor_state.is_selected(horse.id):
                self.editor_state.set_selection([horse.id])

            selected = self.editor_state.selected_horse_ids
            if len(selected) > 1 and horse.id in selected:
                moving = [h for h in frame.horses if h.id in selected]
            else:
                moving = [horse]
            self.drag = DragContext(operation='horse', start=start, current=start, horse_id=horse.id,
                                    frame_id=frame.id, additive=additive,
                                    snapshot={h.id: h for h in moving})
            return

        self.drag = DragContext(operation='marquee', start=start, current=start, frame_id=frame.id, additive=additive)

    def pointer_move(self, x, y):
        ctx = self.drag
        if ctx is None or self._locked():
            return
        ctx.current = Vec2(x, y)
        if not ctx.moved:
            if distance(ctx.start, ctx.current) < DRAG_DISTANCE_THRESHOLD:
                return
            ctx.moved = True
            if ctx.operation == 'horse' and len(ctx.snapshot) > 1:
                self.engine.begin_drag()

        if ctx.operation in ('rotate', 'scale'):
            ctx.metadata['handle'].drag(self.engine, x, y)
        elif ctx.operation == 'horse':
            self.document.batch_update_horses(ctx.frame_id, self._horse_drag_updates(ctx), skip_history=True)
        elif ctx.operation == 'arrow':
            self.document.update_horse(ctx.frame_id, ctx.horse_id, self._arrow_drag_changes(ctx), skip_history=True)
        elif ctx.operation == 'marquee':
            self.marquee = (ctx.start, ctx.current)

    def pointer_up(self, x=None, y=None):
        """Release. A press that never passed the drag threshold is a click."""
        ctx = self.drag
        if ctx is None:
            return
        if x is not None and y is not None and not self._locked():
            self.pointer_move(x, y)
        self.drag = None

        try:
            if ctx.operation in ('rotate', 'scale'):
                ctx.metadata['handle'].release(self.engine)
            elif ctx.operation == 'distribute':
                if not ctx.moved:
                    ctx.metadata['handle'].release(self.engine)
            elif ctx.operation == 'horse':
                if ctx.moved:
                    self._commit_horse_drag(ctx)
            elif ctx.operation == 'arrow':
                if ctx.moved:
                    self._commit_arrow_drag(ctx)
            elif ctx.operation == 'marquee':
                self._finish_marquee(ctx)
        finally:
            if self.engine.is_dragging:
                self.engine.end_drag()
            self.marquee = None

    def cancel(self):
        """Abort the current drag, restoring the pre-drag state without history"""
        ctx = self.drag
        self.drag = None
        self.marquee = None
        if ctx is None:
            return
        if ctx.operation == 'rotate':
            self._restore_engine_session(self.engine.state.rotate)
        elif ctx.operation == 'scale':
            self._restore_engine_session(self.engine.state.scale)
        elif ctx.operation in ('horse', 'arrow') and ctx.moved:
            self._restore_snapshot(ctx)
        self.engine.reset()
        if self.engine.is_dragging:
            self.engine.end_drag()
        self._logger.debug(f"Cancelled {ctx.operation} drag")

    # ========================================
    # Horse drag
    # ========================================

    def _horse_drag_updates(self, ctx: DragContext):
        """Rigid translate of the dragged horses by the pointer delta"""
        dragged = ctx.snapshot[ctx.horse_id]
        start_canvas = self._to_canvas(dragged.position)
        target = self._to_arena(
            start_canvas.x + ctx.current.x - ctx.start.x,
            start_canvas.y + ctx.current.y - ctx.start.y,
        )
        delta = target - dragged.position

        updates = {}
        for horse_id, horse in ctx.snapshot.items():
            if horse_id == ctx.horse_id:
                updates[horse_id] = {'position': target}
            else:
                updates[horse_id] = {'position': horse.position + delta}
        return updates

    def _restore_snapshot(self, ctx: DragContext):
        updates = {
            horse_id: {'position': horse.position, 'direction': horse.direction, 'speed': horse.speed}
            for horse_id, horse in ctx.snapshot.items()
        }
        self.document.batch_update_horses(ctx.frame_id, updates, skip_history=True)

    def _commit_horse_drag(self, ctx: DragContext):
        final = self._horse_drag_updates(ctx)
        self._restore_snapshot(ctx)
        description = "Move horses" if len(final) > 1 else "Move horse"
        self.document.batch_update_horses(ctx.frame_id, final, description=description)

    # ========================================
    # Direction arrow drag
    # ========================================

    def _arrow_drag_changes(self, ctx: DragContext):
        horse = ctx.snapshot[ctx.horse_id]
        center = self._to_canvas(horse.position)
        local_x, local_y = self.arrow_handle.to_local(ctx.current.x, ctx.current.y, center, horse.direction)
        direction, gait = direction_and_gait_from_drag(
            local_x, local_y, horse.direction, self.horse_length_px(), ctx.snap
        )
        return {'direction': direction, 'speed': gait}

    def _commit_arrow_drag(self, ctx: DragContext):
        final = self._arrow_drag_changes(ctx)
        self._restore_snapshot(ctx)
        self.document.batch_update_horses(ctx.frame_id, {ctx.horse_id: final}, description="Change direction")

    # ========================================
    # Marquee selection
    # ========================================

    def horses_in_rect(self, a, b) -> List[str]:
        frame = self.document.get_current_frame()
        if frame is None:
            return []
        left, right = sorted((a.x, b.x))
        top, bottom = sorted((a.y, b.y))
        ids = []
        for horse in frame.horses:
            p = self._to_canvas(horse.position)
            if left <= p.x <= right and top <= p.y <= bottom:
                ids.append(horse.id)
        return ids

    def _finish_marquee(self, ctx: DragContext):
        if not ctx.moved:
            # Click on empty arena
            if not ctx.additive:
                self.editor_state.clear_selection()
            return
        ids = self.horses_in_rect(ctx.start, ctx.current)
        if ctx.additive:
            self.editor_state.set_selection(self.editor_state.selected_horse_ids + ids)
        else:
            self.editor_state.set_selection(ids)

    def _restore_engine_session(self, session):
        snapshot = getattr(session, 'snapshot', None)
        if not snapshot:
            return
        updates = {h: {'position': p, 'direction': d} for h, (p, d) in snapshot.items()}
        self.document.batch_update_horses(session.frame_id, updates, skip_history=True)

    # ========================================
    # Touch
    # ========================================

    def touch_begin(self, points: Sequence, to_canvas=None):
        """Touch points changed to a new set (stage pixels)

        Two fingers start a pinch and cancel any single-finger drag. One
        finger acts like a pointer press; to_canvas maps it to canvas pixels.
        """
        if len(points) >= 2:
            if self.drag is not None:
                self.cancel()
            a, b = points[0], points[1]
            self.pinch = PinchSession(
                initial_distance=distance(a, b),
                initial_zoom=self.editor_state.zoom,
                initial_pan=self.editor_state.pan,
                initial_center=midpoint(a, b),
            )
            self._logger.debug(f"Pinch started at zoom {self.editor_state.zoom:.2f}")
        elif len(points) == 1 and self.pinch is None:
            p = to_canvas(points[0]) if to_canvas else points[0]
            self.pointer_down(p.x, p.y)

    def touch_update(self, points: Sequence, offset=Vec2(0.0, 0.0), to_canvas=None):
        if self.pinch is not None:
            if len(points) < 2:
                return
            a, b = points[0], points[1]
            zoom, pan = compute_pinch(self.pinch, distance(a, b), midpoint(a, b), offset)
            self.editor_state.set_zoom(zoom)
            self.editor_state.set_pan(pan.x, pan.y)
        elif len(points) == 1:
            p = to_canvas(points[0]) if to_canvas else points[0]
            self.pointer_move(p.x, p.y)

    def touch_end(self, points: Sequence = ()):
        """Fingers lifted; points are the ones still down"""
        if self.pinch is not None:
            if len(points) < 2:
                self.pinch = None
            return
        if self.drag is not None:
            self.pointer_up()
