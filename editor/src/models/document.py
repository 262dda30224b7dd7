"""
Drill Team Choreographer - Document Store

Owns the single mutable Drill being edited, the current frame cursor and
the undo/redo history.

Every mutation works on a structural clone of the drill. Unless called
with skip_history=True it records one HistoryEntry whose undo/redo
callables swap in fresh clones of the before/after snapshots, so later
edits can never corrupt a stored snapshot.

Usage:
    document = DrillDocument()
    document.create_new_drill("Quadrille")
    frame = document.get_current_frame()
    horse = document.add_horse(frame.id, Vec2(0, 0))
    document.update_horse(frame.id, horse.id, {'position': Vec2(5, 5)})
    document.undo()
"""

import logging
from typing import Callable, Dict, Any, List, Optional, Union

from constants import DEFAULT_FRAME_DURATION
from models.drill import Drill
from models.frame import Frame, SubPattern
from models.gait import Gait
from models.horse import Horse, new_id, is_numeric_label
from models.transform import Vec2
from services.kinematics import compute_duration_from_movement
from utils.history_manager import HistoryManager


_HORSE_FIELDS = {'label', 'position', 'direction', 'speed', 'locked', 'sub_pattern_id'}
_FRAME_FIELDS = {'duration', 'is_key_frame', 'maneuver_name', 'speed', 'speed_multiplier'}
_SUB_PATTERN_FIELDS = {'name', 'horse_ids', 'locked', 'rotation', 'scale'}


def _check_fields(changes: Dict[str, Any], allowed, kind: str):
    unknown = set(changes) - allowed
    if unknown:
        raise ValueError(f"Unknown {kind} field(s): {', '.join(sorted(unknown))}")


def _normalize_horse_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    _check_fields(changes, _HORSE_FIELDS, 'horse')
    normalized = dict(changes)
    if 'position' in normalized:
        position = normalized['position']
        normalized['position'] = Vec2(float(position.x), float(position.y))
    if 'speed' in normalized:
        normalized['speed'] = Gait.parse(normalized['speed'])
    if 'direction' in normalized:
        normalized['direction'] = float(normalized['direction'])
    return normalized


class DrillDocument:
    """Single owner of the drill being edited"""

    def __init__(self, history: HistoryManager = None):
        self._drill: Optional[Drill] = None
        self.current_frame_index = 0
        self.history = history if history is not None else HistoryManager()
        self._listeners: List[Callable[[], None]] = []
        self._logger = logging.getLogger('DrillDocument')

    # ========================================
    # Document access
    # ========================================

    def get_document(self) -> Optional[Drill]:
        return self._drill

    def set_document(self, drill: Optional[Drill], skip_history_clear: bool = False,
                     preserve_frame_index: bool = False):
        """Replace the whole document

        Args:
            drill: New drill (used as-is, not copied)
            skip_history_clear: Keep the undo history (used by undo/redo and
                provisional drag writes)
            preserve_frame_index: Keep the current frame cursor, clamped to
                the new frame count
        """
        self._drill = drill
        if drill is not None:
            drill.recompute_timestamps()

        if preserve_frame_index and drill is not None and drill.frames:
            self.current_frame_index = max(0, min(self.current_frame_index, len(drill.frames) - 1))
        else:
            self.current_frame_index = 0

        if not skip_history_clear:
            self.history.clear()

        self._notify_listeners()

    def get_current_frame(self) -> Optional[Frame]:
        if self._drill is None or not self._drill.frames:
            return None
        if not 0 <= self.current_frame_index < len(self._drill.frames):
            return None
        return self._drill.frames[self.current_frame_index]

    def set_current_frame(self, index: int):
        """Move the frame cursor. Out-of-range indices are ignored."""
        if self._drill is None or not 0 <= index < len(self._drill.frames):
            return
        if index != self.current_frame_index:
            self.current_frame_index = index
            self._notify_listeners()

    def get_frame(self, frame_id: str) -> Frame:
        """Frame by id

        Raises:
            ValueError: If no document is loaded or the frame is unknown
        """
        if self._drill is None:
            raise ValueError("No drill loaded")
        frame = self._drill.get_frame(frame_id)
        if frame is None:
            raise ValueError(f"Frame with id '{frame_id}' not found")
        return frame

    def create_new_drill(self, name: str = 'Untitled Drill') -> Drill:
        """Start a fresh drill with one empty frame. Clears history."""
        drill = Drill.create(name)
        self.set_document(drill)
        self._logger.info(f"Created new drill '{name}'")
        return drill

    def load(self, drill: Drill):
        """Open an existing drill. Clears history."""
        self.set_document(drill)
        self._logger.info(f"Loaded drill '{drill.name}' ({len(drill.frames)} frames)")

    # ========================================
    # History
    # ========================================

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def _restore(self, snapshot: Drill):
        self.set_document(snapshot.clone(), skip_history_clear=True, preserve_frame_index=True)

    def _commit(self, description: str, mutate: Callable[[Drill], Any], skip_history: bool = False):
        """Apply mutate to a clone of the drill and swap it in

        mutate may raise ValueError; the document is untouched in that case.

        Returns:
            Whatever mutate returns
        """
        if self._drill is None:
            self._logger.debug(f"Ignoring '{description}' - no drill loaded")
            return None

        before = self._drill.clone()
        after = self._drill.clone()
        result = mutate(after)
        after.recompute_timestamps()
        self._drill = after

        if not skip_history:
            after_snapshot = after.clone()
            self.history.record(
                description,
                undo=lambda: self._restore(before),
                redo=lambda: self._restore(after_snapshot),
            )

        self._notify_listeners()
        return result

    # ========================================
    # Frames
    # ========================================

    def add_frame(self) -> Optional[Frame]:
        """Append a frame copying the last frame's horses (fresh ids, same labels)"""
        def mutate(drill: Drill):
            if drill.frames:
                frame = drill.frames[-1].copy_with_new_ids()
                frame.duration = DEFAULT_FRAME_DURATION
                frame.is_key_frame = False
                frame.maneuver_name = None
            else:
                frame = Frame(id=new_id(), index=0)
            drill.frames.append(frame)
            return frame

        frame = self._commit("Add frame", mutate)
        if frame is not None:
            self.current_frame_index = len(self._drill.frames) - 1
            self._notify_listeners()
        return frame

    def insert_frame(self, index: int, duration: float = DEFAULT_FRAME_DURATION) -> Optional[Frame]:
        """Insert an empty frame at index (clamped to the frame count)"""
        def mutate(drill: Drill):
            position = max(0, min(index, len(drill.frames)))
            frame = Frame(id=new_id(), index=position, duration=float(duration))
            drill.frames.insert(position, frame)
            return frame

        frame = self._commit("Insert frame", mutate)
        if frame is not None:
            self.current_frame_index = frame.index
            self._notify_listeners()
        return frame

    def delete_frame(self, frame_id: str) -> bool:
        """Remove a frame. The last remaining frame is never deleted.

        Returns:
            True if the frame was deleted
        """
        if self._drill is None:
            return False
        if len(self._drill.frames) <= 1:
            self._logger.debug("Refusing to delete the only frame")
            return False
        self.get_frame(frame_id)

        def mutate(drill: Drill):
            drill.frames.pop(drill.frame_index(frame_id))

        self._commit("Delete frame", mutate)
        self.current_frame_index = max(0, min(self.current_frame_index, len(self._drill.frames) - 1))
        self._notify_listeners()
        return True

    def duplicate_frame(self, frame_id: str) -> Optional[Frame]:
        """Copy a frame (fresh ids throughout) and insert it right after the source"""
        def mutate(drill: Drill):
            position = drill.frame_index(frame_id)
            frame = drill.frames[position].copy_with_new_ids()
            drill.frames.insert(position + 1, frame)
            return frame

        frame = self._commit("Duplicate frame", mutate)
        if frame is not None:
            self.current_frame_index = frame.index
            self._notify_listeners()
        return frame

    def move_frame(self, from_index: int, to_index: int):
        """Reorder a frame

        Raises:
            ValueError: If either index is out of range
        """
        if self._drill is None:
            return
        count = len(self._drill.frames)
        if not 0 <= from_index < count or not 0 <= to_index < count:
            raise ValueError(f"Frame index out of range: {from_index} -> {to_index} (frames: {count})")
        if from_index == to_index:
            return

        def mutate(drill: Drill):
            frame = drill.frames.pop(from_index)
            drill.frames.insert(to_index, frame)

        self._commit("Move frame", mutate)
        self.current_frame_index = to_index
        self._notify_listeners()

    def update_frame(self, frame_id: str, skip_history: bool = False, **changes):
        """Change frame properties (duration, is_key_frame, maneuver_name, speed, speed_multiplier)"""
        _check_fields(changes, _FRAME_FIELDS, 'frame')
        if 'speed' in changes and changes['speed'] is not None:
            changes['speed'] = Gait.parse(changes['speed'])
        if 'duration' in changes:
            changes['duration'] = float(changes['duration'])
            if changes['duration'] < 0:
                raise ValueError(f"Frame duration must not be negative, got {changes['duration']}")

        def mutate(drill: Drill):
            frame = drill.get_frame(frame_id)
            if frame is None:
                raise ValueError(f"Frame with id '{frame_id}' not found")
            for key, value in changes.items():
                setattr(frame, key, value)

        self._commit("Update frame", mutate, skip_history)

    def set_frame_duration(self, frame_id: str, seconds: float):
        self.update_frame(frame_id, duration=seconds)

    def auto_frame_duration(self, frame_id: str) -> float:
        """Set a frame's duration from how far its horses travel to the next frame

        Returns:
            The new duration
        """
        frame = self.get_frame(frame_id)
        position = self._drill.frame_index(frame_id)
        next_frame = self._drill.frames[position + 1] if position + 1 < len(self._drill.frames) else None
        duration = compute_duration_from_movement(frame, next_frame)
        if duration != frame.duration:
            self.update_frame(frame_id, duration=duration)
        return duration

    # ========================================
    # Horses
    # ========================================

    def add_horse(self, frame_id: str, position, direction: float = 0.0,
                  speed=Gait.WALK, label: Union[int, str] = None) -> Optional[Horse]:
        """Place a new horse. Label defaults to one past the highest numeric label in the frame."""
        def mutate(drill: Drill):
            frame = drill.get_frame(frame_id)
            if frame is None:
                raise ValueError(f"Frame with id '{frame_id}' not found")
            horse_label = label
            if horse_label is None:
                horse_label = max((h.label for h in frame.horses if is_numeric_label(h.label)), default=0) + 1
            horse = Horse(
                id=new_id(),
                label=horse_label,
                position=Vec2(float(position.x), float(position.y)),
                direction=float(direction),
                speed=Gait.parse(speed),
            )
            frame.horses.append(horse)
            return horse

        return self._commit("Add horse", mutate)

    def update_horse(self, frame_id: str, horse_id: str, changes: Dict[str, Any],
                     skip_history: bool = False):
        """Change one horse. Positions are stored as given."""
        self.batch_update_horses(frame_id, {horse_id: changes}, skip_history, description="Update horse")

    def batch_update_horses(self, frame_id: str, updates: Dict[str, Dict[str, Any]],
                            skip_history: bool = False, description: str = "Update horses"):
        """Change several horses of one frame as a single undoable step

        Args:
            frame_id: Frame containing the horses
            updates: horse id -> field changes
            skip_history: Provisional write, no history entry
            description: History description

        Raises:
            ValueError: Unknown frame, horse or field
        """
        if not updates:
            return
        normalized = {horse_id: _normalize_horse_changes(changes) for horse_id, changes in updates.items()}

        def mutate(drill: Drill):
            frame = drill.get_frame(frame_id)
            if frame is None:
                raise ValueError(f"Frame with id '{frame_id}' not found")
            for horse_id, changes in normalized.items():
                index = frame.horse_index(horse_id)
                frame.horses[index] = frame.horses[index].clone(**changes)

        self._commit(description, mutate, skip_history)

    def remove_horse(self, frame_id: str, horse_id: str):
        """Delete a horse and drop it from any sub-pattern (empty sub-patterns go too)"""
        self.remove_horses(frame_id, [horse_id])

    def remove_horses(self, frame_id: str, horse_ids: List[str]):
        """Delete several horses as one undoable step"""
        if not horse_ids:
            return
        removed = set(horse_ids)

        def mutate(drill: Drill):
            frame = drill.get_frame(frame_id)
            if frame is None:
                raise ValueError(f"Frame with id '{frame_id}' not found")
            for horse_id in removed:
                frame.horse_index(horse_id)  # raises for unknown ids
            frame.horses = [h for h in frame.horses if h.id not in removed]
            for sp in frame.sub_patterns:
                sp.horse_ids = [h for h in sp.horse_ids if h not in removed]
            frame.sub_patterns = [sp for sp in frame.sub_patterns if sp.horse_ids]

        self._commit("Remove horse" if len(removed) == 1 else "Remove horses", mutate)

    # ========================================
    # Sub-patterns
    # ========================================

    def add_sub_pattern(self, frame_id: str, horse_ids: List[str], name: str = None) -> Optional[SubPattern]:
        """Group horses into a locked sub-pattern"""
        def mutate(drill: Drill):
            frame = drill.get_frame(frame_id)
            if frame is None:
                raise ValueError(f"Frame with id '{frame_id}' not found")
            sub_pattern = SubPattern(id=new_id(), horse_ids=list(horse_ids), name=name)
            for horse_id in horse_ids:
                index = frame.horse_index(horse_id)
                frame.horses[index] = frame.horses[index].clone(locked=True, sub_pattern_id=sub_pattern.id)
            frame.sub_patterns.append(sub_pattern)
            return sub_pattern

        return self._commit("Add sub-pattern", mutate)

    def update_sub_pattern(self, frame_id: str, sub_pattern_id: str, **changes):
        _check_fields(changes, _SUB_PATTERN_FIELDS, 'sub-pattern')

        def mutate(drill: Drill):
            frame = drill.get_frame(frame_id)
            if frame is None:
                raise ValueError(f"Frame with id '{frame_id}' not found")
            sub_pattern = frame.get_sub_pattern(sub_pattern_id)
            if sub_pattern is None:
                raise ValueError(f"Sub-pattern with id '{sub_pattern_id}' not found")
            for key, value in changes.items():
                setattr(sub_pattern, key, list(value) if key == 'horse_ids' else value)

        self._commit("Update sub-pattern", mutate)

    def remove_sub_pattern(self, frame_id: str, sub_pattern_id: str):
        """Delete a sub-pattern and unlock its horses"""
        def mutate(drill: Drill):
            frame = drill.get_frame(frame_id)
            if frame is None:
                raise ValueError(f"Frame with id '{frame_id}' not found")
            if frame.get_sub_pattern(sub_pattern_id) is None:
                raise ValueError(f"Sub-pattern with id '{sub_pattern_id}' not found")
            frame.sub_patterns = [sp for sp in frame.sub_patterns if sp.id != sub_pattern_id]
            frame.horses = [
                h.clone(locked=False, sub_pattern_id=None) if h.sub_pattern_id == sub_pattern_id else h
                for h in frame.horses
            ]

        self._commit("Remove sub-pattern", mutate)

    # ========================================
    # Listeners
    # ========================================

    def add_listener(self, callback: Callable[[], None]):
        """Call callback after every change to the document or frame cursor"""
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify_listeners(self):
        for callback in list(self._listeners):
            try:
                callback()
            except Exception as e:
                self._logger.warning(f"Error notifying listener: {e}")
