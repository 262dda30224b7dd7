"""
Drill Team Choreographer - Frame Data Model

A frame is one keyframe of a drill: the horses' placement at a moment in
time plus the time it takes to move on to the next frame.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

from constants import DEFAULT_FRAME_DURATION
from models.gait import Gait
from models.horse import Horse, new_id


@dataclass
class SubPattern:
    """Named, lockable cluster of horses within a frame"""
    id: str
    horse_ids: List[str] = field(default_factory=list)
    name: Optional[str] = None
    locked: bool = True
    rotation: float = 0.0
    scale: float = 1.0

    def clone(self) -> 'SubPattern':
        return SubPattern(
            id=self.id,
            horse_ids=list(self.horse_ids),
            name=self.name,
            locked=self.locked,
            rotation=self.rotation,
            scale=self.scale,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'horseIds': list(self.horse_ids),
            'locked': self.locked,
            'transform': {'rotation': self.rotation, 'scale': self.scale},
        }
        if self.name is not None:
            data['name'] = self.name
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SubPattern':
        transform = data.get('transform') or {}
        return cls(
            id=str(data['id']),
            horse_ids=[str(h) for h in data.get('horseIds', [])],
            name=data.get('name'),
            locked=bool(data.get('locked', True)),
            rotation=float(transform.get('rotation', 0.0)),
            scale=float(transform.get('scale', 1.0)),
        )


@dataclass
class Frame:
    id: str
    index: int
    timestamp: float = 0.0
    duration: float = DEFAULT_FRAME_DURATION
    horses: List[Horse] = field(default_factory=list)
    sub_patterns: List[SubPattern] = field(default_factory=list)
    is_key_frame: bool = False
    maneuver_name: Optional[str] = None
    # Gait used to infer duration from movement (None = walk)
    speed: Optional[Gait] = None
    speed_multiplier: Optional[float] = None

    def get_horse(self, horse_id: str) -> Optional[Horse]:
        for horse in self.horses:
            if horse.id == horse_id:
                return horse
        return None

    def horse_index(self, horse_id: str) -> int:
        """Index of a horse in this frame

        Raises:
            ValueError: If the horse is not in this frame
        """
        for i, horse in enumerate(self.horses):
            if horse.id == horse_id:
                return i
        raise ValueError(f"Horse with id '{horse_id}' not found in frame '{self.id}'")

    def get_sub_pattern(self, sub_pattern_id: str) -> Optional[SubPattern]:
        for sub_pattern in self.sub_patterns:
            if sub_pattern.id == sub_pattern_id:
                return sub_pattern
        return None

    def clone(self) -> 'Frame':
        """Structural copy. Horses are copied, never shared between frames."""
        return Frame(
            id=self.id,
            index=self.index,
            timestamp=self.timestamp,
            duration=self.duration,
            horses=[h.clone() for h in self.horses],
            sub_patterns=[sp.clone() for sp in self.sub_patterns],
            is_key_frame=self.is_key_frame,
            maneuver_name=self.maneuver_name,
            speed=self.speed,
            speed_multiplier=self.speed_multiplier,
        )

    def copy_with_new_ids(self, frame_id: str = None) -> 'Frame':
        """Copy this frame with fresh ids for the frame, horses and sub-patterns

        Labels are kept so horses still match across frames for playback.
        """
        horse_ids = {h.id: new_id() for h in self.horses}
        sub_pattern_ids = {sp.id: new_id() for sp in self.sub_patterns}

        horses = []
        for horse in self.horses:
            horses.append(horse.clone(
                id=horse_ids[horse.id],
                sub_pattern_id=sub_pattern_ids.get(horse.sub_pattern_id),
            ))

        sub_patterns = []
        for sp in self.sub_patterns:
            copied = sp.clone()
            copied.id = sub_pattern_ids[sp.id]
            copied.horse_ids = [horse_ids[h] for h in sp.horse_ids if h in horse_ids]
            sub_patterns.append(copied)

        frame = self.clone()
        frame.id = frame_id or new_id()
        frame.horses = horses
        frame.sub_patterns = sub_patterns
        return frame

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'index': self.index,
            'timestamp': self.timestamp,
            'duration': self.duration,
            'horses': [h.to_dict() for h in self.horses],
            'subPatterns': [sp.to_dict() for sp in self.sub_patterns],
        }
        if self.is_key_frame:
            data['isKeyFrame'] = True
        if self.maneuver_name is not None:
            data['maneuverName'] = self.maneuver_name
        if self.speed is not None:
            data['speed'] = self.speed.value
        if self.speed_multiplier is not None:
            data['speedMultiplier'] = self.speed_multiplier
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Frame':
        speed = data.get('speed')
        multiplier = data.get('speedMultiplier')
        return cls(
            id=str(data['id']),
            index=int(data.get('index', 0)),
            timestamp=float(data.get('timestamp', 0.0)),
            duration=float(data.get('duration', DEFAULT_FRAME_DURATION)),
            horses=[Horse.from_dict(h) for h in data.get('horses', [])],
            sub_patterns=[SubPattern.from_dict(sp) for sp in data.get('subPatterns', [])],
            is_key_frame=bool(data.get('isKeyFrame', False)),
            maneuver_name=data.get('maneuverName'),
            speed=Gait.parse(speed) if speed is not None else None,
            speed_multiplier=float(multiplier) if multiplier is not None else None,
        )
