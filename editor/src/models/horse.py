"""
Drill Team Choreographer - Horse Data Model

A horse is a single rider/mount placed on the arena for one frame.
Positions are arena meters, direction is radians (0 = +x, counter-clockwise).

This is part of the MODEL layer - pure data, no UI logic.
"""

import uuid as uuid_module
from dataclasses import dataclass, replace
from typing import Dict, Any, Optional, Union

from models.gait import Gait
from models.transform import Vec2


def new_id() -> str:
    """Generate a fresh identifier for horses, frames and sub-patterns"""
    return str(uuid_module.uuid4())


def is_numeric_label(label) -> bool:
    return isinstance(label, int) and not isinstance(label, bool)


def parse_label(value) -> Union[int, str]:
    """Labels are kept as stored: numbers stay numbers, text stays text"""
    if is_numeric_label(value) or isinstance(value, str):
        return value
    raise ValueError(f"Horse label must be a number or text, got {value!r}")


@dataclass
class Horse:
    id: str
    label: Union[int, str]
    position: Vec2
    direction: float = 0.0
    speed: Gait = Gait.WALK
    locked: bool = False
    sub_pattern_id: Optional[str] = None

    def clone(self, **changes) -> 'Horse':
        """Copy this horse, optionally overriding fields"""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'label': self.label,
            'position': {'x': self.position.x, 'y': self.position.y},
            'direction': self.direction,
            'speed': self.speed.value,
            'locked': self.locked,
        }
        if self.sub_pattern_id is not None:
            data['subPatternId'] = self.sub_pattern_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Horse':
        position = data['position']
        return cls(
            id=str(data['id']),
            label=parse_label(data['label']),
            position=Vec2(float(position['x']), float(position['y'])),
            direction=float(data.get('direction', 0.0)),
            speed=Gait.parse(data.get('speed', 'walk')),
            locked=bool(data.get('locked', False)),
            sub_pattern_id=data.get('subPatternId'),
        )
