"""Drag context dataclass for arena interactions.

Unified drag state management for one pointer gesture.
"""

from dataclasses import dataclass, field

from models.transform import Vec2


@dataclass
class DragContext:
    """Unified drag state for arena pointer interactions.

    Created on pointer press, discarded on release or cancel.
    """
    operation: str  # 'horse', 'arrow', 'rotate', 'scale', 'distribute', 'marquee'
    start: Vec2  # canvas pixels at press
    current: Vec2 = None  # canvas pixels at last move
    horse_id: str = None  # horse under the pointer for 'horse' and 'arrow'
    frame_id: str = None
    additive: bool = False  # ctrl/shift held at press
    snap: bool = False  # shift held, snap arrow direction to 45 degrees
    moved: bool = False  # pointer travelled past the drag threshold
    snapshot: dict = field(default_factory=dict)  # horse_id -> Horse at press
    metadata: dict = field(default_factory=dict)
