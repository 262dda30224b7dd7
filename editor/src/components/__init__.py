"""UI components for the Drill Team Choreographer

This package contains the arena view and its input handling:
- canvas_widgets: Rendering and zoom/pan mixins for the arena canvas
- transform_widgets: Group handles and drag state
- interaction_controller: Qt-free pointer/touch state machine

Direct imports:
"""

from .arena_canvas import ArenaCanvas
from .interaction_controller import InteractionController
from .playback_clock import PlaybackClock

__all__ = [
    'ArenaCanvas',
    'InteractionController',
    'PlaybackClock',
]
