"""
Drill Team Choreographer - Data Models

This module contains the drill data model and the stores that own it.
This is the MODEL in MVC architecture.

Public API: Drill, Frame, Horse, Gait and the DrillDocument store.
"""

from .drill import Drill, DrillMetadata, AudioTrack
from .frame import Frame, SubPattern
from .gait import Gait
from .horse import Horse
from .transform import Vec2, Point, BoundingCircle
from .document import DrillDocument
from .editor_state import EditorState

__all__ = [
    'Drill', 'DrillMetadata', 'AudioTrack', 'Frame', 'SubPattern', 'Gait', 'Horse',
    'Vec2', 'Point', 'BoundingCircle', 'DrillDocument', 'EditorState',
]
