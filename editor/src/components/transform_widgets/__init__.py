"""
Drill Team Choreographer - Transform Widget Components

This package contains the arena handle architecture:
- handles.py: ABC-based group handles (RotateHandle, ScaleHandle, DistributeHandle)
  plus the direction arrow grab point
- drag_context.py: Unified drag state management
"""

from .handles import (
    Handle, RotateHandle, ScaleHandle, DistributeHandle, GroupHandles, DirectionArrowHandle
)
from .drag_context import DragContext

__all__ = [
    'Handle', 'RotateHandle', 'ScaleHandle', 'DistributeHandle', 'GroupHandles',
    'DirectionArrowHandle', 'DragContext',
]
