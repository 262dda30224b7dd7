"""Group transform handle system - ABC-based handle architecture.

Each handle type is a class that knows:
- Where it sits relative to the group bounding circle
- How to test if a pointer position hits it
- How to draw itself
- Which engine call a drag or release on it maps to
"""

import math
from abc import ABC, abstractmethod

from PyQt5.QtCore import QPointF, Qt
from PyQt5.QtGui import QPen, QBrush, QColor

from constants import HANDLE_OFFSET, HANDLE_RADIUS, ARROW_HANDLE_RADIUS
from models.transform import Vec2
from services.kinematics import arrow_end_position


class Handle(ABC):
    """Abstract base class for bounding-circle handles."""

    def __init__(self, handle_size=HANDLE_RADIUS, hit_tolerance=4):
        self.handle_size = handle_size
        self.hit_tolerance = hit_tolerance

    @abstractmethod
    def position(self, circle) -> Vec2:
        """Handle center in canvas pixels for a bounding circle."""
        pass

    def hit_test(self, x, y, circle) -> bool:
        """Test if a canvas position hits this handle."""
        px, py = self.position(circle)
        return math.hypot(x - px, y - py) <= self.handle_size + self.hit_tolerance

    def draw(self, painter, circle):
        px, py = self.position(circle)
        painter.setPen(QPen(QColor(255, 255, 255), 1))
        painter.setBrush(QBrush(self.color))
        painter.drawEllipse(QPointF(px, py), float(self.handle_size), float(self.handle_size))

    def drag(self, engine, x, y):
        """Feed a pointer sample to the engine while this handle is held."""
        pass

    @abstractmethod
    def release(self, engine) -> bool:
        """Finish the gesture. Returns True if the document changed."""
        pass

    @abstractmethod
    def get_cursor(self):
        """Qt cursor shape shown while hovering this handle."""
        pass


class RotateHandle(Handle):
    """Top handle - rotates the group about its pivot."""
    name = 'rotate'
    color = QColor(90, 141, 191)

    def position(self, circle):
        return Vec2(circle.center.x, circle.center.y - circle.radius - HANDLE_OFFSET)

    def drag(self, engine, x, y):
        engine.rotate_from_pointer(x, y)

    def release(self, engine):
        return engine.end_rotate()

    def get_cursor(self):
        return Qt.CrossCursor


class ScaleHandle(Handle):
    """Right handle - spreads or tightens the group about its pivot."""
    name = 'scale'
    color = QColor(16, 185, 129)

    def position(self, circle):
        return Vec2(circle.center.x + circle.radius + HANDLE_OFFSET, circle.center.y)

    def drag(self, engine, x, y):
        engine.scale_from_pointer(x, y)

    def release(self, engine):
        return engine.end_scale()

    def get_cursor(self):
        return Qt.SizeHorCursor


class DistributeHandle(Handle):
    """Bottom handle - a click pushes the horses out onto the circle."""
    name = 'distribute'
    color = QColor(249, 115, 22)

    def position(self, circle):
        return Vec2(circle.center.x, circle.center.y + circle.radius + HANDLE_OFFSET)

    def release(self, engine):
        return engine.radial_distribute()

    def get_cursor(self):
        return Qt.PointingHandCursor


class GroupHandles:
    """The handle set drawn around a multi-horse selection."""

    def __init__(self):
        self.handles = {
            'rotate': RotateHandle(),
            'scale': ScaleHandle(),
            'distribute': DistributeHandle(),
        }

    def get_handle_at_pos(self, x, y, circle):
        """Find which handle (if any) is at a canvas position.

        Returns:
            Handle object or None
        """
        for handle in self.handles.values():
            if handle.hit_test(x, y, circle):
                return handle
        return None

    def draw(self, painter, circle):
        pen = QPen(QColor(90, 141, 191), 1, Qt.DashLine)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawEllipse(QPointF(circle.center.x, circle.center.y), circle.radius, circle.radius)
        for handle in self.handles.values():
            handle.draw(painter, circle)


class DirectionArrowHandle:
    """Invisible grab point at the tip of a horse's direction arrow."""

    def __init__(self, handle_size=ARROW_HANDLE_RADIUS):
        self.handle_size = handle_size

    def tip(self, center, direction, gait, horse_length_px) -> Vec2:
        """Arrow tip in canvas pixels."""
        local_x, _ = arrow_end_position(gait, horse_length_px)
        return Vec2(
            center.x + local_x * math.cos(direction),
            center.y + local_x * math.sin(direction),
        )

    def hit_test(self, x, y, center, direction, gait, horse_length_px) -> bool:
        tx, ty = self.tip(center, direction, gait, horse_length_px)
        return math.hypot(x - tx, y - ty) <= self.handle_size

    @staticmethod
    def to_local(x, y, center, direction):
        """Pointer offset from the horse center, rotated into the horse's frame (+x = forward)."""
        dx = x - center.x
        dy = y - center.y
        cos_d = math.cos(-direction)
        sin_d = math.sin(-direction)
        return dx * cos_d - dy * sin_d, dx * sin_d + dy * cos_d
