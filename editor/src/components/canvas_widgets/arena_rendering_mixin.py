"""Arena rendering mixin - QPainter drawing of the arena and horses.

Everything inside the arena is drawn in canvas pixels; the painter is
translated and scaled by the view offset, pan and zoom first.
"""

import math

from PyQt5.QtCore import Qt, QPointF, QRectF
from PyQt5.QtGui import QPainter, QPen, QBrush, QColor, QFont, QPolygonF

from constants import HORSE_LENGTH_METERS, HORSE_WIDTH_RATIO, MANEUVER_LABEL_SPACE
from services.kinematics import arrow_end_position
from utils.coordinate_transforms import point_to_canvas, meters_to_pixels, get_grid_lines

ARENA_FILL = QColor(194, 170, 128)
ARENA_BORDER = QColor(90, 70, 40)
GRID_COLOR = QColor(255, 255, 255, 90)
HORSE_FILL = QColor(245, 245, 245)
HORSE_LOCKED_FILL = QColor(200, 200, 210)
SELECTION_COLOR = QColor(42, 130, 218)
MARQUEE_FILL = QColor(42, 130, 218, 40)


class ArenaRenderingMixin:
    """Mixin providing the arena paint pass."""

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), QColor(40, 40, 40))

        painter.save()
        pan = self.editor_state.pan
        painter.translate(self.arena.offset_x + pan.x, self.arena.offset_y + pan.y)
        painter.scale(self.editor_state.zoom, self.editor_state.zoom)

        self._draw_arena(painter)
        horses = self.visible_horses()
        for horse in horses:
            self._draw_horse(painter, horse)

        if not self._is_playing() and len(self.editor_state.selected_horse_ids) >= 2:
            self.controller.group_handles.draw(painter, self.engine.get_bounding_circle())

        if self.controller.marquee is not None:
            self._draw_marquee(painter, *self.controller.marquee)
        painter.restore()

        self._draw_maneuver_label(painter)
        painter.end()

    # ========================================
    # Arena
    # ========================================

    def _draw_arena(self, painter):
        width, height = self.arena.width, self.arena.height
        painter.setPen(QPen(ARENA_BORDER, 2))
        painter.setBrush(QBrush(ARENA_FILL))
        painter.drawRect(QRectF(0, 0, width, height))

        painter.setPen(QPen(GRID_COLOR, 1, Qt.DashLine))
        vertical, horizontal = get_grid_lines()
        for fraction in vertical:
            painter.drawLine(QPointF(width * fraction, 0), QPointF(width * fraction, height))
        for fraction in horizontal:
            painter.drawLine(QPointF(0, height * fraction), QPointF(width, height * fraction))

    def _draw_maneuver_label(self, painter):
        frame = self.document.get_current_frame()
        if frame is None or not frame.maneuver_name:
            return
        painter.setPen(QColor(230, 230, 230))
        painter.setFont(QFont("Arial", 12))
        top = self.arena.offset_y + self.arena.height + self.editor_state.pan.y
        rect = QRectF(0, top, self.width(), MANEUVER_LABEL_SPACE)
        painter.drawText(rect, Qt.AlignCenter, frame.maneuver_name)

    # ========================================
    # Horses
    # ========================================

    def _horse_length_px(self):
        return meters_to_pixels(HORSE_LENGTH_METERS, self.arena.width)

    def _draw_horse(self, painter, horse):
        center = point_to_canvas(horse.position, self.arena.width, self.arena.height)
        length = self._horse_length_px()
        width = length * HORSE_WIDTH_RATIO
        selected = self.editor_state.is_selected(horse.id)

        if self.editor_state.show_direction_arrows:
            self._draw_arrow(painter, center, horse, length)

        painter.save()
        painter.translate(center.x, center.y)
        painter.rotate(math.degrees(horse.direction))
        if selected:
            painter.setPen(QPen(SELECTION_COLOR, 2))
        else:
            painter.setPen(QPen(ARENA_BORDER, 1))
        painter.setBrush(QBrush(HORSE_LOCKED_FILL if horse.locked else HORSE_FILL))
        painter.drawEllipse(QPointF(0, 0), length / 2, width / 2)
        painter.restore()

        painter.setPen(QColor(20, 20, 20))
        painter.setFont(QFont("Arial", max(6, int(width * 0.6))))
        painter.drawText(QRectF(center.x - length / 2, center.y - width / 2, length, width),
                         Qt.AlignCenter, str(horse.label))

    def _draw_arrow(self, painter, center, horse, length):
        tip_x, _ = arrow_end_position(horse.speed, length)
        cos_d, sin_d = math.cos(horse.direction), math.sin(horse.direction)
        start = QPointF(center.x + cos_d * length / 2, center.y + sin_d * length / 2)
        tip = QPointF(center.x + cos_d * tip_x, center.y + sin_d * tip_x)

        color = QColor(horse.speed.color)
        painter.setPen(QPen(color, 2))
        painter.drawLine(start, tip)

        head = length * 0.25
        left = QPointF(tip.x() - head * math.cos(horse.direction - 0.5), tip.y() - head * math.sin(horse.direction - 0.5))
        right = QPointF(tip.x() - head * math.cos(horse.direction + 0.5), tip.y() - head * math.sin(horse.direction + 0.5))
        painter.setBrush(QBrush(color))
        painter.drawPolygon(QPolygonF([tip, left, right]))

    def _draw_marquee(self, painter, start, end):
        painter.setPen(QPen(SELECTION_COLOR, 1, Qt.DashLine))
        painter.setBrush(QBrush(MARQUEE_FILL))
        painter.drawRect(QRectF(QPointF(start.x, start.y), QPointF(end.x, end.y)).normalized())
