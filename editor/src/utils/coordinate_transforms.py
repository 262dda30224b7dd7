"""Coordinate transformation utilities for arena rendering.

Provides conversion between different coordinate systems:
- Arena space (meters from arena center, Y-down)
- Canvas pixels (arena rectangle, top-left origin, Y-down)
- Stage pixels (widget space, after arena offset, zoom and pan)
- Legacy normalized space (0-1 range, used by old documents)
"""

from dataclasses import dataclass

from constants import (
	ARENA_LENGTH, ARENA_WIDTH, ARENA_ASPECT_RATIO, ARENA_LENGTH_DIVISIONS,
	ARENA_PADDING, ARENA_BOTTOM_PADDING
)
from models.transform import Vec2


@dataclass(frozen=True)
class ArenaDimensions:
	"""Arena rectangle placed inside its container, in pixels"""
	width: float
	height: float
	offset_x: float
	offset_y: float


def _clamp(value, low, high):
	return max(low, min(high, value))


def point_to_canvas(point, canvas_width, canvas_height):
	"""Convert an arena point (meters) to canvas pixel coordinates.

	The result is clamped to the canvas, so points outside the arena
	stick to its edge.

	Args:
		point: Arena point in meters from center
		canvas_width: Canvas width in pixels
		canvas_height: Canvas height in pixels

	Returns:
		Vec2: Canvas coordinates in pixels
	"""
	normalized_x = point.x / ARENA_LENGTH + 0.5
	normalized_y = point.y / ARENA_WIDTH + 0.5
	return Vec2(
		_clamp(normalized_x * canvas_width, 0.0, canvas_width),
		_clamp(normalized_y * canvas_height, 0.0, canvas_height),
	)


def canvas_to_point(x, y, canvas_width, canvas_height):
	"""Convert canvas pixel coordinates to an arena point (meters).

	The normalized value is clamped to [0, 1] before conversion, so an
	off-canvas position maps onto the arena boundary, never beyond it.

	Args:
		x, y: Canvas coordinates in pixels
		canvas_width: Canvas width in pixels
		canvas_height: Canvas height in pixels

	Returns:
		Vec2: Arena point in meters from center
	"""
	normalized_x = _clamp(x / canvas_width, 0.0, 1.0) if canvas_width else 0.5
	normalized_y = _clamp(y / canvas_height, 0.0, 1.0) if canvas_height else 0.5
	return Vec2(
		(normalized_x - 0.5) * ARENA_LENGTH,
		(normalized_y - 0.5) * ARENA_WIDTH,
	)


def meters_to_pixels(meters, canvas_width):
	"""Convert a length along the arena to canvas pixels"""
	return meters * canvas_width / ARENA_LENGTH


def calculate_arena_dimensions(container_width, container_height):
	"""Fit the 2:1 arena inside a container, centered.

	Padding is kept on every side and extra room is reserved below the
	arena for the maneuver name caption.

	Args:
		container_width: Container width in pixels
		container_height: Container height in pixels

	Returns:
		ArenaDimensions: Arena size and its offset inside the container
	"""
	available_width = max(0.0, container_width - ARENA_PADDING * 2)
	available_height = max(0.0, container_height - ARENA_PADDING - ARENA_BOTTOM_PADDING)

	width_by_height = available_height * ARENA_ASPECT_RATIO
	height_by_width = available_width / ARENA_ASPECT_RATIO

	if width_by_height <= available_width:
		width = width_by_height
		height = available_height
	else:
		width = available_width
		height = height_by_width

	offset_x = (container_width - width) / 2
	offset_y = ARENA_PADDING + (available_height - height) / 2

	return ArenaDimensions(width, height, offset_x, offset_y)


def get_grid_lines():
	"""Grid line positions as fractions of the arena.

	Returns:
		(vertical, horizontal): Lists of fractions along length and width
	"""
	vertical = [i / ARENA_LENGTH_DIVISIONS for i in range(1, ARENA_LENGTH_DIVISIONS)]
	horizontal = [0.5]
	return vertical, horizontal


def normalized_to_meters(normalized_x, normalized_y):
	"""Convert legacy normalized coordinates (0-1) to meters from center"""
	return Vec2(
		(normalized_x - 0.5) * ARENA_LENGTH,
		(normalized_y - 0.5) * ARENA_WIDTH,
	)


def meters_to_normalized(meters_x, meters_y):
	"""Convert meters from center to legacy normalized coordinates (0-1)"""
	return Vec2(
		meters_x / ARENA_LENGTH + 0.5,
		meters_y / ARENA_WIDTH + 0.5,
	)


def canvas_to_stage(canvas_x, canvas_y, offset_x=0.0, offset_y=0.0, zoom_level=1.0, pan_x=0.0, pan_y=0.0):
	"""Convert canvas pixels to widget (stage) pixels.

	Args:
		canvas_x, canvas_y: Position inside the arena rectangle
		offset_x, offset_y: Arena offset inside the widget
		zoom_level: View zoom
		pan_x, pan_y: Pan offset in pixels

	Returns:
		Vec2: Widget pixel coordinates
	"""
	return Vec2(
		offset_x + pan_x + canvas_x * zoom_level,
		offset_y + pan_y + canvas_y * zoom_level,
	)


def stage_to_canvas(stage_x, stage_y, offset_x=0.0, offset_y=0.0, zoom_level=1.0, pan_x=0.0, pan_y=0.0):
	"""Convert widget (stage) pixels to canvas pixels. Inverse of canvas_to_stage."""
	return Vec2(
		(stage_x - offset_x - pan_x) / zoom_level,
		(stage_y - offset_y - pan_y) / zoom_level,
	)
