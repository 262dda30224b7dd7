"""Geometry helpers for arena and canvas math.

Pure functions over Vec2 points:
- Distances, angles and point rotation/scaling about a pivot
- Angle normalization and shortest signed difference
- Minimal enclosing circle (incremental Welzl)
"""

import math
from typing import Iterable, List, Sequence

from models.transform import Vec2, BoundingCircle

EPSILON = 1e-9
TWO_PI = 2 * math.pi


def distance(a, b) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def midpoint(a, b) -> Vec2:
    return Vec2((a.x + b.x) / 2, (a.y + b.y) / 2)


def centroid(points: Sequence) -> Vec2:
    """Arithmetic mean of a point set (origin for empty input)"""
    if not points:
        return Vec2(0.0, 0.0)
    return Vec2(
        sum(p.x for p in points) / len(points),
        sum(p.y for p in points) / len(points),
    )


def angle_between(center, point) -> float:
    """Polar angle of point around center, in (-pi, pi]"""
    return math.atan2(point.y - center.y, point.x - center.x)


def normalize_angle(angle: float) -> float:
    """Normalize an angle to [0, 2pi)"""
    normalized = math.fmod(angle, TWO_PI)
    if normalized < 0:
        normalized += TWO_PI
    # fmod of a tiny negative value can round up to exactly 2pi
    if normalized >= TWO_PI:
        normalized -= TWO_PI
    return normalized


def wrap_angle(angle: float) -> float:
    """Wrap an angle to [-pi, pi]"""
    return math.atan2(math.sin(angle), math.cos(angle))


def angle_difference(a: float, b: float) -> float:
    """Smallest absolute angular distance between two angles"""
    return abs(wrap_angle(a - b))


def rotate_point_around(point, center, radians: float) -> Vec2:
    """Rotate a point around a center by an angle in radians

    Args:
        point: Point to rotate
        center: Center of rotation
        radians: Rotation angle

    Returns:
        Rotated point
    """
    dx = point.x - center.x
    dy = point.y - center.y

    cos_angle = math.cos(radians)
    sin_angle = math.sin(radians)

    return Vec2(
        center.x + dx * cos_angle - dy * sin_angle,
        center.y + dx * sin_angle + dy * cos_angle,
    )


def scale_point_around(point, center, factor: float) -> Vec2:
    """Uniformly scale a point's offset from a center"""
    return Vec2(
        center.x + (point.x - center.x) * factor,
        center.y + (point.y - center.y) * factor,
    )


# ========================================
# Minimal enclosing circle
# ========================================

def _contains(circle: BoundingCircle, point) -> bool:
    return distance(point, circle.center) <= circle.radius + EPSILON


def _circle_from_two(p1, p2) -> BoundingCircle:
    return BoundingCircle(midpoint(p1, p2), distance(p1, p2) / 2)


def _circle_from_three(p1, p2, p3) -> BoundingCircle:
    d = 2 * (p1.x * (p2.y - p3.y) + p2.x * (p3.y - p1.y) + p3.x * (p1.y - p2.y))

    if abs(d) < EPSILON:
        # Collinear: the smallest pairwise circle that holds all three
        candidates = [_circle_from_two(p1, p2), _circle_from_two(p1, p3), _circle_from_two(p2, p3)]
        best = candidates[0]
        for circle in candidates:
            if all(_contains(circle, p) for p in (p1, p2, p3)) and circle.radius <= best.radius:
                best = circle
        return best

    p1_sq = p1.x * p1.x + p1.y * p1.y
    p2_sq = p2.x * p2.x + p2.y * p2.y
    p3_sq = p3.x * p3.x + p3.y * p3.y

    ux = (p1_sq * (p2.y - p3.y) + p2_sq * (p3.y - p1.y) + p3_sq * (p1.y - p2.y)) / d
    uy = (p1_sq * (p3.x - p2.x) + p2_sq * (p1.x - p3.x) + p3_sq * (p2.x - p1.x)) / d

    center = Vec2(ux, uy)
    return BoundingCircle(center, distance(center, p1))


def minimal_enclosing_circle(points: Iterable) -> BoundingCircle:
    """Smallest circle containing every point

    Degenerate input never raises: an empty set gives a zero circle at
    the origin, a single (or all-coincident) point gives a zero circle
    centered on it.
    """
    pts: List[Vec2] = [Vec2(p.x, p.y) for p in points]
    if not pts:
        return BoundingCircle(Vec2(0.0, 0.0), 0.0)

    circle = BoundingCircle(pts[0], 0.0)
    for i in range(1, len(pts)):
        p = pts[i]
        if _contains(circle, p):
            continue
        circle = BoundingCircle(p, 0.0)
        for j in range(i):
            q = pts[j]
            if _contains(circle, q):
                continue
            circle = _circle_from_two(p, q)
            for k in range(j):
                r = pts[k]
                if not _contains(circle, r):
                    circle = _circle_from_three(p, q, r)

    return circle
