"""
Drill Team Choreographer - Distribution Service

Spreads a group of horses out evenly:
- along the line joining the two most separated horses
- around a circle (even angular spacing, least-disruptive rotation)
- radially onto the group's outer circle, facing along the tangent

All functions are pure: they take horses and return a dict keyed by
horse id. An empty dict means there is nothing to do.
"""

import math
from typing import Dict, NamedTuple, Sequence

import numpy as np

from constants import CIRCLE_DISTRIBUTION_STEP
from models.transform import Vec2
from utils.geometry import (
    distance, centroid, angle_between, normalize_angle, wrap_angle, angle_difference
)


class DistributedHorse(NamedTuple):
    position: Vec2
    direction: float


def distribute_on_line(horses: Sequence) -> Dict[str, Vec2]:
    """Space horses evenly between the two horses farthest apart

    Every horse is projected onto the line joining the extremes and
    sorted by its projection; the i-th horse lands at t = i / (n - 1).
    The extremes keep their positions.

    Requires at least 3 horses; coincident horses are a no-op.
    """
    if len(horses) < 3:
        return {}

    max_dist = 0.0
    first, second = horses[0], horses[1]
    for i in range(len(horses)):
        for j in range(i + 1, len(horses)):
            d = distance(horses[i].position, horses[j].position)
            if d > max_dist:
                max_dist = d
                first, second = horses[i], horses[j]

    p1 = first.position
    p2 = second.position
    line = p2 - p1
    line_length = math.hypot(line.x, line.y)
    if line_length == 0:
        return {}

    unit_x = line.x / line_length
    unit_y = line.y / line_length

    projections = []
    for order, horse in enumerate(horses):
        offset = horse.position - p1
        projections.append((offset.x * unit_x + offset.y * unit_y, order, horse))
    projections.sort(key=lambda item: (item[0], item[1]))

    last = len(projections) - 1
    result = {}
    for rank, (_, _, horse) in enumerate(projections):
        if horse is first:
            result[horse.id] = p1
        elif horse is second:
            result[horse.id] = p2
        else:
            t = rank / last
            result[horse.id] = Vec2(p1.x + line.x * t, p1.y + line.y * t)
    return result


def tangent_direction(polar_angle: float, current_direction: float) -> float:
    """The tangent at polar_angle (+/- 90 degrees) closer to current_direction"""
    clockwise = polar_angle + math.pi / 2
    counter_clockwise = polar_angle - math.pi / 2
    if angle_difference(current_direction, clockwise) < angle_difference(current_direction, counter_clockwise):
        return normalize_angle(clockwise)
    return normalize_angle(counter_clockwise)


def radial_distribute(horses: Sequence, center, radius: float = None) -> Dict[str, DistributedHorse]:
    """Push every horse out to the group radius along its own polar angle

    Args:
        horses: Objects with id, position and direction
        center: Group center, in the same space as the positions
        radius: Target radius. Defaults to the farthest horse from center.

    Returns:
        Dict of horse id to DistributedHorse. Horses face along the
        tangent closest to their current direction.
    """
    if not horses:
        return {}

    if radius is None:
        radius = max(distance(center, h.position) for h in horses)
    if radius <= 0:
        return {}

    result = {}
    for horse in horses:
        if distance(center, horse.position) == 0:
            # No polar angle to preserve
            polar = 0.0
        else:
            polar = angle_between(center, horse.position)
        position = Vec2(center.x + radius * math.cos(polar), center.y + radius * math.sin(polar))
        result[horse.id] = DistributedHorse(position, tangent_direction(polar, horse.direction or 0.0))
    return result


def distribute_around_circle(horses: Sequence, rotation_step: float = CIRCLE_DISTRIBUTION_STEP) -> Dict[str, DistributedHorse]:
    """Place horses at evenly spaced angles around the group circle

    The circle is centered on the mean position with the farthest horse's
    distance as radius. Horses keep their angular order; the whole even
    arrangement is rotated by the offset (searched in rotation_step
    increments over a full turn) that minimizes total squared
    displacement. Each horse's direction turns by the same amount as its
    position did.

    Requires at least 2 horses; coincident horses are a no-op.
    """
    if len(horses) < 2:
        return {}

    center = centroid([h.position for h in horses])
    radius = max(distance(center, h.position) for h in horses)
    if radius == 0:
        return {}

    polar = [normalize_angle(angle_between(center, h.position)) for h in horses]
    order = sorted(range(len(horses)), key=lambda i: polar[i])
    count = len(horses)

    sorted_polar = np.array([polar[i] for i in order])
    original_x = np.array([horses[i].position.x for i in order])
    original_y = np.array([horses[i].position.y for i in order])
    even = np.arange(count) * (2 * math.pi / count)

    steps = max(1, int(round(2 * math.pi / rotation_step)))
    offsets = np.arange(steps) * rotation_step

    # rows = candidate rotation offsets, columns = horses in angular order
    angles = even[np.newaxis, :] + offsets[:, np.newaxis]
    new_x = center.x + radius * np.cos(angles)
    new_y = center.y + radius * np.sin(angles)
    cost = ((new_x - original_x) ** 2 + (new_y - original_y) ** 2).sum(axis=1)
    best = int(np.argmin(cost))

    result = {}
    for column, index in enumerate(order):
        horse = horses[index]
        angle = float(angles[best, column])
        delta = wrap_angle(angle - float(sorted_polar[column]))
        result[horse.id] = DistributedHorse(
            Vec2(float(new_x[best, column]), float(new_y[best, column])),
            (horse.direction or 0.0) + delta,
        )
    return result
