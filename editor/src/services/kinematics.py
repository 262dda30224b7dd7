"""Gait and movement math.

Maps gaits to speeds and direction-arrow lengths, turns an arrow drag
back into a direction and gait, and infers how long a frame should last
from how far its horses travel before the next frame.
"""

import math

from constants import (
    HORSE_LENGTH_METERS, ARROW_WALK_THRESHOLD, ARROW_TROT_THRESHOLD,
    ANGLE_SNAP_INCREMENT, MIN_FRAME_DURATION, MAX_FRAME_DURATION
)
from models.gait import Gait
from utils.geometry import normalize_angle, distance


def gait_speed(gait) -> float:
    """Speed of a gait in meters per second"""
    return Gait.parse(gait).speed


def arrow_length(gait, horse_length=HORSE_LENGTH_METERS) -> float:
    """Length of the direction arrow drawn ahead of a horse"""
    return horse_length * Gait.parse(gait).arrow_multiplier


def arrow_end_position(gait, horse_length=HORSE_LENGTH_METERS):
    """Arrow tip in the horse's local frame (+x = forward, origin = horse center)"""
    return (horse_length / 2 + arrow_length(gait, horse_length), 0.0)


def gait_from_arrow_length(length, horse_length=HORSE_LENGTH_METERS) -> Gait:
    """Pick the gait whose arrow length band contains length"""
    if length < horse_length * ARROW_WALK_THRESHOLD:
        return Gait.WALK
    if length < horse_length * ARROW_TROT_THRESHOLD:
        return Gait.TROT
    return Gait.CANTER


def snap_angle_to_45(angle) -> float:
    """Snap an angle to the nearest multiple of 45 degrees, normalized to [0, 2pi)"""
    snapped = round(angle / ANGLE_SNAP_INCREMENT) * ANGLE_SNAP_INCREMENT
    return normalize_angle(snapped)


def direction_and_gait_from_drag(local_dx, local_dy, current_direction,
                                 horse_length=HORSE_LENGTH_METERS, snap_to_45=False):
    """Direction and gait from an arrow handle dragged in the horse's local frame

    Args:
        local_dx, local_dy: Arrow tip relative to the horse center, +x = forward
        current_direction: Horse direction in radians
        horse_length: Horse length in the same units as the drag
        snap_to_45: Snap the resulting direction to 45 degree steps

    Returns:
        (direction, gait)
    """
    local_angle = math.atan2(local_dy, local_dx)
    direction = normalize_angle(current_direction + local_angle)
    if snap_to_45:
        direction = snap_angle_to_45(direction)

    length = math.hypot(local_dx, local_dy)
    return direction, gait_from_arrow_length(length, horse_length)


# ========================================
# Frame duration
# ========================================

def max_distance_moved(from_frame, to_frame) -> float:
    """Largest distance (meters) any horse travels between two frames

    Horses are matched by label. Returns 0 when no horses match.
    """
    previous = {str(h.label): h for h in from_frame.horses}
    max_dist = 0.0
    for horse in to_frame.horses:
        match = previous.get(str(horse.label))
        if match is not None:
            max_dist = max(max_dist, distance(match.position, horse.position))
    return max_dist


def effective_speed(frame) -> float:
    """Frame gait speed times its multiplier (walk x1 when unset)"""
    gait = frame.speed if frame.speed is not None else Gait.WALK
    multiplier = frame.speed_multiplier if frame.speed_multiplier is not None else 1.0
    return gait.speed * multiplier


def compute_duration_from_movement(frame, next_frame) -> float:
    """Seconds needed to move from frame to next_frame at the frame's speed

    The last frame (no next frame) and frames with a non-positive speed
    keep their current duration. Results are clamped to the allowed range.
    """
    if next_frame is None:
        return frame.duration
    speed = effective_speed(frame)
    if speed <= 0:
        return frame.duration
    duration = max_distance_moved(frame, next_frame) / speed
    return max(MIN_FRAME_DURATION, min(MAX_FRAME_DURATION, duration))
