"""Align selected horses on a shared row or column.

Each function returns a dict mapping horse id to its new position.
An empty dict means there is nothing to do (fewer than two horses).
"""

from typing import Dict, Sequence

from models.transform import Vec2


def align_horizontally(horses: Sequence) -> Dict[str, Vec2]:
    """Move every horse to the mean Y of the group, keeping X"""
    if len(horses) < 2:
        return {}

    avg_y = sum(h.position.y for h in horses) / len(horses)
    return {h.id: Vec2(h.position.x, avg_y) for h in horses}


def align_vertically(horses: Sequence) -> Dict[str, Vec2]:
    """Move every horse to the mean X of the group, keeping Y"""
    if len(horses) < 2:
        return {}

    avg_x = sum(h.position.x for h in horses) / len(horses)
    return {h.id: Vec2(avg_x, h.position.y) for h in horses}
