"""Potential of a single obstacle."""
from __future__ import annotations

import math
from typing import Tuple

from fieldpath.domain.models import Obstacle
from fieldpath.fields.shapes import FieldShape
from fieldpath.utils.vec import Vec2, ZERO

# Below this distance the radial direction is undefined.
SINGULAR_EPS = 5e-5


def radial(obstacle: Obstacle, p: Vec2) -> Tuple[float, Vec2]:
    """Distance from the obstacle center and the outward unit vector.

    At the center the direction is the zero vector.
    """
    dx = p[0] - obstacle.center[0]
    dy = p[1] - obstacle.center[1]
    r = math.hypot(dx, dy)
    if r < SINGULAR_EPS:
        return r, ZERO
    return r, (dx / r, dy / r)


def obstacle_height(obstacle: Obstacle, p: Vec2, shape: FieldShape) -> float:
    r, _ = radial(obstacle, p)
    return shape.height(r, obstacle.clearance_radius)


def obstacle_gradient(obstacle: Obstacle, p: Vec2, shape: FieldShape) -> Vec2:
    r, e_r = radial(obstacle, p)
    if e_r is ZERO:
        return ZERO
    return shape.gradient(r, obstacle.clearance_radius, e_r)


def obstacle_potential(obstacle: Obstacle, p: Vec2, shape: FieldShape) -> Tuple[float, Vec2]:
    r, e_r = radial(obstacle, p)
    R = obstacle.clearance_radius
    height = shape.height(r, R)
    if e_r is ZERO:
        return height, ZERO
    return height, shape.gradient(r, R, e_r)
