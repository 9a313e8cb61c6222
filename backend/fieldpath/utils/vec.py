"""Tiny 2D vector helpers over plain ``(x, y)`` tuples."""
from __future__ import annotations

import math
from typing import Tuple

Vec2 = Tuple[float, float]

ZERO: Vec2 = (0.0, 0.0)


def sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def scale(a: Vec2, k: float) -> Vec2:
    return (a[0] * k, a[1] * k)


def norm(a: Vec2) -> float:
    return math.hypot(a[0], a[1])


def dist(a: Vec2, b: Vec2) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def unit(a: Vec2, eps: float = 1e-12) -> Vec2:
    """Normalized copy of ``a``; the zero vector when ``a`` is (near) zero."""
    n = norm(a)
    if n <= eps:
        return ZERO
    return (a[0] / n, a[1] / n)


def left_normal(a: Vec2) -> Vec2:
    return (-a[1], a[0])


def as_vec(p) -> Vec2:
    """Coerce a pair-like (tuple, list, pydantic Point) into a float tuple."""
    if hasattr(p, "x") and hasattr(p, "y"):
        return (float(p.x), float(p.y))
    return (float(p[0]), float(p[1]))
