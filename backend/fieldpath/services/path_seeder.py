from __future__ import annotations

from typing import List

from fieldpath.domain.errors import InvalidParameter
from fieldpath.utils.vec import Vec2


def seed_path(start: Vec2, target: Vec2, segments: int) -> List[Vec2]:
    """Return ``segments + 1`` evenly spaced points on the segment start -> target.

    Both endpoints are the exact inputs. Callers must check the length
    before handing the result to a spline follower (it needs 4 points).
    """
    if isinstance(segments, bool) or int(segments) != segments or segments < 1:
        raise InvalidParameter(f"segment count must be an integer >= 1, got {segments!r}")
    segments = int(segments)
    sx, sy = float(start[0]), float(start[1])
    tx, ty = float(target[0]), float(target[1])

    points: List[Vec2] = [(sx, sy)]
    for i in range(1, segments):
        t = i / segments
        points.append((sx + (tx - sx) * t, sy + (ty - sy) * t))
    points.append((tx, ty))
    return points
