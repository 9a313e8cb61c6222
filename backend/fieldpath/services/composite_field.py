from __future__ import annotations

from typing import Iterable, List, Tuple

from fieldpath.domain.models import Obstacle
from fieldpath.fields.shapes import FieldShape, get_shape
from fieldpath.services.obstacle_field import obstacle_gradient, obstacle_height, obstacle_potential, radial
from fieldpath.utils.vec import Vec2


class CompositeField:
    """Linear superposition of every obstacle's potential.

    ``obstacles`` is read on every call. Passing the live registry keeps the
    field in step with edits; ``snapshot()`` freezes the current set for a
    computation that spans several steps.
    """

    def __init__(self, obstacles: Iterable[Obstacle], shape: FieldShape | str = "cosine"):
        self._obstacles = obstacles
        self.shape: FieldShape = get_shape(shape) if isinstance(shape, str) else shape

    @property
    def obstacles(self) -> Tuple[Obstacle, ...]:
        return tuple(self._obstacles)

    def snapshot(self) -> "CompositeField":
        return CompositeField(tuple(self._obstacles), self.shape)

    def evaluate(self, p: Vec2) -> Tuple[float, Vec2]:
        height = 0.0
        gx = gy = 0.0
        for ob in self._obstacles:
            h, g = obstacle_potential(ob, p, self.shape)
            height += h
            gx += g[0]
            gy += g[1]
        return height, (gx, gy)

    def height(self, p: Vec2) -> float:
        return sum((obstacle_height(ob, p, self.shape) for ob in self._obstacles), 0.0)

    def gradient(self, p: Vec2) -> Vec2:
        gx = gy = 0.0
        for ob in self._obstacles:
            g = obstacle_gradient(ob, p, self.shape)
            gx += g[0]
            gy += g[1]
        return (gx, gy)

    def clearance_violations(self, p: Vec2, tolerance: float = 0.0) -> List[Obstacle]:
        """Obstacles whose clearance disk strictly contains ``p``."""
        hits = []
        for ob in self._obstacles:
            r, _ = radial(ob, p)
            if r < ob.clearance_radius - tolerance:
                hits.append(ob)
        return hits
