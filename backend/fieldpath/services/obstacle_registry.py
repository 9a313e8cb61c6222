from __future__ import annotations

import logging
from typing import Dict, Iterator

from fieldpath.domain.errors import UnknownObstacle
from fieldpath.domain.models import Obstacle
from fieldpath.utils.ids import new_id
from fieldpath.utils.vec import Vec2, as_vec

logger = logging.getLogger("fieldpath.obstacles")


class ObstacleRegistry:
    """The single owner of the obstacle set.

    Obstacles are frozen values; move/resize swap in a new value under the
    same id. Any validation error is raised before the swap, so a rejected
    edit leaves the registry untouched. Iterating yields the current
    obstacles in insertion order.
    """

    def __init__(self, robot_radius: float = 0.0, buffer_radius: float = 0.0):
        self.robot_radius = robot_radius
        self.buffer_radius = buffer_radius
        self._items: Dict[str, Obstacle] = {}

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, obstacle_id: object) -> bool:
        return obstacle_id in self._items

    def add(self, name: str, position: Vec2, radius: float) -> Obstacle:
        ob = Obstacle(
            id=new_id("obs"),
            name=name,
            center=as_vec(position),
            radius=float(radius),
            robot_radius=self.robot_radius,
            buffer_radius=self.buffer_radius,
        )
        self._items[ob.id] = ob
        logger.info("Added obstacle %s (%s) at (%.3f, %.3f) r=%.3f", ob.id, name, *ob.center, ob.radius)
        return ob

    def get(self, obstacle_id: str) -> Obstacle:
        try:
            return self._items[obstacle_id]
        except KeyError:
            raise UnknownObstacle(obstacle_id) from None

    def move(self, obstacle_id: str, position: Vec2) -> Obstacle:
        ob = self.get(obstacle_id).moved_to(as_vec(position))
        self._items[obstacle_id] = ob
        return ob

    def resize(self, obstacle_id: str, radius: float) -> Obstacle:
        ob = self.get(obstacle_id).resized(radius)
        self._items[obstacle_id] = ob
        return ob

    def delete(self, obstacle_id: str) -> Obstacle:
        ob = self.get(obstacle_id)
        del self._items[obstacle_id]
        logger.info("Deleted obstacle %s (%s)", ob.id, ob.name)
        return ob
