from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel


class Point(BaseModel):
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def of(cls, p) -> "Point":
        return cls(x=p[0], y=p[1])
