"""Radial repulsion shapes.

A shape maps a distance ``r`` from an obstacle center and the obstacle's
clearance radius ``R`` to a scalar height, and gives the gradient along the
outward radial unit vector ``e_r``. Every shape has finite support: height
and gradient are exactly zero for ``r >= R``, and the height reaches zero
continuously at ``r = R``.
"""
from __future__ import annotations

import math
from typing import Dict, Protocol

from fieldpath.utils.vec import Vec2, ZERO, scale


class FieldShape(Protocol):
    name: str

    def height(self, r: float, clearance: float) -> float:
        ...

    def gradient(self, r: float, clearance: float, e_r: Vec2) -> Vec2:
        ...


class CosineShape:
    """Raised cosine: ``V = (b/2)(1 + cos(pi r / b))`` with half-period ``b = R``.

    ``dV/dr = -(pi/2) sin(pi r / b)``, which also vanishes at ``r = R``.
    """

    name = "cosine"

    def height(self, r: float, clearance: float) -> float:
        if r >= clearance:
            return 0.0
        b = clearance
        return b / 2.0 * (1.0 + math.cos(math.pi * r / b))

    def radial_slope(self, r: float, clearance: float) -> float:
        if r >= clearance:
            return 0.0
        return -math.pi / 2.0 * math.sin(math.pi * r / clearance)

    def gradient(self, r: float, clearance: float, e_r: Vec2) -> Vec2:
        return scale(e_r, self.radial_slope(r, clearance))


class GaussianShape:
    """Gaussian bump truncated at ``R`` and shifted so it meets zero there.

    ``sigma = R/2`` and the peak height is ``R``, matching the cosine shape.
    """

    name = "gaussian"

    def _g(self, r: float, sigma: float) -> float:
        return math.exp(-(r * r) / (2.0 * sigma * sigma))

    def height(self, r: float, clearance: float) -> float:
        if r >= clearance:
            return 0.0
        sigma = clearance / 2.0
        floor = self._g(clearance, sigma)
        return clearance * (self._g(r, sigma) - floor) / (1.0 - floor)

    def radial_slope(self, r: float, clearance: float) -> float:
        if r >= clearance:
            return 0.0
        sigma = clearance / 2.0
        floor = self._g(clearance, sigma)
        return clearance / (1.0 - floor) * self._g(r, sigma) * (-r / (sigma * sigma))

    def gradient(self, r: float, clearance: float, e_r: Vec2) -> Vec2:
        slope = self.radial_slope(r, clearance)
        if slope == 0.0:
            return ZERO
        return scale(e_r, slope)


SHAPES: Dict[str, FieldShape] = {
    CosineShape.name: CosineShape(),
    GaussianShape.name: GaussianShape(),
}


def get_shape(name: str) -> FieldShape:
    try:
        return SHAPES[name]
    except KeyError:
        raise ValueError(f"unknown field shape {name!r}; expected one of {sorted(SHAPES)}") from None
