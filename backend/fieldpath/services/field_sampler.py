from __future__ import annotations

from typing import List, Sequence, Tuple

from fieldpath.domain.errors import InvalidParameter
from fieldpath.domain.models import FieldGrid
from fieldpath.services.composite_field import CompositeField
from fieldpath.utils.vec import Vec2

MIN_RESOLUTION = 0.01

Bounds = Tuple[float, float, float, float]  # min_x, min_y, max_x, max_y


def _axis(lo: float, hi: float, resolution: float) -> Tuple[float, ...]:
    # both edges are always sampled
    count = max(1, int((hi - lo) * max(resolution, MIN_RESOLUTION)))
    spacing = (hi - lo) / count
    return tuple(lo + i * spacing if i < count else hi for i in range(count + 1))


def sample_grid(field: CompositeField, bounds: Sequence[float], x_resolution: float, y_resolution: float) -> FieldGrid:
    """Sample height and gradient of ``field`` on a regular grid.

    Resolutions are samples per unit length.
    """
    min_x, min_y, max_x, max_y = (float(v) for v in bounds)
    if not (max_x > min_x and max_y > min_y):
        raise InvalidParameter(f"empty sampling bounds {tuple(bounds)}")

    frozen = field.snapshot()
    xs = _axis(min_x, max_x, x_resolution)
    ys = _axis(min_y, max_y, y_resolution)

    heights: List[Tuple[float, ...]] = []
    gradients: List[Tuple[Vec2, ...]] = []
    peak = 0.0
    for y in ys:
        row_h: List[float] = []
        row_g: List[Vec2] = []
        for x in xs:
            h, g = frozen.evaluate((x, y))
            row_h.append(h)
            row_g.append(g)
            peak = max(peak, h)
        heights.append(tuple(row_h))
        gradients.append(tuple(row_g))

    return FieldGrid(
        bounds=(min_x, min_y, max_x, max_y),
        xs=xs,
        ys=ys,
        heights=tuple(heights),
        gradients=tuple(gradients),
        shape=frozen.shape.name,
        max_height=peak,
    )
