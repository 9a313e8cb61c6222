from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from fieldpath.deps import get_world
from fieldpath.domain.errors import InvalidParameter
from fieldpath.fields.catalog import load_shape_catalog
from fieldpath.schemas.converters import grid_out
from fieldpath.schemas.field import FieldGridOut, FieldSampleRequest, FieldShapeInfo
from fieldpath.services.world_service import WorldService

router = APIRouter()


@router.get("/fields/shapes", response_model=list[FieldShapeInfo])
def list_shapes(world: WorldService = Depends(get_world)):
    active = world.field.shape.name
    return [
        FieldShapeInfo(
            shape_id=s["shape_id"],
            name=s["name"],
            description=s["description"],
            default=bool(s.get("default", False)),
            active=s["shape_id"] == active,
        )
        for s in load_shape_catalog()
    ]


@router.post("/field/sample", response_model=FieldGridOut)
def sample_field(payload: FieldSampleRequest, world: WorldService = Depends(get_world)):
    """Sample the composite field on a grid for the overlay. Read-only."""
    bounds = None
    if payload.bounds is not None:
        b = payload.bounds
        bounds = (b.min_x, b.min_y, b.max_x, b.max_y)
    try:
        grid = world.sample_grid(bounds, payload.x_resolution, payload.y_resolution)
    except InvalidParameter as e:
        raise HTTPException(status_code=400, detail=str(e))
    return grid_out(grid)
