from __future__ import annotations

from fieldpath.config import settings
from fieldpath.services.world_service import WorldService

# One world per process; tests override get_world with a fresh instance.
world_service = WorldService.from_settings(settings)


def get_world() -> WorldService:
    return world_service
