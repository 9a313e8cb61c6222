"""Preflight checks for container startup.

- validates planner configuration
- prints config summary
"""
from __future__ import annotations

from fieldpath.config import settings
from fieldpath.fields.catalog import load_shape_catalog


def main():
    settings.validate_runtime()
    shapes = [s["shape_id"] for s in load_shape_catalog()]
    print("Preflight OK")
    print(f"ENVIRONMENT={settings.environment}")
    print(f"LISTEN={settings.backend_host}:{settings.backend_port}")
    print(f"CORS_ORIGINS={settings.cors_origins}")
    print(f"FIELD={settings.field_length}x{settings.field_width} shape={settings.field_shape} (catalog: {', '.join(shapes)})")
    print(
        f"OPTIMIZER=alpha={settings.descent_rate} eps_height={settings.height_threshold} "
        f"K={settings.max_iterations} segments={settings.segment_count}"
    )
    print(
        f"ROBOT=radius={settings.robot_radius} buffer={settings.clearance_buffer} "
        f"speed={settings.target_speed}"
    )


if __name__ == "__main__":
    main()
