from __future__ import annotations

from typing import List, Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ------------------------------------------------------------
    # Server
    # ------------------------------------------------------------
    backend_host: str = "0.0.0.0"
    backend_port: int = 8080
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"

    # ------------------------------------------------------------
    # CORS
    # ------------------------------------------------------------
    # Comma-separated origins, e.g.:
    # "http://localhost:3000,http://localhost:5173"
    cors_origins: str = "http://localhost:3000"

    # ------------------------------------------------------------
    # Playing field (metres)
    # ------------------------------------------------------------
    field_length: float = 16.46
    field_width: float = 8.23

    # ------------------------------------------------------------
    # Robot / target defaults
    # ------------------------------------------------------------
    robot_radius: float = 0.5
    clearance_buffer: float = 0.1034
    start_x: float = 2.0
    start_y: float = 2.0
    target_x: float = 5.0
    target_y: float = 5.0
    target_speed: float = 2.0

    # ------------------------------------------------------------
    # Field shape and path optimization
    # ------------------------------------------------------------
    field_shape: str = "cosine"  # cosine | gaussian
    segment_count: int = 20
    descent_rate: float = 0.1
    height_threshold: float = 0.01
    max_iterations: int = 1000
    min_step: float = 0.0001
    min_spacing: float = 0.0  # 0 disables clump pruning
    auto_replan: bool = True

    # ------------------------------------------------------------
    # Overlay sampling (samples per metre)
    # ------------------------------------------------------------
    grid_x_resolution: float = 2.0
    grid_y_resolution: float = 2.0

    @property
    def cors_origins_list(self) -> List[str]:
        return [x.strip() for x in self.cors_origins.split(",") if x.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def start(self) -> Tuple[float, float]:
        return (self.start_x, self.start_y)

    @property
    def target(self) -> Tuple[float, float]:
        return (self.target_x, self.target_y)

    def validate_runtime(self) -> None:
        """Fail fast on planner constants that can never produce a usable path."""
        from fieldpath.fields.shapes import SHAPES

        problems = []
        if self.field_shape not in SHAPES:
            problems.append(f"FIELD_SHAPE={self.field_shape!r} (known: {', '.join(sorted(SHAPES))})")
        if self.robot_radius < 0 or self.clearance_buffer < 0:
            problems.append("ROBOT_RADIUS and CLEARANCE_BUFFER must be >= 0")
        if self.segment_count < 3:
            problems.append("SEGMENT_COUNT must be >= 3 so the path can be followed")
        if self.descent_rate <= 0 or self.target_speed <= 0:
            problems.append("DESCENT_RATE and TARGET_SPEED must be > 0")
        if self.max_iterations < 1:
            problems.append("MAX_ITERATIONS must be >= 1")
        if problems:
            raise RuntimeError(f"Invalid planner configuration: {'; '.join(problems)}")


settings = Settings()
settings.validate_runtime()
