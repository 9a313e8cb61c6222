from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from fieldpath import __version__
from fieldpath.config import settings
from fieldpath.observability.logging import configure_logging
from fieldpath.api.routes_health import router as health_router
from fieldpath.api.routes_obstacles import router as obstacles_router
from fieldpath.api.routes_robot import router as robot_router
from fieldpath.api.routes_path import router as path_router
from fieldpath.api.routes_field import router as field_router
from fieldpath.api.routes_ws import router as ws_router
from fieldpath.deps import world_service

configure_logging()
logger = logging.getLogger("fieldpath")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting fieldpath planner API")
    logger.info("   Environment: %s", settings.environment)
    logger.info("   Field shape: %s, robot radius %.3f, buffer %.4f",
                settings.field_shape, settings.robot_radius, settings.clearance_buffer)

    # Initial plan so the first frame has something to draw
    result = await run_in_threadpool(world_service.recompute)
    logger.info("Initial path: %d waypoints, %s", len(result.path), result.report.status.value)

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title="fieldpath planner API",
    version=__version__,
    lifespan=lifespan,
)


@app.get("/")
def root():
    return {
        "name": "fieldpath planner API",
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
    }


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(health_router)
app.include_router(obstacles_router)
app.include_router(robot_router)
app.include_router(path_router)
app.include_router(field_router)
app.include_router(ws_router)


def run() -> None:
    import uvicorn

    uvicorn.run("fieldpath.main:app", host=settings.backend_host, port=settings.backend_port)
