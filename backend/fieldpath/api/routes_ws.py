from __future__ import annotations

import asyncio
import json
import logging
from typing import Set

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool

from fieldpath.deps import get_world
from fieldpath.domain.errors import PlannerError
from fieldpath.schemas.converters import tick_out, world_out
from fieldpath.services.world_service import WorldService

logger = logging.getLogger("fieldpath.ws")
router = APIRouter()


class WsHub:
    """Fan-out of follower ticks to every connected viewer."""

    def __init__(self):
        self._clients: Set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, ws: WebSocket) -> None:
        await ws.accept()
        async with self._lock:
            self._clients.add(ws)

    async def disconnect(self, ws: WebSocket) -> None:
        async with self._lock:
            self._clients.discard(ws)

    async def broadcast(self, message: dict) -> None:
        # Copy references to avoid mutation while iterating
        async with self._lock:
            clients = list(self._clients)
        if not clients:
            return

        logger.debug("Broadcasting %s to %d client(s)", message.get("kind", "?"), len(clients))
        payload = json.dumps(message, ensure_ascii=False)
        dead = []
        for ws in clients:
            try:
                await ws.send_text(payload)
            except (WebSocketDisconnect, RuntimeError):
                dead.append(ws)
        for ws in dead:
            await self.disconnect(ws)


hub = WsHub()


async def _world_payload(world: WorldService) -> dict:
    # the world lock can be held for a whole recompute; keep it off the event loop
    snap = await run_in_threadpool(world.snapshot)
    return world_out(snap).model_dump(mode="json")


@router.websocket("/ws/world")
async def world_stream(ws: WebSocket, world: WorldService = Depends(get_world)):
    """Frame-loop channel for the presentation layer.

    On connect the current snapshot is sent. Client messages:
      {"kind": "tick", "dt": 0.02}  -> follower advances, tick broadcast to all
      {"kind": "snapshot"}          -> snapshot sent back to this client
    """
    await hub.connect(ws)
    try:
        await ws.send_json({"kind": "world", "data": await _world_payload(world)})
        while True:
            msg = await ws.receive_json()
            kind = msg.get("kind") if isinstance(msg, dict) else None
            if kind == "tick":
                try:
                    tick = await run_in_threadpool(world.follow_tick, float(msg.get("dt", 0.0)))
                except (PlannerError, TypeError, ValueError) as e:
                    await ws.send_json({"kind": "error", "data": {"detail": str(e)}})
                    continue
                await hub.broadcast({"kind": "tick", "data": tick_out(tick).model_dump(mode="json")})
            elif kind == "snapshot":
                await ws.send_json({"kind": "world", "data": await _world_payload(world)})
            else:
                await ws.send_json({"kind": "error", "data": {"detail": f"unknown message kind: {kind!r}"}})
    except WebSocketDisconnect:
        pass
    finally:
        await hub.disconnect(ws)
