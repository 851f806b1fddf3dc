from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from typing import Callable, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from car import Car, CarConfig, CarError, InvalidFloor

logger = logging.getLogger(__name__)


class FloorCall(BaseModel):
    floor: int


class ResetRequest(BaseModel):
    start_floor: Optional[int] = None


class CarManager:
    """Owns the car and serializes every operation on it."""

    def __init__(self, start_floor: int = 0, config: Optional[CarConfig] = None) -> None:
        self.config = config or CarConfig()
        self.car = Car(start_floor, self.config)
        self.clients: Set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        state = self.car.status().as_dict()
        state["floors"] = {"min_floor": self.config.min_floor, "max_floor": self.config.max_floor}
        return state

    async def request_floor(self, floor: int) -> dict:
        return await self._apply(lambda: self.car.request_floor(floor))

    async def step(self) -> dict:
        return await self._apply(self.car.step)

    async def open_doors(self) -> dict:
        return await self._apply(self.car.open_doors)

    async def close_doors(self) -> dict:
        return await self._apply(self.car.close_doors)

    async def reset(self, start_floor: Optional[int]) -> dict:
        def replace_car() -> None:
            floor = self.config.min_floor if start_floor is None else start_floor
            self.car = Car(floor, self.config)

        return await self._apply(replace_car)

    async def _apply(self, operation: Callable[[], None]) -> dict:
        # A rejected operation may still have changed state (EmptyQueue), so
        # watchers always get the post-operation snapshot.
        error: Optional[CarError] = None
        async with self._lock:
            try:
                operation()
            except CarError as exc:
                error = exc
            state = self.current_state()
        await self.broadcast(state)
        if error is not None:
            error.state = state
            raise error
        return state


manager = CarManager()
app = FastAPI(title="LiftCar Controller API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _rejected(exc: CarError) -> HTTPException:
    status_code = 400 if isinstance(exc, InvalidFloor) else 409
    logger.info("Rejected car operation: %s", exc)
    # Snapshot taken under the lock by CarManager._apply.
    state = getattr(exc, "state", None) or manager.current_state()
    return HTTPException(
        status_code=status_code,
        detail={"error": exc.code, "message": str(exc), "state": state},
    )


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.post("/calls")
async def request_floor(call: FloorCall) -> dict:
    try:
        return await manager.request_floor(call.floor)
    except CarError as exc:
        raise _rejected(exc)


@app.post("/step")
async def step() -> dict:
    try:
        return await manager.step()
    except CarError as exc:
        raise _rejected(exc)


@app.post("/doors/open")
async def open_doors() -> dict:
    try:
        return await manager.open_doors()
    except CarError as exc:
        raise _rejected(exc)


@app.post("/doors/close")
async def close_doors() -> dict:
    try:
        return await manager.close_doors()
    except CarError as exc:
        raise _rejected(exc)


@app.post("/reset")
async def reset(request: ResetRequest) -> dict:
    try:
        return await manager.reset(request.start_floor)
    except CarError as exc:
        raise _rejected(exc)


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
