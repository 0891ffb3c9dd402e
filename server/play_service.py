"""Websocket service hosting a single Hearts table."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field, ValidationError

from engine.events import GameEvent
from engine.game import GameSession
from engine.rules_schema import RuleSet
from engine.service import TableService, event_to_wire

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(os.environ.get("HEARTS_STATIC_DIR", Path(__file__).parent.parent / "public"))


class JoinRequest(BaseModel):
    name: str = ""
    request_id: Optional[Any] = Field(None, alias="requestId")


class PlayCardRequest(BaseModel):
    card: str
    request_id: Optional[Any] = Field(None, alias="requestId")


class SeatRequest(BaseModel):
    request_id: Optional[Any] = Field(None, alias="requestId")


class LoopScheduler:
    """Run round restarts on the event loop so table mutations stay on one thread."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class ConnectionHub:
    """Fan engine events out to per-connection outboxes."""

    def __init__(self) -> None:
        self.outboxes: Dict[str, asyncio.Queue] = {}

    def register(self, connection_id: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self.outboxes[connection_id] = queue
        return queue

    def unregister(self, connection_id: str) -> None:
        self.outboxes.pop(connection_id, None)

    def send(self, connection_id: str, payload: Dict[str, object]) -> None:
        queue = self.outboxes.get(connection_id)
        if queue is not None:
            queue.put_nowait(payload)

    def dispatch(self, event: GameEvent) -> None:
        payload = event_to_wire(event)
        if event.recipient is not None:
            self.send(event.recipient, payload)
            return
        for queue in list(self.outboxes.values()):
            queue.put_nowait(payload)


def create_app(rules: Optional[RuleSet] = None) -> FastAPI:
    rules = rules or RuleSet.from_env()
    service = TableService(GameSession(rules=rules, scheduler=LoopScheduler()))
    hub = ConnectionHub()
    service.subscribe(hub.dispatch)

    app = FastAPI(title="Hearts Table Service")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.service = service
    app.state.hub = hub

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/state")
    def table_state() -> Dict[str, Any]:
        return asdict(service.table_view())

    def handle_frame(connection_id: str, data: Any) -> Dict[str, object]:
        if not isinstance(data, dict):
            return {"error": "BadRequest", "message": "Frame must be a JSON object"}
        action = data.get("action")
        try:
            if action == "join":
                join = JoinRequest(**data)
                return {"requestId": join.request_id, **service.join(join.name, player_id=connection_id)}
            if action == "playCard":
                play = PlayCardRequest(**data)
                return {"requestId": play.request_id, **service.play_card(connection_id, play.card)}
            if action == "seat":
                seat = SeatRequest(**data)
                if service.session.find_player(connection_id) is None:
                    return {"requestId": seat.request_id, "error": "NotSeated", "message": "Join first"}
                return {"requestId": seat.request_id, **asdict(service.seat_view(connection_id))}
        except ValidationError as exc:
            return {"requestId": data.get("requestId"), "error": "BadRequest", "message": str(exc)}
        return {"requestId": data.get("requestId"), "error": "BadRequest", "message": f"Unknown action {action!r}"}

    @app.websocket("/ws")
    async def table_socket(websocket: WebSocket) -> None:
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        outbox = hub.register(connection_id)

        async def pump() -> None:
            while True:
                payload = await outbox.get()
                await websocket.send_json(payload)

        sender = asyncio.create_task(pump())
        logger.info("Connection %s opened", connection_id)
        try:
            while True:
                text = await websocket.receive_text()
                try:
                    data = json.loads(text)
                except ValueError:
                    reply = {"error": "BadRequest", "message": "Frame is not valid JSON"}
                else:
                    reply = handle_frame(connection_id, data)
                hub.send(connection_id, {"type": "reply", **reply})
        except WebSocketDisconnect:
            logger.info("Connection %s closed", connection_id)
        finally:
            sender.cancel()
            hub.unregister(connection_id)
            # A seat that was already cleared by an earlier reset leaves nothing to remove.
            if service.session.find_player(connection_id) is not None:
                service.remove_player(connection_id)

    if STATIC_DIR.exists():
        app.mount("/assets", StaticFiles(directory=STATIC_DIR), name="assets")

        @app.get("/")
        def serve_index():
            return FileResponse(STATIC_DIR / "index.html")

    return app


app = create_app()
