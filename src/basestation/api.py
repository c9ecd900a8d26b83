import asyncio
from collections.abc import Awaitable
import json
from typing import Any

import websockets
from websockets.asyncio.server import serve, ServerConnection, Server as WebsocketsServer

from basestation.log import log
from basestation.message import BaseStationMessage
from basestation.model.json import dumps
from basestation.pipeline import FeedCounters
from basestation.recorder import Recorder
from basestation.runnable import Runnable


class Server(Runnable):
    """
    A websocket server for monitoring and controlling the feed processor. Once a second, every connected client is sent
    a status message with the feed counters and whether messages are being persisted:

        {"type":"status","counters":{"empty":0,"invalid":2,"dropped":0,"valid":1234},"persist":true}

    Every message the recorder consumes is also sent to clients as it arrives:

        {"type":"message","message":{"message_type":"MSG","transmission_type":3,...}}

    A client can switch persistence on or off by sending {"persist": true} or {"persist": false}.
    """

    STATUS_INTERVAL_SECS = 1

    def __init__(self, listen_host: str, listen_port: int, counters: FeedCounters, recorder: Recorder):
        super().__init__()
        self._listen_host = listen_host
        self._listen_port = listen_port
        self._counters = counters
        self._recorder = recorder
        self._server: WebsocketsServer | None = None
        self._clients: list[ServerConnection] = []
        recorder.add_listener(self.on_message)

    async def setup(self) -> None:
        asyncio.create_task(self._serve())

    async def step(self) -> None:
        await self.pause(self.STATUS_INTERVAL_SECS)
        await self._broadcast(self.status())

    async def teardown(self) -> None:
        if self._server:
            self._server.close()

    def status(self) -> str:
        return json.dumps(
            {"type": "status", "counters": self._counters.snapshot(), "persist": self._recorder.persist},
            separators=(",", ":"),
        )

    async def on_message(self, message: BaseStationMessage) -> None:
        if self._clients:
            await self._broadcast(f'{{"type":"message","message":{dumps(message)}}}')

    def handle_command(self, raw: str | bytes) -> None:
        try:
            command: Any = json.loads(raw)
        except ValueError as exc:
            log(f"ignoring malformed command {raw!r}: {exc}")
            return
        match command:
            case {"persist": bool(persist)}:
                self._recorder.persist = persist
            case _:
                log(f"ignoring unknown command {raw!r}")

    async def _broadcast(self, message: str) -> None:
        futures: list[Awaitable[None]] = []
        try:
            for ws in self._clients:
                futures.append(ws.send(message))
            await asyncio.gather(*futures)
        except websockets.WebSocketException as exc:
            log(f"websocket exception: {exc}")

    async def _serve(self) -> None:
        async with serve(self._handler, self._listen_host, self._listen_port) as server:
            log(f"listening on {self._listen_host}:{self._listen_port}")
            self._server = server
            await server.wait_closed()
        log("stopped listening")

    async def _handler(self, ws: ServerConnection) -> None:
        log(f"{ws.remote_address[0]}:{ws.remote_address[1]}: connection established")
        self._clients.append(ws)
        try:
            async for raw in ws:
                self.handle_command(raw)
        except websockets.ConnectionClosedError as exc:
            log(f"{ws.remote_address[0]}:{ws.remote_address[1]}: {exc}")
        finally:
            self._clients.remove(ws)
        log(f"{ws.remote_address[0]}:{ws.remote_address[1]}: connection closed")
