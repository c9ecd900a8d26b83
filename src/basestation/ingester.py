import asyncio
from typing import cast

from basestation.log import log
from basestation.message import BaseStationMessage
from basestation.pipeline import MessagePipeline
from basestation.runnable import Runnable


class FeedIngester(Runnable):
    """
    The feed ingester makes a TCP connection to a service that provides the BaseStation feed (port 30003 on dump1090
    and fr24feed), passes each line to a MessagePipeline, and delivers each decoded message to an asyncio Queue.

    If the ingester is unable to connect to the feed, or the existing connection fails, the ingester retries the
    connection indefinitely.
    """

    RETRY_INTERVAL_SECS = 1

    def __init__(
        self, out_queue: asyncio.Queue[BaseStationMessage], host: str, port: int, pipeline: MessagePipeline
    ):
        super().__init__()
        self._queue = out_queue
        self._host = host
        self._port = port
        self._pipeline = pipeline
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None

    async def setup(self) -> None:
        while self.is_running():
            log(f"connecting to {self._host}:{self._port}")
            try:
                self._reader, self._writer = await asyncio.open_connection(self._host, self._port)
                log("connected")
                return
            except ConnectionRefusedError:
                log("connection refused")
            except OSError as exc:
                log(f"OSError: {exc}")
            await self.pause(self.RETRY_INTERVAL_SECS)

    async def step(self) -> None:
        if self._reader is None:
            # Stopped before a connection was made.
            return

        try:
            line = await cast(asyncio.StreamReader, self._reader).readline()
        except OSError as exc:
            log(f"read failed: {exc}")
            line = b""
        except (ValueError, asyncio.LimitOverrunError) as exc:
            # The reader has already discarded the oversized data.
            self._pipeline.overrun(exc)
            return

        if not line:
            if not self.is_running():
                return
            log("connection closed unexpectedly")
            await self._close()
            await self.setup()
            return

        message = self._pipeline.handle(line)
        if message is None:
            return

        try:
            self._queue.put_nowait(message)
        except asyncio.QueueShutDown:
            # If we get here this means the system is performing a graceful shutdown.
            pass

    def stop(self) -> None:
        super().stop()
        # Closing the connection wakes up a pending readline.
        if self._writer is not None:
            self._writer.close()

    async def teardown(self) -> None:
        await self._close()

    async def _close(self) -> None:
        if self._writer is not None:
            self._writer.close()
        self._reader = None
        self._writer = None
