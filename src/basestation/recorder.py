import asyncio
from collections.abc import Awaitable, Callable

from basestation.log import log
from basestation.message import BaseStationMessage
from basestation.runnable import Runnable
from basestation.store import MessageStore


Listener = Callable[[BaseStationMessage], Awaitable[None]]


class Recorder(Runnable):
    """
    The recorder is the last stage of the pipeline. It consumes decoded messages from its queue and, if persistence is
    switched on, saves them to a store. Persistence can be switched on and off while running. Listeners registered with
    `add_listener` are given every message whether or not it is persisted.
    """

    def __init__(self, store: MessageStore, persist: bool = True):
        super().__init__()
        self._store = store
        self._persist = persist
        self._listeners: list[Listener] = []
        self.in_queue: asyncio.Queue[BaseStationMessage] = asyncio.Queue()
        log(f"message persistence: {persist}")

    @property
    def persist(self) -> bool:
        return self._persist

    @persist.setter
    def persist(self, persist: bool) -> None:
        log(f"persist messages: {persist}")
        self._persist = persist

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    async def step(self) -> None:
        try:
            message = await self.in_queue.get()
        except asyncio.QueueShutDown:
            return
        try:
            await self.record(message)
        finally:
            self.in_queue.task_done()

    async def record(self, message: BaseStationMessage) -> None:
        if self._persist:
            try:
                await asyncio.to_thread(self._store.save, message)
            except OSError as exc:
                log(f"failed to save message: {exc}")
        for listener in self._listeners:
            await listener(message)

    def stop(self) -> None:
        super().stop()
        self.in_queue.shutdown(immediate=True)
