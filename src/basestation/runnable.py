from abc import ABC, abstractmethod
import asyncio

from basestation.log import log


class Runnable(ABC):
    """
    Runnable implements an asynchronous "run until told to stop" loop. The loop begins when `run` is awaited and can be
    stopped by calling `stop`. Subclasses implement `step`, which is awaited on each loop cycle, and can implement
    `setup` and/or `teardown` for pre- and post-loop work. Subclasses that wait between attempts at something should
    use `pause`, which returns early when the runnable is stopped.
    """

    def __init__(self, name: str | None = None):
        self._name = type(self).__name__ if name is None else name
        self._running = False
        self._stop_requested = asyncio.Event()

    async def run(self) -> None:
        log(f"{self._name} starting")
        self._running = True
        self._stop_requested.clear()
        await self.setup()
        log(f"{self._name} started")

        while self._running:
            await self.step()

        await self.teardown()
        log(f"{self._name} stopped")

    def stop(self) -> None:
        log(f"{self._name} stopping")
        self._running = False
        self._stop_requested.set()

    def is_running(self) -> bool:
        return self._running

    async def pause(self, seconds: float) -> None:
        try:
            async with asyncio.timeout(seconds):
                await self._stop_requested.wait()
        except TimeoutError:
            pass

    @abstractmethod
    async def step(self) -> None: ...

    async def setup(self) -> None:
        pass

    async def teardown(self) -> None:
        pass
