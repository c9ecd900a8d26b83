import asyncio
import functools
import io
import os
import signal
import sys
import traceback

from basestation import api
import basestation.log
from basestation.config import Config, ConfigError
from basestation.ingester import FeedIngester
from basestation.log import log
from basestation.pipeline import FeedCounters, MessagePipeline
from basestation.recorder import Recorder
from basestation.runnable import Runnable
from basestation.store import JsonLinesStore


async def main() -> int:
    basestation.log.set_src_root(os.path.dirname(__file__))

    try:
        config = Config.from_environ()
    except ConfigError as exc:
        log(f"configuration error: {exc}")
        return os.EX_CONFIG

    counters = FeedCounters()
    recorder = Recorder(JsonLinesStore(config.store_path), config.persist)
    runnables: list[Runnable] = [
        recorder,
        api.Server(config.api_host, config.api_port, counters, recorder),
        FeedIngester(recorder.in_queue, config.feed_host, config.feed_port, MessagePipeline(counters)),
    ]

    def graceful_shutdown(signame: str) -> None:
        log(signame)
        for r in runnables:
            r.stop()

    loop = asyncio.get_running_loop()
    for signame in ("SIGINT", "SIGTERM"):
        loop.add_signal_handler(getattr(signal, signame), functools.partial(graceful_shutdown, signame))

    try:
        await asyncio.gather(*[r.run() for r in runnables])
    except Exception as exc:  # pylint: disable=broad-exception-caught
        log("uncaught exception")
        traceback_buffer = io.StringIO()
        traceback.print_exception(exc, file=traceback_buffer)
        log(traceback_buffer.getvalue())
        return os.EX_SOFTWARE

    log(f"final counts: {counters.snapshot()}")
    return os.EX_OK


def run() -> None:
    exit_status = asyncio.run(main())
    log(f"sys.exit({exit_status})")
    sys.exit(exit_status)


if __name__ == "__main__":
    run()
