import asyncio

from basestation.ingester import FeedIngester
from basestation.message import AirbornePositionMessage, BaseStationMessage, NewAircraftMessage
from basestation.pipeline import FeedCounters, MessagePipeline


FEED = (
    b"AIR,,333,380,4075FD,480,2019/05/11,22:27:09.480,2019/05/11,22:27:09.480\r\n"
    b"\r\n"
    b"CLK,,,,,,2019/05/11,22:27:09.480,2019/05/11,22:27:09.480\r\n"
    b"MSG,3,333,417,45D967,517,2019/05/11,22:27:09.480,,,,39000,,,56.37831,-2.75441,,,0,0,0,0\r\n"
)


def test_ingests_feed():
    counters = FeedCounters()
    received: list[BaseStationMessage] = []

    async def send_feed(_reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        writer.write(FEED)
        await writer.drain()
        writer.close()

    async def scenario() -> None:
        server = await asyncio.start_server(send_feed, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        queue: asyncio.Queue[BaseStationMessage] = asyncio.Queue()
        ingester = FeedIngester(queue, "127.0.0.1", port, MessagePipeline(counters))
        task = asyncio.create_task(ingester.run())
        for _ in range(2):
            received.append(await asyncio.wait_for(queue.get(), 5))
        ingester.stop()
        await asyncio.wait_for(task, 5)
        server.close()

    asyncio.run(scenario())

    assert isinstance(received[0], NewAircraftMessage)
    assert isinstance(received[1], AirbornePositionMessage)
    assert counters.invalid.value >= 1
    assert counters.empty.value >= 1


def test_stop_while_unable_to_connect():
    async def scenario() -> None:
        # Find a port with nothing listening on it.
        server = await asyncio.start_server(lambda r, w: None, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        server.close()
        await server.wait_closed()

        ingester = FeedIngester(asyncio.Queue(), "127.0.0.1", port, MessagePipeline(FeedCounters()))
        task = asyncio.create_task(ingester.run())
        await asyncio.sleep(0.1)
        ingester.stop()
        await asyncio.wait_for(task, 5)

    asyncio.run(scenario())


def test_oversized_line_is_counted_and_skipped():
    counters = FeedCounters()

    async def send_feed(_reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        writer.write(b"X" * 70000 + b"\r\n" + FEED)
        await writer.drain()
        writer.close()

    async def scenario() -> BaseStationMessage:
        server = await asyncio.start_server(send_feed, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        queue: asyncio.Queue[BaseStationMessage] = asyncio.Queue()
        ingester = FeedIngester(queue, "127.0.0.1", port, MessagePipeline(counters))
        task = asyncio.create_task(ingester.run())
        message = await asyncio.wait_for(queue.get(), 5)
        ingester.stop()
        await asyncio.wait_for(task, 5)
        server.close()
        return message

    message = asyncio.run(scenario())

    assert isinstance(message, NewAircraftMessage)
    assert counters.invalid.value >= 1
