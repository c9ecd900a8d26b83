import json

from basestation.api import Server
from basestation.pipeline import FeedCounters
from basestation.recorder import Recorder


class NullStore:
    def save(self, message) -> None:
        pass


def _server(persist: bool = True) -> tuple[Server, FeedCounters, Recorder]:
    counters = FeedCounters()
    recorder = Recorder(NullStore(), persist=persist)
    return Server("127.0.0.1", 0, counters, recorder), counters, recorder


def test_status():
    server, counters, _ = _server()
    counters.valid.increment()
    counters.invalid.increment()
    assert json.loads(server.status()) == {
        "type": "status",
        "counters": {"empty": 0, "invalid": 1, "dropped": 0, "valid": 1},
        "persist": True,
    }


def test_persist_command():
    server, _, recorder = _server(persist=True)
    server.handle_command('{"persist": false}')
    assert recorder.persist is False
    server.handle_command(b'{"persist": true}')
    assert recorder.persist is True


def test_bad_commands_are_ignored():
    server, _, recorder = _server(persist=True)
    server.handle_command("not json")
    server.handle_command('{"persist": "no"}')
    server.handle_command("[1, 2]")
    assert recorder.persist is True
