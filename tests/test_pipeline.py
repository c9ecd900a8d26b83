from concurrent.futures import ThreadPoolExecutor

from basestation.message import AirbornePositionMessage, NewAircraftMessage
from basestation.pipeline import Counter, FeedCounters, MessagePipeline, error_kind


AIR_LINE = b"AIR,,333,380,4075FD,480,2019/05/11,22:27:09.480,2019/05/11,22:27:09.480\r\n"
MSG_LINE = b"MSG,3,333,417,45D967,517,2019/05/11,22:27:09.480,,,,39000,,,56.37831,-2.75441,,,0,0,0,0\r\n"
UNKNOWN_TRANSMISSION_LINE = b"MSG,9,333,417,45D967,517,2019/05/11,22:27:09.480,,,,39000,,,56.37831,-2.75441,,,0,0,0,0"


def test_counter_is_thread_safe():
    counter = Counter()
    with ThreadPoolExecutor(max_workers=8) as executor:
        for _ in range(8):
            executor.submit(lambda: [counter.increment() for _ in range(1000)])
    assert counter.value == 8000


def test_valid_payloads():
    counters = FeedCounters()
    pipeline = MessagePipeline(counters)

    assert isinstance(pipeline.handle(AIR_LINE), NewAircraftMessage)
    assert isinstance(pipeline.handle(MSG_LINE.decode()), AirbornePositionMessage)
    assert counters.snapshot() == {"empty": 0, "invalid": 0, "dropped": 0, "valid": 2}


def test_empty_payloads():
    counters = FeedCounters()
    pipeline = MessagePipeline(counters)

    assert pipeline.handle(None) is None
    assert pipeline.handle(b"") is None
    assert pipeline.handle(b"\r\n") is None
    assert counters.empty.value == 3


def test_invalid_payloads():
    counters = FeedCounters()
    pipeline = MessagePipeline(counters)

    assert pipeline.handle(b"CLK") is None
    assert pipeline.handle(b"STA") is None
    assert pipeline.handle(b"AIR,\xff") is None
    assert counters.invalid.value == 3
    assert counters.valid.value == 0


def test_unknown_transmission_type_is_dropped():
    counters = FeedCounters()
    pipeline = MessagePipeline(counters)

    assert pipeline.handle(UNKNOWN_TRANSMISSION_LINE) is None
    assert counters.dropped.value == 1
    assert counters.invalid.value == 0


def test_repeated_errors_are_logged_once(capsys):
    pipeline = MessagePipeline(FeedCounters())

    for _ in range(3):
        pipeline.handle(b"CLK")

    assert capsys.readouterr().err.count("Unexpected message type: 'CLK'") == 1


def test_errors_differing_only_in_content_are_logged_once(capsys):
    counters = FeedCounters()
    pipeline = MessagePipeline(counters)

    for i in range(10000):
        pipeline.handle(f"JUNK{i},x")
    pipeline.handle(b"MSG,1,333")
    pipeline.handle(b"MSG,1,334")

    err = capsys.readouterr().err
    assert err.count("Unknown message type") == 1
    assert err.count("Expected 22 tokens but found 3") == 1
    assert counters.invalid.value == 10002
    assert len(pipeline._errors_seen) == 2


def test_overrun_is_counted_as_invalid(capsys):
    counters = FeedCounters()
    pipeline = MessagePipeline(counters)

    pipeline.overrun(ValueError("Separator is not found, and chunk exceed the limit"))
    pipeline.overrun(ValueError("Separator is not found, and chunk exceed the limit"))

    assert counters.invalid.value == 2
    assert capsys.readouterr().err.count("line too long") == 1


def test_error_kind():
    assert error_kind("Unknown message type: 'JUNK1'") == error_kind("Unknown message type: 'JUNK22'")
    assert error_kind("Date (2019/13/01) is out of range: x") == error_kind("Date (2020/14/01) is out of range: x")
    assert error_kind("Unknown message type: 'A'") != error_kind("Unexpected message type: 'CLK'")
