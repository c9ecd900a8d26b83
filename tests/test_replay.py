import pytest

from basestation import DecodingError
from basestation.replay import line_timestamp, paced


LINES = [
    "MSG,8,333,417,45D967,517,2019/05/11,22:27:09.000,2019/05/11,22:27:09.000,,,,,,,,,,,,0",
    "MSG,8,333,417,45D967,517,2019/05/11,22:27:10.500,2019/05/11,22:27:10.500,,,,,,,,,,,,0",
    "",
    "MSG,8,333,417,45D967,517,2019/05/11,22:27:11.000,2019/05/11,22:27:11.000,,,,,,,,,,,,0",
]


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def test_line_timestamp():
    assert line_timestamp(LINES[1]) > line_timestamp(LINES[0])


def test_line_timestamp_too_short():
    with pytest.raises(DecodingError):
        line_timestamp("MSG,8,333")


def test_paced_sleeps_for_feed_intervals():
    clock = FakeClock()
    replayed = list(paced(LINES, clock=clock, sleep=clock.sleep))
    assert replayed == [LINES[0], LINES[1], LINES[3]]
    assert clock.sleeps == pytest.approx([1.5, 0.5])


def test_paced_passes_through_lines_without_timestamps():
    clock = FakeClock()
    errors: list[int] = []
    replayed = list(paced(["CLK", LINES[0]], clock=clock, sleep=clock.sleep, on_error=lambda n, _: errors.append(n)))
    assert replayed == ["CLK", LINES[0]]
    assert errors == [1]
    assert not clock.sleeps
