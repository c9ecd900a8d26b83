"""
This is a developer utility that plays back a captured BaseStation feed. It was written to enable development without a
live receiver.

The archive is a text file of BaseStation lines, as saved by, for example, `nc localhost 30003 > archive.txt`. It is
read from the path given as the first argument, or from basestation.txt in the current working directory. Lines are
printed to stdout with delays computed from their date and time generated fields so that the replay runs at the same
rate as the original feed. Lines whose timestamp can't be read are reported on stderr and sent without delay.

When the end of the archive is reached, the replay starts over at the beginning. Thus the replay runs indefinitely on
a loop.

To use this script as a feed for the processor, you can pipe it into `nc`:

    python3 -m basestation.replay archive.txt | nc -l 30003

Then point the processor at it:

    BASESTATION_HOST=localhost python3 -m basestation
"""

from collections.abc import Callable, Iterable, Iterator
from datetime import datetime
import sys
import time

from basestation import DecodingError
from basestation.fields import parse_timestamp


ARCHIVE_PATH = "basestation.txt"

_DATE_GENERATED = 6
_TIME_GENERATED = 7


def line_timestamp(line: str) -> datetime:
    """
    Return the time a line was generated. Raises DecodingError if the line has no usable date and time.
    """
    tokens = line.split(",")
    if len(tokens) <= _TIME_GENERATED:
        raise DecodingError(f"Expected at least {_TIME_GENERATED + 1} tokens but found {len(tokens)}")
    return parse_timestamp(tokens[_DATE_GENERATED], tokens[_TIME_GENERATED])


def paced(
    lines: Iterable[str],
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    on_error: Callable[[int, Exception], None] | None = None,
) -> Iterator[str]:
    """
    Yield each non-blank line once as much real time has passed since the first line as passed in the original feed.
    """
    first_timestamp: datetime | None = None
    t0 = clock()
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue

        try:
            timestamp = line_timestamp(line)
        except DecodingError as exc:
            if on_error is not None:
                on_error(lineno, exc)
            yield line
            continue

        if first_timestamp is None:
            first_timestamp = timestamp
            t0 = clock()
        else:
            real_elapsed = clock() - t0
            sim_elapsed = (timestamp - first_timestamp).total_seconds()
            sleep_needed = sim_elapsed - real_elapsed
            if sleep_needed > 0:
                sleep(sleep_needed)

        yield line


def main(argv: list[str]) -> None:
    path = argv[1] if len(argv) > 1 else ARCHIVE_PATH

    def report(lineno: int, exc: Exception) -> None:
        print(f"{path}:{lineno}: {exc}", file=sys.stderr)

    while True:
        with open(path, "rt", encoding="ascii", errors="replace") as f:
            for line in paced(f, on_error=report):
                print(line, end="\r\n", flush=True)


if __name__ == "__main__":
    main(sys.argv)
