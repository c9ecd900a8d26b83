"""
The message pipeline sits between the transport and the rest of the system: it takes raw payloads, decodes them, and
keeps count of what happened to each one.
"""

from dataclasses import dataclass, field
import re
import threading

from basestation import DecodingError
from basestation.decoder import decode
from basestation.log import log
from basestation.message import BaseStationMessage


_QUOTED = re.compile(r"'.*'")
_PARENTHESIZED = re.compile(r"\(.*\)")
_NUMBER = re.compile(r"[0-9]+")


class Counter:
    """
    A counter that can be incremented safely from multiple threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


@dataclass(frozen=True)
class FeedCounters:
    """
    Counts of payloads by outcome. Empty payloads are occasionally seen in the feed from dump1090-mutability. Invalid
    payloads are those that fail to decode; dropped payloads are transmission lines with an unknown transmission type.
    """

    empty: Counter = field(default_factory=Counter)
    invalid: Counter = field(default_factory=Counter)
    dropped: Counter = field(default_factory=Counter)
    valid: Counter = field(default_factory=Counter)

    def snapshot(self) -> dict[str, int]:
        return {
            "empty": self.empty.value,
            "invalid": self.invalid.value,
            "dropped": self.dropped.value,
            "valid": self.valid.value,
        }


class MessagePipeline:
    """
    Decodes payloads and counts the results. Each distinct decoding error is logged the first time it is seen only, so
    that a feeder stuck sending the same bad data doesn't flood the log.
    """

    VALID_COUNT_LOG_INTERVAL = 1000

    def __init__(self, counters: FeedCounters):
        self._counters = counters
        self._errors_seen: set[str] = set()
        self._errors_lock = threading.Lock()

    @property
    def counters(self) -> FeedCounters:
        return self._counters

    def handle(self, payload: bytes | str | None) -> BaseStationMessage | None:
        """
        Decode one payload. Returns the decoded message, or None if the payload was empty, invalid, or dropped.
        """
        if isinstance(payload, bytes):
            try:
                line = str(payload, encoding="ASCII")
            except UnicodeDecodeError:
                self._counters.invalid.increment()
                self._log_once(repr(payload), "not 7-bit ASCII")
                return None
        else:
            line = payload or ""

        line = line.strip()
        if not line:
            self._counters.empty.increment()
            return None

        try:
            message = decode(line)
        except DecodingError as exc:
            self._counters.invalid.increment()
            self._log_once(repr(line), str(exc))
            return None

        if message is None:
            self._counters.dropped.increment()
            self._log_once(repr(line), "unknown transmission type")
            return None

        count = self._counters.valid.increment()
        if count % self.VALID_COUNT_LOG_INTERVAL == 0:
            log(f"valid message count = {count}")
        return message

    def overrun(self, exc: Exception) -> None:
        """
        Count a line the transport had to discard because it was longer than its buffer.
        """
        self._counters.invalid.increment()
        self._log_once("line too long", str(exc))

    def _log_once(self, subject: str, error: str) -> None:
        kind = error_kind(error)
        with self._errors_lock:
            if kind in self._errors_seen:
                return
            self._errors_seen.add(kind)
        log(f"{subject}: {error} (future errors of this kind will be suppressed)")


def error_kind(error: str) -> str:
    """
    Reduce an error message to its template by blanking out the quoted and parenthesized feed content and numbers it
    contains, so that errors differing only in the offending values are treated as one kind.
    """
    return _NUMBER.sub("#", _PARENTHESIZED.sub("()", _QUOTED.sub("''", error)))
