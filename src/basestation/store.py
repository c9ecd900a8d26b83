import threading
from typing import Protocol

from basestation.message import BaseStationMessage
from basestation.model.json import dumps


class MessageStore(Protocol):
    def save(self, message: BaseStationMessage) -> None: ...


class JsonLinesStore:
    """
    Persists messages by appending them, one JSON object per line, to a file.
    """

    def __init__(self, path: str):
        self._path = path
        self._lock = threading.Lock()

    @property
    def path(self) -> str:
        return self._path

    def save(self, message: BaseStationMessage) -> None:
        line = dumps(message) + "\n"
        with self._lock, open(self._path, "at", encoding="utf-8") as f:
            f.write(line)
