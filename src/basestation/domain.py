"""
The vocabulary of the BaseStation protocol: message types, transmission types, and status codes.
"""

from enum import Enum, IntEnum
from typing import Self


CALLSIGN_MAX_LENGTH = 8


class MessageType(Enum):
    """
    The value of the first field of every line. `token_count` is the minimum number of comma-separated tokens a line of
    that type must have.
    """

    AIR = "AIR"  # new aircraft
    ID = "ID"  # identification
    MSG = "MSG"  # transmission
    STA = "STA"  # status change
    CLK = "CLK"  # clock
    SEL = "SEL"  # selection change

    @property
    def token_count(self) -> int:
        return _TOKEN_COUNTS[self]

    @classmethod
    def parse(cls, token: str) -> Self | None:
        try:
            return cls(token)
        except ValueError:
            return None


_TOKEN_COUNTS = {
    MessageType.AIR: 10,
    MessageType.ID: 11,
    MessageType.MSG: 22,
    MessageType.STA: 11,
    MessageType.CLK: 10,
    MessageType.SEL: 11,
}


class TransmissionType(IntEnum):
    """
    The second field of an MSG line.
    """

    IDENTIFICATION_AND_CATEGORY = 1
    SURFACE_POSITION = 2
    AIRBORNE_POSITION = 3
    AIRBORNE_VELOCITY = 4
    SURVEILLANCE_ALTITUDE = 5
    SURVEILLANCE_ID = 6
    AIR_TO_AIR = 7
    ALL_CALL_REPLY = 8

    @classmethod
    def from_raw(cls, value: int | None) -> Self | None:
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class StatusType(Enum):
    """
    The status code carried in field 10 of an STA line.
    """

    PL = "PL"  # position lost
    SL = "SL"  # signal lost
    RM = "RM"  # remove, sent when an aircraft is reacquired and its record reset
    AD = "AD"  # delete
    OK = "OK"

    @classmethod
    def parse(cls, token: str) -> Self | None:
        try:
            return cls(token)
        except ValueError:
            return None


_EXPECTED_MESSAGE_TYPES = frozenset((MessageType.AIR, MessageType.ID, MessageType.MSG, MessageType.STA))
_EXPECTED_STATUS_TYPES = frozenset((StatusType.SL, StatusType.RM))


def is_expected_message_type(message_type: MessageType | None) -> bool:
    return message_type in _EXPECTED_MESSAGE_TYPES


def is_expected_status_type(status_type: StatusType | None) -> bool:
    return status_type in _EXPECTED_STATUS_TYPES


def validated_callsign(token: str | None) -> str | None:
    """
    Trim whitespace from a callsign and truncate it to at most eight characters.
    """
    if token is None:
        return None
    return token.strip()[:CALLSIGN_MAX_LENGTH]
