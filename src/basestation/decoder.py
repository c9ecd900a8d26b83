"""
Decoder for lines of the BaseStation feed.
"""

from basestation import DecodingError
from basestation.domain import (
    MessageType,
    StatusType,
    TransmissionType,
    is_expected_message_type,
    is_expected_status_type,
)
from basestation.fields import parse_timestamp, token_as_int
from basestation.message import (
    TRANSMISSION_MESSAGE_CLASSES,
    BaseStationMessage,
    IdMessage,
    NewAircraftMessage,
    StatusMessage,
)


_TRANSMISSION_TYPE = 1
_ICAO_ADDRESS = 4
_DATE_GENERATED = 6
_TIME_GENERATED = 7
_STATUS = 10


def decode(line: str | None) -> BaseStationMessage | None:
    """
    This is the entry point to message decoding. `line` is one line of the feed, with or without its line terminator,
    for example "AIR,,333,380,4075FD,480,2019/05/11,22:27:09.480,2019/05/11,22:27:09.480".

    Returns a subclass of BaseStationMessage. Returns None for a transmission (MSG) line whose transmission type is
    missing or unknown; such lines are meant to be dropped rather than treated as errors. Raises DecodingError if the
    line is malformed.

    This function is pure and may be called concurrently from any number of threads.
    """
    tokens = line.strip().split(",") if line else []
    if not tokens or tokens == [""]:
        raise DecodingError("Message token array has zero length")

    message_type = MessageType.parse(tokens[0])
    if message_type is None:
        raise DecodingError(f"Unknown message type: '{tokens[0]}'")
    if not is_expected_message_type(message_type):
        raise DecodingError(f"Unexpected message type: '{message_type.value}'")

    if len(tokens) < message_type.token_count:
        raise DecodingError(f"Expected {message_type.token_count} tokens but found {len(tokens)}")

    icao_address = tokens[_ICAO_ADDRESS]
    if not icao_address:
        raise DecodingError("ICAO address must be provided")
    timestamp = parse_timestamp(tokens[_DATE_GENERATED], tokens[_TIME_GENERATED])

    match message_type:
        case MessageType.AIR:
            return NewAircraftMessage(icao_address, timestamp)
        case MessageType.ID:
            return IdMessage.from_tokens(icao_address, timestamp, tokens)
        case MessageType.STA:
            status = StatusType.parse(tokens[_STATUS])
            if status is None or not is_expected_status_type(status):
                raise DecodingError(f"Unexpected status message type: '{tokens[_STATUS]}'")
            return StatusMessage(icao_address, timestamp, status)
        case MessageType.MSG:
            transmission_type = TransmissionType.from_raw(token_as_int(tokens[_TRANSMISSION_TYPE]))
            if transmission_type is None:
                return None
            return TRANSMISSION_MESSAGE_CLASSES[transmission_type].from_tokens(icao_address, timestamp, tokens)
        case _:
            raise DecodingError(f"Unexpected message type received: '{message_type.value}'")
