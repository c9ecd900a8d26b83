"""
These are the objects returned by `decode`. Every line of the feed that decodes successfully produces exactly one of
the concrete classes below; the set is closed, so code consuming messages can `match` on the class to know which
fields exist.

Field layout of a transmission (MSG) line, by token index:

    1 transmission type     11 altitude        15 longitude       19 emergency
    4 ICAO address          12 ground speed    16 vertical rate   20 ident active
    6 date generated        13 track           17 squawk          21 on ground
    7 time generated        14 latitude        18 alert
   10 callsign

The columns don't move between transmission types; each type only reads the columns that are meaningful for it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Self

from basestation.domain import MessageType, StatusType, TransmissionType, validated_callsign
from basestation.fields import token_as_bool, token_as_float, token_as_int, tokens_as_position
from basestation.model.position import Position


_CALLSIGN = 10
_ALTITUDE = 11
_GROUND_SPEED = 12
_TRACK = 13
_LATITUDE = 14
_LONGITUDE = 15
_VERTICAL_RATE = 16
_SQUAWK = 17
_ALERT = 18
_EMERGENCY = 19
_IDENT_ACTIVE = 20
_ON_GROUND = 21


@dataclass(frozen=True)
class BaseStationMessage(ABC):
    """
    Base class for all decoded messages. Every message has the ICAO address of the aircraft it concerns and the time at
    which the receiver generated it.
    """

    message_type: ClassVar[MessageType]

    icao_address: str
    timestamp: datetime


@dataclass(frozen=True)
class NewAircraftMessage(BaseStationMessage):
    """
    Sent the first time the receiver hears from an aircraft.
    """

    message_type = MessageType.AIR


@dataclass(frozen=True)
class IdMessage(BaseStationMessage):
    """
    Sent when an aircraft's callsign is first received or changes.
    """

    message_type = MessageType.ID

    callsign: str | None

    @classmethod
    def from_tokens(cls, icao_address: str, timestamp: datetime, tokens: list[str]) -> Self:
        return cls(icao_address, timestamp, validated_callsign(tokens[_CALLSIGN]))


@dataclass(frozen=True)
class StatusMessage(BaseStationMessage):
    """
    Sent when the receiver's view of an aircraft changes, for example when its signal is lost.
    """

    message_type = MessageType.STA

    status: StatusType


@dataclass(frozen=True)
class TransmissionMessage(BaseStationMessage, ABC):
    """
    Base class for the eight kinds of MSG line, one per transmission type. Subclasses carry only the fields their
    transmission type provides, and any of those may be None if the feed sent something unparseable.
    """

    message_type = MessageType.MSG
    transmission_type: ClassVar[TransmissionType]

    @classmethod
    @abstractmethod
    def from_tokens(cls, icao_address: str, timestamp: datetime, tokens: list[str]) -> Self:
        pass


@dataclass(frozen=True)
class IdentificationAndCategoryMessage(TransmissionMessage):
    """
    MSG,1: ES identification and category.
    """

    transmission_type = TransmissionType.IDENTIFICATION_AND_CATEGORY

    callsign: str | None

    @classmethod
    def from_tokens(cls, icao_address: str, timestamp: datetime, tokens: list[str]) -> Self:
        return cls(icao_address, timestamp, validated_callsign(tokens[_CALLSIGN]))


@dataclass(frozen=True)
class SurfacePositionMessage(TransmissionMessage):
    """
    MSG,2: ES surface position.
    """

    transmission_type = TransmissionType.SURFACE_POSITION

    altitude: float | None
    ground_speed: float | None
    track: float | None
    position: Position | None
    on_ground: bool | None

    @classmethod
    def from_tokens(cls, icao_address: str, timestamp: datetime, tokens: list[str]) -> Self:
        return cls(
            icao_address,
            timestamp,
            altitude=token_as_float(tokens[_ALTITUDE]),
            ground_speed=token_as_float(tokens[_GROUND_SPEED]),
            track=token_as_float(tokens[_TRACK]),
            position=tokens_as_position(tokens[_LONGITUDE], tokens[_LATITUDE]),
            on_ground=token_as_bool(tokens[_ON_GROUND]),
        )


@dataclass(frozen=True)
class AirbornePositionMessage(TransmissionMessage):
    """
    MSG,3: ES airborne position.
    """

    transmission_type = TransmissionType.AIRBORNE_POSITION

    altitude: float | None
    position: Position | None
    alert: bool | None
    emergency: bool | None
    ident_active: bool | None
    on_ground: bool | None

    @classmethod
    def from_tokens(cls, icao_address: str, timestamp: datetime, tokens: list[str]) -> Self:
        return cls(
            icao_address,
            timestamp,
            altitude=token_as_float(tokens[_ALTITUDE]),
            position=tokens_as_position(tokens[_LONGITUDE], tokens[_LATITUDE]),
            alert=token_as_bool(tokens[_ALERT]),
            emergency=token_as_bool(tokens[_EMERGENCY]),
            ident_active=token_as_bool(tokens[_IDENT_ACTIVE]),
            on_ground=token_as_bool(tokens[_ON_GROUND]),
        )


@dataclass(frozen=True)
class AirborneVelocityMessage(TransmissionMessage):
    """
    MSG,4: ES airborne velocity.
    """

    transmission_type = TransmissionType.AIRBORNE_VELOCITY

    ground_speed: float | None
    track: float | None
    vertical_rate: int | None

    @classmethod
    def from_tokens(cls, icao_address: str, timestamp: datetime, tokens: list[str]) -> Self:
        return cls(
            icao_address,
            timestamp,
            ground_speed=token_as_float(tokens[_GROUND_SPEED]),
            track=token_as_float(tokens[_TRACK]),
            vertical_rate=token_as_int(tokens[_VERTICAL_RATE]),
        )


@dataclass(frozen=True)
class SurveillanceAltitudeMessage(TransmissionMessage):
    """
    MSG,5: surveillance altitude. Triggered by ground radar, not CRC secured.
    """

    transmission_type = TransmissionType.SURVEILLANCE_ALTITUDE

    altitude: float | None
    alert: bool | None
    ident_active: bool | None
    on_ground: bool | None

    @classmethod
    def from_tokens(cls, icao_address: str, timestamp: datetime, tokens: list[str]) -> Self:
        return cls(
            icao_address,
            timestamp,
            altitude=token_as_float(tokens[_ALTITUDE]),
            alert=token_as_bool(tokens[_ALERT]),
            ident_active=token_as_bool(tokens[_IDENT_ACTIVE]),
            on_ground=token_as_bool(tokens[_ON_GROUND]),
        )


@dataclass(frozen=True)
class SurveillanceIdMessage(TransmissionMessage):
    """
    MSG,6: surveillance ID. Triggered by ground radar, not CRC secured.
    """

    transmission_type = TransmissionType.SURVEILLANCE_ID

    altitude: float | None
    squawk: int | None
    alert: bool | None
    emergency: bool | None
    ident_active: bool | None
    on_ground: bool | None

    @classmethod
    def from_tokens(cls, icao_address: str, timestamp: datetime, tokens: list[str]) -> Self:
        return cls(
            icao_address,
            timestamp,
            altitude=token_as_float(tokens[_ALTITUDE]),
            squawk=token_as_int(tokens[_SQUAWK]),
            alert=token_as_bool(tokens[_ALERT]),
            emergency=token_as_bool(tokens[_EMERGENCY]),
            ident_active=token_as_bool(tokens[_IDENT_ACTIVE]),
            on_ground=token_as_bool(tokens[_ON_GROUND]),
        )


@dataclass(frozen=True)
class AirToAirMessage(TransmissionMessage):
    """
    MSG,7: air-to-air. Triggered by TCAS.
    """

    transmission_type = TransmissionType.AIR_TO_AIR

    altitude: float | None
    on_ground: bool | None

    @classmethod
    def from_tokens(cls, icao_address: str, timestamp: datetime, tokens: list[str]) -> Self:
        return cls(
            icao_address,
            timestamp,
            altitude=token_as_float(tokens[_ALTITUDE]),
            on_ground=token_as_bool(tokens[_ON_GROUND]),
        )


@dataclass(frozen=True)
class AllCallReplyMessage(TransmissionMessage):
    """
    MSG,8: all-call reply. Broadcast, but also triggered by ground radar.
    """

    transmission_type = TransmissionType.ALL_CALL_REPLY

    on_ground: bool | None

    @classmethod
    def from_tokens(cls, icao_address: str, timestamp: datetime, tokens: list[str]) -> Self:
        return cls(icao_address, timestamp, on_ground=token_as_bool(tokens[_ON_GROUND]))


TRANSMISSION_MESSAGE_CLASSES: dict[TransmissionType, type[TransmissionMessage]] = {
    cls.transmission_type: cls
    for cls in (
        IdentificationAndCategoryMessage,
        SurfacePositionMessage,
        AirbornePositionMessage,
        AirborneVelocityMessage,
        SurveillanceAltitudeMessage,
        SurveillanceIdMessage,
        AirToAirMessage,
        AllCallReplyMessage,
    )
}
