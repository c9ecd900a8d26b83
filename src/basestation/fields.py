"""
Converters from raw feed tokens to typed values. Apart from `parse_timestamp`, these never raise: a token that can't be
converted becomes None, so that one corrupt field doesn't spoil an otherwise good message.
"""

from datetime import date, datetime, time
import math
import re

from basestation import DecodingError
from basestation.model.position import Position


_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_DATE = re.compile(r"([0-9]{4})/([0-9]{2})/([0-9]{2})")
_TIME = re.compile(r"([0-9]{2}):([0-9]{2})(?::([0-9]{2})(?:\.([0-9]{1,9}))?)?")

_SHORT_MIN, _SHORT_MAX = -(2**15), 2**15 - 1
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1

# Length of "HH:mm:ss.fff"
_TRUNCATED_TIME_LENGTH = 12


def _token_as_bounded_int(token: str, lower: int, upper: int) -> int | None:
    if not _INTEGER.fullmatch(token):
        return None
    try:
        value = int(token)
    except ValueError:
        # More digits than the interpreter will convert
        return None
    return value if lower <= value <= upper else None


def token_as_int(token: str) -> int | None:
    """
    Parse a signed 16-bit integer, as used for squawk codes and vertical rates.
    """
    return _token_as_bounded_int(token, _SHORT_MIN, _SHORT_MAX)


def token_as_float(token: str) -> float | None:
    if not _FLOAT.fullmatch(token):
        return None
    value = float(token)
    return value if math.isfinite(value) else None


def token_as_bool(token: str) -> bool | None:
    """
    Parse a flag. The feed sends "-1" for true and "0" for false; any other integer is also taken as true.
    """
    value = _token_as_bounded_int(token, _INT_MIN, _INT_MAX)
    return None if value is None else value != 0


def tokens_as_position(longitude_token: str, latitude_token: str) -> Position | None:
    longitude = token_as_float(longitude_token)
    latitude = token_as_float(latitude_token)
    if longitude is None or latitude is None:
        return None
    return Position.from_lat_lon((latitude, longitude))


def parse_timestamp(date_token: str, time_token: str) -> datetime:
    """
    Combine a "yyyy/MM/dd" date and an "HH:mm:ss.fff" time, both in the local timezone of the machine running this code,
    into an aware datetime. Raises DecodingError if either token is missing or malformed.

    Some feeders send more than three decimal places (values such as "16:01:15.4294967295" have been seen), so any time
    with a longer fraction is cut to "HH:mm:ss.fff" first.
    """
    if not date_token or not time_token:
        raise DecodingError(f"Date ({date_token}) and time ({time_token}) must be provided")

    dot_position = time_token.find(".")
    if dot_position >= 0 and len(time_token) > dot_position + 4:
        if len(time_token) < _TRUNCATED_TIME_LENGTH:
            raise DecodingError(f"Time ({time_token}) is too short to truncate")
        time_token = time_token[:_TRUNCATED_TIME_LENGTH]

    return datetime.combine(_parse_date(date_token), _parse_time(time_token)).astimezone()


def _parse_date(token: str) -> date:
    match = _DATE.fullmatch(token)
    if match is None:
        raise DecodingError(f"Date ({token}) is not in yyyy/MM/dd format")
    try:
        return date(*(int(group) for group in match.groups()))
    except ValueError as exc:
        raise DecodingError(f"Date ({token}) is out of range: {exc}") from exc


def _parse_time(token: str) -> time:
    match = _TIME.fullmatch(token)
    if match is None:
        raise DecodingError(f"Time ({token}) is not in HH:mm:ss.fff format")
    hour, minute, second, fraction = match.groups()
    microsecond = int((fraction or "0").ljust(6, "0")[:6])
    try:
        return time(int(hour), int(minute), int(second or 0), microsecond)
    except ValueError as exc:
        raise DecodingError(f"Time ({token}) is out of range: {exc}") from exc
