"""
Utilities for serializing decoded messages into JSON. Example:

    message = decode(line)
    model.json.dumps(message)

This is equivalent to:

    json.dumps(message, default=<private serialization function>, allow_nan=False, separators=(",", ":"))

A message becomes an object holding its message type, its transmission type if it is a transmission, and each of its
fields that isn't None. Timestamps are written in ISO 8601 with their UTC offset.
"""

import dataclasses
from datetime import datetime
import json
from typing import Any

from basestation.domain import StatusType
from basestation.message import BaseStationMessage, TransmissionMessage
from basestation.model.position import Position


def _default(obj: Any) -> Any:
    if isinstance(obj, BaseStationMessage):
        result: dict[str, Any] = {"message_type": obj.message_type.value}
        if isinstance(obj, TransmissionMessage):
            result["transmission_type"] = obj.transmission_type.value
        for field in dataclasses.fields(obj):
            value = getattr(obj, field.name)
            if value is not None:
                result[field.name] = value
        return result
    if isinstance(obj, Position):
        return {"longitude": obj.longitude, "latitude": obj.latitude}
    if isinstance(obj, StatusType):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat(timespec="milliseconds")
    raise TypeError(f"object of type {type(obj).__name__!r} is not JSON serializable")


def dumps(obj: Any) -> str:
    return json.dumps(obj, default=_default, allow_nan=False, separators=(",", ":"))
