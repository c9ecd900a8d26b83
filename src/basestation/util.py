"""
Generally useful stuff that doesn't fit anywhere else
"""

from collections.abc import Callable


def maybe[T](dangerous: Callable[[], T]) -> T | None:
    """
    Executes a callable (function, lambda, etc.) and returns the result. If the callable raises an exception, the
    exception is caught and discarded, and None is returned.
    """
    try:
        return dangerous()
    except Exception:  # pylint: disable=broad-exception-caught
        return None


def parse_bool(value: str) -> bool:
    """
    Interpret a human-written flag such as "true", "no" or "1". Raises ValueError for anything else.
    """
    match value.strip().lower():
        case "true" | "yes" | "on" | "1":
            return True
        case "false" | "no" | "off" | "0":
            return False
        case _:
            raise ValueError(f"not a boolean: {value!r}")
