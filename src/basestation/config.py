"""
Startup configuration, read from environment variables.
"""

from collections.abc import Mapping
from dataclasses import dataclass
import os
from typing import Self

from basestation.util import parse_bool


class ConfigError(ValueError):
    """
    Exception raised when an environment variable has a value that can't be used.
    """


@dataclass(frozen=True)
class Config:
    feed_host: str = "localhost"
    feed_port: int = 30003
    persist: bool = True
    store_path: str = "basestation.jsonl"
    api_host: str = ""
    api_port: int = 9999

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> Self:
        """
        Build a Config from BASESTATION_HOST, BASESTATION_PORT, BASESTATION_PERSIST, BASESTATION_STORE_PATH, API_HOST and
        API_PORT. Unset variables take the defaults above.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            feed_host=env.get("BASESTATION_HOST", defaults.feed_host),
            feed_port=_port(env, "BASESTATION_PORT", defaults.feed_port),
            persist=_flag(env, "BASESTATION_PERSIST", defaults.persist),
            store_path=env.get("BASESTATION_STORE_PATH", defaults.store_path),
            api_host=env.get("API_HOST", defaults.api_host),
            api_port=_port(env, "API_PORT", defaults.api_port),
        )


def _port(env: Mapping[str, str], name: str, default: int) -> int:
    if name not in env:
        return default
    try:
        port = int(env[name])
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, not {env[name]!r}") from exc
    if not 0 < port < 65536:
        raise ConfigError(f"{name} must be between 1 and 65535, not {port}")
    return port


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    if name not in env:
        return default
    try:
        return parse_bool(env[name])
    except ValueError as exc:
        raise ConfigError(f"{name}: {exc}") from exc
