"""Session settings and client configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import TYPE_CHECKING, Any, Callable

from .logger import LogLevel

if TYPE_CHECKING:
    from .logger import BoundLogger
    from .transport.base import Transport


class SettingsFlag(IntFlag):
    NO_FLAGS = 0x00
    ENABLE_LOG = 0x01
    VERIFY_PEER = 0x02
    VERIFY_HOST = 0x04
    ALL_FLAGS = 0xFF


@dataclass(frozen=True)
class Settings:
    """Capabilities chosen when a session starts.

    Verification stays on unless explicitly turned off.
    """

    enable_logging: bool = True
    verify_peer: bool = True
    verify_host: bool = True

    @classmethod
    def all(cls) -> "Settings":
        return cls()

    @classmethod
    def none(cls) -> "Settings":
        return cls(enable_logging=False, verify_peer=False, verify_host=False)

    @classmethod
    def from_flags(cls, flags: int) -> "Settings":
        flags = SettingsFlag(flags & SettingsFlag.ALL_FLAGS)
        return cls(
            enable_logging=bool(flags & SettingsFlag.ENABLE_LOG),
            verify_peer=bool(flags & SettingsFlag.VERIFY_PEER),
            verify_host=bool(flags & SettingsFlag.VERIFY_HOST),
        )

    @classmethod
    def coerce(cls, value: "Settings | int") -> "Settings":
        if isinstance(value, Settings):
            return value
        return cls.from_flags(value)

    def to_flags(self) -> SettingsFlag:
        flags = SettingsFlag.NO_FLAGS
        if self.enable_logging:
            flags |= SettingsFlag.ENABLE_LOG
        if self.verify_peer:
            flags |= SettingsFlag.VERIFY_PEER
        if self.verify_host:
            flags |= SettingsFlag.VERIFY_HOST
        return flags


TransportFactory = Callable[["BoundLogger"], "Transport"]


@dataclass
class ClientOptions:
    logger: Any | None = None
    log_level: LogLevel = "info"
    timeout: int = 0
    no_signal: bool = False
    ssl_cert_file: str = ""
    ssl_key_file: str = ""
    ssl_key_password: str = ""
    transport_factory: TransportFactory | None = None


__all__ = ["ClientOptions", "Settings", "SettingsFlag", "TransportFactory"]
