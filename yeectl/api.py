"""Stable public API for building tooling on top of yeectl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from yeectl.core.codec import CommandSession, encode_command
from yeectl.core.errors import (
    ConfigError,
    DeviceSelectionError,
    DiscoveryError,
    PayloadParseError,
    SocketBindError,
    TransportConnectError,
    TransportError,
    TransportReceiveError,
    TransportSendError,
    YeectlError,
)
from yeectl.core.model import (
    HSV,
    RGB,
    Bulb,
    ColorMode,
    ColorTemperature,
    CommandResult,
    ControlSettings,
    DiscoverySettings,
    Method,
    Power,
    Settings,
)
from yeectl.core.parser import parse_advertisement
from yeectl.core.service import YeeService
from yeectl.transports.base import Transport
from yeectl.transports.tcp import TCPTransport

__all__ = [
    "YeectlError",
    "ConfigError",
    "DiscoveryError",
    "SocketBindError",
    "PayloadParseError",
    "DeviceSelectionError",
    "TransportError",
    "TransportConnectError",
    "TransportSendError",
    "TransportReceiveError",
    "Bulb",
    "ColorMode",
    "RGB",
    "ColorTemperature",
    "HSV",
    "Method",
    "Power",
    "CommandResult",
    "Settings",
    "DiscoverySettings",
    "ControlSettings",
    "CommandSession",
    "TCPTransport",
    "encode_command",
    "parse_advertisement",
    "Client",
]


class Client:
    """Public client for discovering and controlling bulbs.

    A `Client` owns one command session, so command ids keep increasing across
    every `send` made through the same instance.
    """

    def __init__(
        self,
        *,
        transport: Transport | None = None,
        settings: Settings | None = None,
        config_path: Path | None = None,
    ) -> None:
        self._service = YeeService(transport=transport, settings=settings, config_path=config_path)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    @property
    def settings(self) -> Settings:
        return self._service.settings

    def discover(self) -> list[Bulb]:
        return self._service.discover()

    def resolve(self, hint: str, bulbs: Sequence[Bulb]) -> Bulb:
        return self._service.resolve_bulb(hint, bulbs)

    def send(self, bulb: Bulb, method: str, params: Sequence[str] = ()) -> CommandResult:
        return self._service.send_command(bulb, method, params)

    def run(self, hint: str, method: str, params: Sequence[str] = ()) -> CommandResult:
        return self._service.run_command(hint, method, params)
