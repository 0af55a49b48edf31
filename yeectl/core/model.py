"""Core data models used across parser, discovery, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Method(str, Enum):
    GET_PROP = "get_prop"
    SET_DEFAULT = "set_default"
    SET_POWER = "set_power"
    TOGGLE = "toggle"
    SET_BRIGHT = "set_bright"
    START_CF = "start_cf"
    STOP_CF = "stop_cf"
    SET_SCENE = "set_scene"
    CRON_ADD = "cron_add"
    CRON_GET = "cron_get"
    CRON_DEL = "cron_del"
    SET_CT_ABX = "set_ct_abx"
    SET_RGB = "set_rgb"
    SET_HSV = "set_hsv"
    SET_NAME = "set_name"
    SET_ADJUST = "set_adjust"
    SET_MUSIC = "set_music"
    ADJUST_BRIGHT = "adjust_bright"
    ADJUST_CT = "adjust_ct"
    ADJUST_COLOR = "adjust_color"

    @classmethod
    def from_token(cls, token: str) -> Method | None:
        """Return the capability for an advertised token, or None if unknown."""
        try:
            return cls(token)
        except ValueError:
            return None


class Power(str, Enum):
    ON = "on"
    OFF = "off"


@dataclass(frozen=True)
class RGB:
    red: int
    green: int
    blue: int

    @classmethod
    def from_int(cls, value: int) -> RGB:
        """Unpack a ``0xRRGGBB`` integer; bits above 23 are ignored."""
        return cls(
            red=(value >> 16) & 0xFF,
            green=(value >> 8) & 0xFF,
            blue=value & 0xFF,
        )

    def to_int(self) -> int:
        return (self.red << 16) | (self.green << 8) | self.blue

    def __str__(self) -> str:
        return f"{self.red}, {self.green}, {self.blue}"


@dataclass(frozen=True)
class ColorTemperature:
    kelvin: int

    def __str__(self) -> str:
        return f"{self.kelvin}K"


@dataclass(frozen=True)
class HSV:
    hue: int
    saturation: int

    def __str__(self) -> str:
        return f"hue {self.hue}, sat {self.saturation}"


ColorMode = RGB | ColorTemperature | HSV


@dataclass(frozen=True)
class Bulb:
    id: str
    model: str
    firmware_version: int | str
    supported_methods: frozenset[Method]
    power: Power
    brightness: int
    color_mode: ColorMode
    name: str
    network_address: str


@dataclass(frozen=True)
class DiscoverySettings:
    multicast_group: str = "239.255.255.250"
    multicast_port: int = 1982
    service_type: str = "wifi_bulb"
    listen_address: str = "0.0.0.0"
    listen_port: int = 0
    timeout_s: float = 1.2
    pace_s: float = 0.2
    buffer_size: int = 2048


@dataclass(frozen=True)
class ControlSettings:
    default_port: int = 55443
    timeout_s: float = 3.0
    reply_buffer_size: int = 2048


@dataclass(frozen=True)
class Settings:
    discovery: DiscoverySettings = field(default_factory=DiscoverySettings)
    control: ControlSettings = field(default_factory=ControlSettings)


@dataclass(frozen=True)
class CommandResult:
    bulb: Bulb
    method: str
    params: tuple[int | str, ...]
    sequence_id: int
    request: bytes
    reply: bytes

    @property
    def reply_text(self) -> str:
        return self.reply.decode("utf-8", errors="replace").rstrip("\r\n\x00")
