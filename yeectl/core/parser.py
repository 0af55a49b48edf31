"""Parsing of bulb advertisement payloads into `Bulb` records.

Advertisements are HTTP-like text: a status or request line followed by
CRLF-separated ``Key: Value`` headers. Keys are matched case-sensitively.
Every failure surfaces as `PayloadParseError` so that a single malformed or
foreign datagram never aborts discovery.
"""

from __future__ import annotations

import re

from yeectl.core.errors import PayloadParseError
from yeectl.core.model import HSV, RGB, Bulb, ColorMode, ColorTemperature, Method, Power

LOCATION_KEY = "Location"
_SCHEME_SEPARATOR = "://"
_HEADER_WHITESPACE = " \t"
_INT_RE = re.compile(r"^[+-]?[0-9]+\Z")

_COLOR_MODE_RGB = 1
_COLOR_MODE_CT = 2
_COLOR_MODE_HSV = 3


def _split_headers(text: str) -> dict[str, str]:
    headers: dict[str, str] = {}
    for line in text.split("\r\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip()
        if not key:
            continue
        headers.setdefault(key, value.strip(_HEADER_WHITESPACE))
    return headers


def _require(headers: dict[str, str], key: str) -> str:
    value = headers.get(key)
    if value is None:
        raise PayloadParseError(f"Advertisement is missing required field '{key}'")
    return value


def _require_int(
    headers: dict[str, str],
    key: str,
    *,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    raw = _require(headers, key)
    if not _INT_RE.match(raw):
        raise PayloadParseError(f"Field '{key}' is not an integer: {raw!r}")
    value = int(raw)
    if minimum is not None and value < minimum:
        raise PayloadParseError(f"Field '{key}' must be >= {minimum}, got {value}")
    if maximum is not None and value > maximum:
        raise PayloadParseError(f"Field '{key}' must be <= {maximum}, got {value}")
    return value


def _parse_firmware(raw: str) -> int | str:
    if _INT_RE.match(raw):
        return int(raw)
    return raw


def _parse_support(raw: str) -> frozenset[Method]:
    methods = (Method.from_token(token) for token in raw.split())
    return frozenset(method for method in methods if method is not None)


def _parse_power(raw: str) -> Power:
    try:
        return Power(raw)
    except ValueError as exc:
        raise PayloadParseError(f"Field 'power' must be 'on' or 'off', got {raw!r}") from exc


def _parse_color_mode(headers: dict[str, str]) -> ColorMode:
    mode = _require_int(headers, "color_mode")
    if mode == _COLOR_MODE_RGB:
        return RGB.from_int(_require_int(headers, "rgb", minimum=0))
    if mode == _COLOR_MODE_CT:
        return ColorTemperature(kelvin=_require_int(headers, "ct", minimum=0))
    if mode == _COLOR_MODE_HSV:
        return HSV(
            hue=_require_int(headers, "hue", minimum=0, maximum=359),
            saturation=_require_int(headers, "sat", minimum=0, maximum=100),
        )
    raise PayloadParseError(f"Unknown color_mode discriminator {mode}")


def parse_location(value: str) -> str:
    """Return the ``host:port`` part of a location URI such as ``yeelight://1.2.3.4:55443``."""
    _, sep, address = value.partition(_SCHEME_SEPARATOR)
    address = address.strip().rstrip("/")
    if not sep or not address:
        raise PayloadParseError(f"Location {value!r} does not contain an address")
    return address


def parse_advertisement(payload: bytes | str) -> Bulb:
    """Parse one advertisement payload.

    Raises:
        PayloadParseError: if the payload is not UTF-8, misses a required
            field, or carries a value outside its domain.
    """
    if isinstance(payload, bytes):
        try:
            text = payload.rstrip(b"\x00").decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PayloadParseError(f"Advertisement is not valid UTF-8: {exc}") from exc
    else:
        text = payload

    headers = _split_headers(text)

    return Bulb(
        id=_require(headers, "id"),
        model=_require(headers, "model"),
        firmware_version=_parse_firmware(_require(headers, "fw_ver")),
        supported_methods=_parse_support(_require(headers, "support")),
        power=_parse_power(_require(headers, "power")),
        brightness=_require_int(headers, "bright", minimum=0, maximum=100),
        color_mode=_parse_color_mode(headers),
        name=_require(headers, "name"),
        network_address=parse_location(_require(headers, LOCATION_KEY)),
    )
