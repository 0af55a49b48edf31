from __future__ import annotations

import pytest

from yeectl.core.errors import PayloadParseError
from yeectl.core.model import HSV, RGB, ColorTemperature, Method, Power
from yeectl.core.parser import parse_advertisement, parse_location

_BASE_FIELDS = {
    "Cache-Control": "max-age=3600",
    "Location": "yeelight://192.168.1.239:55443",
    "Server": "POSIX UPnP/1.0 YGLC/1",
    "id": "0x000000000015243f",
    "model": "color",
    "fw_ver": "18",
    "support": "get_prop set_default set_power toggle set_bright start_cf stop_cf set_scene cron_add cron_get cron_del set_ct_abx set_rgb",
    "power": "on",
    "bright": "100",
    "color_mode": "2",
    "ct": "4000",
    "rgb": "16711680",
    "hue": "100",
    "sat": "35",
    "name": "my_bulb",
}


def _payload(drop: tuple[str, ...] = (), **overrides: str) -> str:
    fields = {**_BASE_FIELDS, **overrides}
    lines = ["HTTP/1.1 200 OK"]
    lines.extend(f"{key}: {value}" for key, value in fields.items() if key not in drop)
    return "\r\n".join(lines) + "\r\n"


def test_parse_full_advertisement() -> None:
    bulb = parse_advertisement(_payload().encode("utf-8"))
    assert bulb.id == "0x000000000015243f"
    assert bulb.model == "color"
    assert bulb.firmware_version == 18
    assert bulb.power is Power.ON
    assert bulb.brightness == 100
    assert bulb.color_mode == ColorTemperature(kelvin=4000)
    assert bulb.name == "my_bulb"
    assert bulb.network_address == "192.168.1.239:55443"
    assert Method.SET_RGB in bulb.supported_methods
    assert len(bulb.supported_methods) == 13


def test_trailing_nul_padding_is_ignored() -> None:
    bulb = parse_advertisement(_payload().encode("utf-8") + b"\x00" * 64)
    assert bulb.name == "my_bulb"


def test_rgb_mode_unpacks_and_repacks() -> None:
    bulb = parse_advertisement(_payload(color_mode="1", rgb=str(0x12ABEF)))
    assert bulb.color_mode == RGB(red=0x12, green=0xAB, blue=0xEF)
    assert bulb.color_mode.to_int() == 0x12ABEF


def test_rgb_upper_bits_are_ignored() -> None:
    bulb = parse_advertisement(_payload(color_mode="1", rgb=str(0x7F00FF00)))
    assert bulb.color_mode == RGB(red=0, green=0xFF, blue=0)


def test_hsv_mode() -> None:
    bulb = parse_advertisement(_payload(color_mode="3", hue="359", sat="0"))
    assert bulb.color_mode == HSV(hue=359, saturation=0)


@pytest.mark.parametrize("mode", ["0", "4", "-1", "rgb"])
def test_unknown_color_mode_rejected(mode: str) -> None:
    with pytest.raises(PayloadParseError):
        parse_advertisement(_payload(color_mode=mode))


def test_unselected_variant_fields_are_ignored() -> None:
    bulb = parse_advertisement(_payload(drop=("hue", "sat"), color_mode="1", ct="not-a-number"))
    assert isinstance(bulb.color_mode, RGB)


@pytest.mark.parametrize(
    "field",
    ["id", "model", "fw_ver", "support", "power", "bright", "color_mode", "name", "Location"],
)
def test_missing_required_field_rejected(field: str) -> None:
    with pytest.raises(PayloadParseError):
        parse_advertisement(_payload(drop=(field,)))


@pytest.mark.parametrize(
    ("mode", "dependent"),
    [("1", "rgb"), ("2", "ct"), ("3", "hue"), ("3", "sat")],
)
def test_missing_color_subfield_rejected(mode: str, dependent: str) -> None:
    with pytest.raises(PayloadParseError):
        parse_advertisement(_payload(drop=(dependent,), color_mode=mode))


def test_keys_are_case_sensitive() -> None:
    payload = _payload(drop=("Location",)) + "LOCATION: yeelight://10.0.0.2:55443\r\n"
    with pytest.raises(PayloadParseError):
        parse_advertisement(payload)


def test_unknown_support_tokens_are_dropped() -> None:
    bulb = parse_advertisement(_payload(support="toggle  future_method set_power"))
    assert bulb.supported_methods == frozenset({Method.TOGGLE, Method.SET_POWER})


def test_empty_name_is_allowed() -> None:
    bulb = parse_advertisement(_payload(name=""))
    assert bulb.name == ""


def test_non_numeric_firmware_kept_as_string() -> None:
    bulb = parse_advertisement(_payload(fw_ver="1.4.2_0059"))
    assert bulb.firmware_version == "1.4.2_0059"


@pytest.mark.parametrize("bright", ["101", "-1", "high", "255"])
def test_brightness_out_of_domain_rejected(bright: str) -> None:
    with pytest.raises(PayloadParseError):
        parse_advertisement(_payload(bright=bright))


@pytest.mark.parametrize(("hue", "sat"), [("360", "50"), ("10", "101")])
def test_hsv_out_of_domain_rejected(hue: str, sat: str) -> None:
    with pytest.raises(PayloadParseError):
        parse_advertisement(_payload(color_mode="3", hue=hue, sat=sat))


def test_invalid_power_rejected() -> None:
    with pytest.raises(PayloadParseError):
        parse_advertisement(_payload(power="maybe"))


def test_non_utf8_payload_rejected() -> None:
    with pytest.raises(PayloadParseError):
        parse_advertisement(b"\xff\xfe\xfa garbage")


def test_foreign_ssdp_response_rejected() -> None:
    payload = (
        "HTTP/1.1 200 OK\r\n"
        "CACHE-CONTROL: max-age=1800\r\n"
        "LOCATION: http://192.168.1.1:49152/rootDesc.xml\r\n"
        "ST: upnp:rootdevice\r\n"
    )
    with pytest.raises(PayloadParseError):
        parse_advertisement(payload)


def test_parse_location() -> None:
    assert parse_location("yeelight://10.0.0.5:55443") == "10.0.0.5:55443"
    with pytest.raises(PayloadParseError):
        parse_location("10.0.0.5:55443")
    with pytest.raises(PayloadParseError):
        parse_location("yeelight://")


@pytest.mark.parametrize("bright", ["1_00", "５0", "\u00a05", "5\x0b", "5 0", "0x10"])
def test_non_decimal_integer_syntax_rejected(bright: str) -> None:
    with pytest.raises(PayloadParseError):
        parse_advertisement(_payload(bright=bright))


def test_header_padding_around_value_is_ignored() -> None:
    bulb = parse_advertisement(_payload(bright="\t 42 "))
    assert bulb.brightness == 42


def test_firmware_with_python_only_int_syntax_kept_verbatim() -> None:
    bulb = parse_advertisement(_payload(fw_ver="1_2"))
    assert bulb.firmware_version == "1_2"
