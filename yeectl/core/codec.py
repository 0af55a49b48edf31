"""Encoding of control commands into the bulb's line-delimited JSON protocol."""

from __future__ import annotations

import json
import re
from collections.abc import Sequence

_INT_TOKEN_RE = re.compile(r"^[+-]?[0-9]+\Z")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
TERMINATOR = "\r\n"


class CommandSession:
    """Owns the command id counter for one control session.

    Ids start at ``start`` and grow by exactly one per issued command.
    """

    def __init__(self, start: int = 0) -> None:
        self._next = start

    def next_id(self) -> int:
        current = self._next
        self._next += 1
        return current


def classify_param(token: str) -> int | str:
    """Return ``token`` as an int when it is a signed 32-bit integer literal."""
    if _INT_TOKEN_RE.match(token):
        value = int(token)
        if _INT32_MIN <= value <= _INT32_MAX:
            return value
    return token


def split_params(text: str) -> list[str]:
    return text.split()


def encode_command(sequence_id: int, method: str, tokens: Sequence[str]) -> bytes:
    message = {
        "id": sequence_id,
        "method": method,
        "params": [classify_param(token) for token in tokens],
    }
    return (json.dumps(message, separators=(",", ":")) + TERMINATOR).encode("utf-8")
