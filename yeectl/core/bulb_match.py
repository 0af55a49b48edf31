"""Bulb selection from a user-supplied hint."""

from __future__ import annotations

from collections.abc import Sequence

from yeectl.core.model import Bulb


def _host(bulb: Bulb) -> str:
    host, _, _ = bulb.network_address.rpartition(":")
    return host or bulb.network_address


def _by_index(hint: str, bulbs: Sequence[Bulb]) -> Bulb | None:
    if not (hint.isascii() and hint.isdigit()):
        return None
    index = int(hint)
    if 1 <= index <= len(bulbs):
        return bulbs[index - 1]
    return None


def match_score(bulb: Bulb, hint: str) -> int:
    if hint == bulb.id:
        return 4
    if hint in (bulb.network_address, _host(bulb)):
        return 3
    if bulb.name and hint == bulb.name:
        return 2
    if bulb.name and hint.lower() in bulb.name.lower():
        return 1
    return 0


def matching_bulbs(hint: str, bulbs: Sequence[Bulb]) -> list[Bulb]:
    """Return the bulbs best matching ``hint``.

    A number is a 1-based position in ``bulbs``. Otherwise id beats address,
    address beats exact name, exact name beats a case-insensitive substring of
    the name. Only the bulbs sharing the top score are returned.
    """
    indexed = _by_index(hint, bulbs)
    if indexed is not None:
        return [indexed]

    best_score = 0
    best: list[Bulb] = []
    for bulb in bulbs:
        score = match_score(bulb, hint)
        if score == 0 or score < best_score:
            continue
        if score > best_score:
            best_score = score
            best = []
        best.append(bulb)
    return best
