"""Multicast discovery of bulbs on the local network."""

from __future__ import annotations

import logging
import queue
import socket
import threading
import time
from collections.abc import Iterable

from yeectl.core.errors import DiscoveryError, PayloadParseError, SocketBindError
from yeectl.core.model import Bulb, DiscoverySettings
from yeectl.core.parser import parse_advertisement

LOGGER = logging.getLogger(__name__)

_MULTICAST_TTL = 2
_JOIN_GRACE_S = 0.5


def build_search_request(settings: DiscoverySettings) -> bytes:
    host = f"{settings.multicast_group}:{settings.multicast_port}"
    lines = [
        "M-SEARCH * HTTP/1.1",
        f"HOST: {host}",
        'MAN: "ssdp:discover"',
        f"ST: {settings.service_type}",
    ]
    return ("\r\n".join(lines) + "\r\n").encode("ascii")


def dedupe_by_id(bulbs: Iterable[Bulb]) -> list[Bulb]:
    """Keep the first record seen for every bulb id, preserving order."""
    seen: set[str] = set()
    unique: list[Bulb] = []
    for bulb in bulbs:
        if bulb.id in seen:
            continue
        seen.add(bulb.id)
        unique.append(bulb)
    return unique


class BulbListener(threading.Thread):
    """Receives advertisements on a bound socket until a fixed deadline.

    Parsed bulbs are put on ``records`` in arrival order. Payloads that fail to
    parse are dropped. The listener pauses ``pace_s`` after every datagram.
    """

    def __init__(
        self,
        sock: socket.socket,
        records: queue.Queue[Bulb],
        *,
        deadline: float,
        pace_s: float,
        buffer_size: int,
    ) -> None:
        super().__init__(name="yeectl-discovery", daemon=True)
        self._sock = sock
        self._records = records
        self._deadline = deadline
        self._pace_s = pace_s
        self._buffer_size = buffer_size

    def run(self) -> None:
        while True:
            remaining = self._deadline - time.monotonic()
            if remaining <= 0:
                return
            try:
                self._sock.settimeout(remaining)
                data, addr = self._sock.recvfrom(self._buffer_size)
            except TimeoutError:
                return
            except OSError as exc:
                LOGGER.debug("Discovery receive loop stopped: %s", exc)
                return

            try:
                bulb = parse_advertisement(data)
            except PayloadParseError as exc:
                LOGGER.debug("Dropping advertisement from %s: %s", addr[0], exc)
            else:
                LOGGER.debug("Advertisement from %s parsed as bulb %s", addr[0], bulb.id)
                self._records.put(bulb)

            if self._pace_s > 0:
                time.sleep(min(self._pace_s, max(self._deadline - time.monotonic(), 0)))


def _create_socket(settings: DiscoverySettings) -> socket.socket:
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    except OSError as exc:
        raise SocketBindError(f"Could not create discovery socket: {exc}") from exc
    try:
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, _MULTICAST_TTL)
        sock.bind((settings.listen_address, settings.listen_port))
    except OSError as exc:
        sock.close()
        raise SocketBindError(
            f"Could not bind discovery socket to {settings.listen_address}:{settings.listen_port}: {exc}"
        ) from exc
    return sock


def discover_bulbs(settings: DiscoverySettings | None = None) -> list[Bulb]:
    """Broadcast a search and collect advertisements for ``settings.timeout_s``.

    Returns bulbs in first-seen order, one per id. An empty list means no bulb
    answered within the window.

    Raises:
        SocketBindError: the listen socket could not be bound.
        DiscoveryError: the search datagram could not be sent.
    """
    settings = settings or DiscoverySettings()
    sock = _create_socket(settings)
    records: queue.Queue[Bulb] = queue.Queue()
    try:
        request = build_search_request(settings)
        try:
            sock.sendto(request, (settings.multicast_group, settings.multicast_port))
        except OSError as exc:
            raise DiscoveryError(
                f"Could not send search to {settings.multicast_group}:{settings.multicast_port}: {exc}"
            ) from exc
        LOGGER.debug(
            "Sent search to %s:%d, listening for %.2fs",
            settings.multicast_group,
            settings.multicast_port,
            settings.timeout_s,
        )

        listener = BulbListener(
            sock,
            records,
            deadline=time.monotonic() + settings.timeout_s,
            pace_s=settings.pace_s,
            buffer_size=settings.buffer_size,
        )
        listener.start()
        listener.join(settings.timeout_s + _JOIN_GRACE_S)
    finally:
        sock.close()

    received: list[Bulb] = []
    while True:
        try:
            received.append(records.get_nowait())
        except queue.Empty:
            break

    bulbs = dedupe_by_id(received)
    LOGGER.info("Discovery found %d bulb(s) from %d advertisement(s)", len(bulbs), len(received))
    return bulbs
