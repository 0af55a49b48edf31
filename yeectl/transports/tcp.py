"""TCP control channel, one connection per command."""

from __future__ import annotations

import logging
import socket

from yeectl.core.errors import (
    TransportConnectError,
    TransportReceiveError,
    TransportSendError,
)

LOGGER = logging.getLogger(__name__)


def split_address(address: str, default_port: int) -> tuple[str, int]:
    """Split ``host[:port]`` (or ``[v6]:port``) into a host and port."""
    address = address.strip()
    if address.startswith("["):
        host, sep, rest = address[1:].partition("]")
        if not sep:
            raise TransportConnectError(f"Malformed bulb address '{address}'")
        port_text = rest[1:] if rest.startswith(":") else ""
    elif address.count(":") == 1:
        host, _, port_text = address.partition(":")
    else:
        host, port_text = address, ""

    if not host:
        raise TransportConnectError(f"Malformed bulb address '{address}'")
    if not port_text:
        return host, default_port
    if not (port_text.isascii() and port_text.isdigit()):
        raise TransportConnectError(f"Invalid port in bulb address '{address}'")
    port = int(port_text)
    if not 0 < port < 65536:
        raise TransportConnectError(f"Invalid port in bulb address '{address}'")
    return host, port


class TCPTransport:
    def send(
        self,
        address: str,
        payload: bytes,
        *,
        default_port: int = 55443,
        timeout_s: float = 3.0,
        max_reply_bytes: int = 2048,
    ) -> bytes:
        host, port = split_address(address, default_port)

        try:
            conn = socket.create_connection((host, port), timeout=timeout_s)
        except OSError as exc:
            raise TransportConnectError(f"Connect to {host}:{port} failed: {exc}") from exc

        try:
            try:
                conn.sendall(payload)
            except OSError as exc:
                raise TransportSendError(f"Send to {host}:{port} failed: {exc}") from exc
            LOGGER.debug("Sent %d bytes to %s:%d", len(payload), host, port)

            try:
                return conn.recv(max_reply_bytes)
            except OSError as exc:
                raise TransportReceiveError(
                    f"Command sent to {host}:{port} but reading the reply failed: {exc}"
                ) from exc
        finally:
            conn.close()
