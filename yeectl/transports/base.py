"""Transport interfaces."""

from __future__ import annotations

from typing import Protocol


class Transport(Protocol):
    def send(
        self,
        address: str,
        payload: bytes,
        *,
        default_port: int = 55443,
        timeout_s: float = 3.0,
        max_reply_bytes: int = 2048,
    ) -> bytes:
        """Send payload to a bulb and return the raw reply bytes."""
