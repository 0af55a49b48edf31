"""Service layer used by CLI, the interactive shell, and the public API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from yeectl.core.bulb_match import matching_bulbs
from yeectl.core.codec import CommandSession, classify_param, encode_command
from yeectl.core.config import load_settings
from yeectl.core.discovery import discover_bulbs
from yeectl.core.errors import DeviceSelectionError
from yeectl.core.model import Bulb, CommandResult, Settings
from yeectl.transports.base import Transport
from yeectl.transports.tcp import TCPTransport

LOGGER = logging.getLogger(__name__)


class YeeService:
    def __init__(
        self,
        *,
        transport: Transport | None = None,
        settings: Settings | None = None,
        config_path: Path | None = None,
        session: CommandSession | None = None,
    ) -> None:
        if settings is None:
            loaded = load_settings(config_path)
            settings = loaded.settings
            self.load_warnings = loaded.warnings
        else:
            self.load_warnings = ()
        self.settings = settings
        self.transport = transport or TCPTransport()
        self.session = session or CommandSession()

    def discover(self) -> list[Bulb]:
        return discover_bulbs(self.settings.discovery)

    def resolve_bulb(self, hint: str, bulbs: Sequence[Bulb]) -> Bulb:
        if not bulbs:
            raise DeviceSelectionError("No bulbs found. Ensure your bulbs are online and LAN control is enabled.")

        candidates = matching_bulbs(hint, bulbs)
        if not candidates:
            raise DeviceSelectionError(f"No bulb found matching '{hint}'")
        if len(candidates) > 1:
            candidate_desc = ", ".join(f"{b.network_address} ({b.name or b.id})" for b in candidates)
            raise DeviceSelectionError(
                f"Multiple bulbs match '{hint}': {candidate_desc}. Use an index, id, or address."
            )
        return candidates[0]

    def send_command(self, bulb: Bulb, method: str, params: Sequence[str] = ()) -> CommandResult:
        sequence_id = self.session.next_id()
        request = encode_command(sequence_id, method, params)
        LOGGER.debug("Sending command %d (%s) to %s", sequence_id, method, bulb.network_address)

        control = self.settings.control
        reply = self.transport.send(
            bulb.network_address,
            request,
            default_port=control.default_port,
            timeout_s=control.timeout_s,
            max_reply_bytes=control.reply_buffer_size,
        )

        return CommandResult(
            bulb=bulb,
            method=method,
            params=tuple(classify_param(p) for p in params),
            sequence_id=sequence_id,
            request=request,
            reply=reply,
        )

    def run_command(self, hint: str, method: str, params: Sequence[str] = ()) -> CommandResult:
        bulb = self.resolve_bulb(hint, self.discover())
        return self.send_command(bulb, method, params)
