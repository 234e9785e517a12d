from __future__ import annotations

from typing import TYPE_CHECKING

from .extension import Extension

if TYPE_CHECKING:
    from switchboard.server.connection import UDPConnection


CONTROL_MARKER = "?CM:"


class ControlMessageFilter(Extension):
    """
    Drops control messages, packets carrying the `?CM:` marker anywhere
    in their payload, before any later extension or the handler sees
    them. Register it ahead of the extensions it should guard.
    """

    def __init__(self, marker: str = CONTROL_MARKER) -> None:
        if not marker:
            raise ValueError("Err. - control marker must be a non-empty string")

        self.marker = marker
        self.dropped = 0

    def route(self, connection: UDPConnection) -> bool:
        if self.marker in connection.packet:
            self.dropped += 1
            return False

        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(marker={self.marker!r}, dropped={self.dropped})"
