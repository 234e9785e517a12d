from __future__ import annotations

from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
)

if TYPE_CHECKING:
    from switchboard.server.connection import UDPConnection
    from switchboard.server.context import Context


class ExtensionKind(Enum):
    CUSTOM = "custom"
    MULTI_HANDLER = "multi_handler"


class Extension:
    """
    A pipeline step run on every packet before the handler.

    `on_start` runs once, before intake begins, with the server-wide
    shared store. `route` runs per packet and returns True to let the
    packet continue down the pipeline. Any false-equivalent result
    stops the pipeline for that packet, skipping every remaining
    extension and the fallback handler. Either method may be a
    coroutine function.
    """

    kind: ExtensionKind = ExtensionKind.CUSTOM

    def on_start(self, data: Context) -> Awaitable[Any] | Any:
        return None

    def route(self, connection: UDPConnection) -> Awaitable[bool] | bool:
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value})"
