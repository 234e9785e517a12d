from __future__ import annotations

from typing import TYPE_CHECKING

from switchboard.exceptions import HandlerNotFoundError
from switchboard.server.hooks import Handler, NamedHandler
from switchboard.server.transport.address import Address, parse_address

from .extension import Extension, ExtensionKind

if TYPE_CHECKING:
    from switchboard.server.connection import UDPConnection


class MultiHandler(Extension):
    """
    Routes each client to its currently selected named handler, or to
    the main handler when nothing is selected for its address. Always
    stops the pipeline, since it has already run the right handler.
    """

    kind = ExtensionKind.MULTI_HANDLER

    def __init__(self, main: Handler) -> None:
        if not isinstance(main, Handler):
            raise TypeError(f"Err. - MultiHandler requires a Handler, got {type(main).__name__}")

        self.main = main
        self.selections: dict[tuple[str, int], str] = {}

    def select(self, address: Address, name: str):
        self.selections[parse_address(address)] = name

    def clear(self, address: Address):
        self.selections.pop(parse_address(address), None)

    def selected(self, address: Address) -> str | None:
        return self.selections.get(parse_address(address))

    def resolve(self, connection: UDPConnection) -> Handler:
        name = self.selections.get(connection.address)
        if name is None:
            return self.main

        for candidate in connection.handlers:
            if isinstance(candidate, NamedHandler) and candidate.name == name:
                return candidate

        raise HandlerNotFoundError(name, address=connection.address)

    async def route(self, connection: UDPConnection) -> bool:
        await self.resolve(connection).run(connection)
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(main={self.main!r}, selections={len(self.selections)})"
