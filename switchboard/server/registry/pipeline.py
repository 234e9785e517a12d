from __future__ import annotations

import inspect

from switchboard.exceptions import HandlerNotFoundError
from switchboard.server.connection import OutputBuffer, UDPConnection
from switchboard.server.context import Context
from switchboard.server.transport import UDPTransport

from .registry import Registry


class Pipeline:
    """
    Runs one packet through a registry: every extension's `route` in
    order, then the default handler if none of them stopped the packet.
    """

    def __init__(
        self,
        registry: Registry,
        data: Context,
        transport: UDPTransport,
        encoding: str = "utf-8",
    ) -> None:
        self.registry = registry
        self.data = data
        self.transport = transport
        self.encoding = encoding

    async def start(self):
        for extension in self.registry.extensions:
            result = extension.on_start(self.data)
            if inspect.isawaitable(result):
                await result

    def create_connection(
        self,
        raw: bytes,
        address: tuple[str, int],
        output: OutputBuffer | None = None,
    ) -> UDPConnection:
        return UDPConnection(
            address,
            raw,
            self.data,
            self.registry.handlers,
            self.registry.extensions,
            self.transport,
            output=output,
            encoding=self.encoding,
        )

    async def route(self, connection: UDPConnection) -> bool:
        """
        Returns True when the default handler ran, False when an
        extension stopped the packet.
        """
        for extension in self.registry.extensions:
            result = extension.route(connection)
            if inspect.isawaitable(result):
                result = await result

            if not result:
                return False

        default_handler = self.registry.default_handler
        if default_handler is None:
            raise HandlerNotFoundError("default", address=connection.address)

        await default_handler.run(connection)

        return True

    async def dispatch(
        self,
        raw: bytes,
        address: tuple[str, int],
        output: OutputBuffer | None = None,
    ) -> bool:
        return await self.route(
            self.create_connection(
                raw,
                address,
                output=output,
            )
        )
