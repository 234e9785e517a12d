from __future__ import annotations

from typing import Sequence

from switchboard.exceptions import MultiHandlerNotInstalledError
from switchboard.server.context import Context
from switchboard.server.extensions import (
    Extension,
    ExtensionKind,
    MultiHandler,
)
from switchboard.server.hooks import Handler
from switchboard.server.transport import Address, UDPTransport

from .output_buffer import OutputBuffer


class UDPConnection:
    """
    Everything a handler sees for one inbound datagram. A connection is
    built per packet and dropped once the handler returns, but `data`
    is the one long-lived store shared by every packet.
    """

    __slots__ = (
        "address",
        "raw",
        "data",
        "handlers",
        "extensions",
        "encoding",
        "_transport",
        "_output",
        "_packet",
    )

    def __init__(
        self,
        address: tuple[str, int],
        raw: bytes,
        data: Context,
        handlers: Sequence[Handler],
        extensions: Sequence[Extension],
        transport: UDPTransport,
        output: OutputBuffer | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self.address = address
        self.raw = raw
        self.data = data
        self.handlers = handlers
        self.extensions = extensions
        self.encoding = encoding

        self._transport = transport
        self._output = output
        self._packet: str | None = None

    @property
    def packet(self) -> str:
        if self._packet is None:
            self._packet = self.raw.decode(self.encoding, errors="replace")

        return self._packet

    @property
    def host(self) -> str:
        return self.address[0]

    @property
    def port(self) -> int:
        return self.address[1]

    @property
    def staged(self) -> bool:
        return self._output is not None

    def encode(self, data: str | bytes) -> bytes:
        if isinstance(data, str):
            return data.encode(self.encoding)

        return bytes(data)

    def respond(self, data: str | bytes):
        encoded = self.encode(data)

        if self._output is not None:
            self._output.write(encoded)

        else:
            self._transport.send(encoded, self.address)

    def send(self, data: str | bytes, address: Address):
        self._transport.send(self.encode(data), address)

    def multi_handler(self) -> MultiHandler:
        for extension in self.extensions:
            if extension.kind == ExtensionKind.MULTI_HANDLER:
                return extension

        raise MultiHandlerNotInstalledError(
            "Err. - handler selection requires a MultiHandler extension in the registry"
        )

    def __repr__(self) -> str:
        host, port = self.address
        return f"{type(self).__name__}({host}:{port}, {len(self.raw)} bytes)"


def respond(connection: UDPConnection, data: str | bytes):
    connection.respond(data)


def set_handler(
    connection: UDPConnection,
    address_or_name: Address | str,
    name: str | None = None,
):
    """
    Select the named handler for a client. With two arguments the
    connection's own sender is selected; pass an address first to
    redirect another client's conversation.
    """
    if name is None:
        address, name = connection.address, address_or_name

    else:
        address = address_or_name

    connection.multi_handler().select(address, name)


def remove_handler(
    connection: UDPConnection,
    address: Address | None = None,
):
    if address is None:
        address = connection.address

    connection.multi_handler().clear(address)
