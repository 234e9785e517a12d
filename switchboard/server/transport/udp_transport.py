import asyncio
import socket

from switchboard.exceptions import ServerNotStartedError

from .address import Address, parse_address


class UDPTransport:
    """
    The server's bound datagram socket: one blocking-style receive of a
    datagram with its sender, and fire-and-forget sends to any address.
    """

    def __init__(
        self,
        host: str,
        port: int,
        receive_buffer_size: int = 65535,
    ) -> None:
        self.host = host
        self.port = port
        self.receive_buffer_size = receive_buffer_size

        self._socket: socket.socket | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def socket(self) -> socket.socket | None:
        return self._socket

    @property
    def bound(self) -> bool:
        return self._socket is not None and self._socket.fileno() != -1

    @property
    def closed(self) -> bool:
        return not self.bound

    @property
    def address(self) -> tuple[str, int]:
        return (self.host, self.port)

    def bind(self) -> tuple[str, int]:
        self._loop = asyncio.get_running_loop()

        udp_socket = socket.socket(
            socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP
        )

        try:
            udp_socket.bind((self.host, self.port))

        except OSError:
            udp_socket.close()
            raise

        udp_socket.setblocking(False)

        self._socket = udp_socket
        self.host, self.port = udp_socket.getsockname()[:2]

        return self.address

    async def receive(self) -> tuple[bytes, tuple[str, int]]:
        if self._socket is None:
            raise ServerNotStartedError("Err. - transport must be bound before receiving")

        data, addr = await self._loop.sock_recvfrom(
            self._socket,
            self.receive_buffer_size,
        )

        host, port = addr[:2]
        return data, (host, port)

    def send(self, data: bytes, address: Address):
        if self._socket is None:
            raise ServerNotStartedError("Err. - transport must be bound before sending")

        self._socket.sendto(data, parse_address(address))

    def close(self):
        if self._socket is not None and self._socket.fileno() != -1:
            self._socket.close()
