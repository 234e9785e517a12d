"""
Pytest configuration shared by the unit and integration suites.

Provides a quiet Env bound to an ephemeral loopback port, a factory
that starts servers and closes them after each test, and a small
non-blocking UDP client for talking to them from the same loop.
"""

import asyncio
import socket
from typing import AsyncGenerator, Awaitable, Callable, Generator

import pytest

from switchboard.env import Env
from switchboard.logging import LoggingConfig
from switchboard.server import Registry, RegistryBuilder, UDPServer


class UDPClient:
    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._socket.bind(("127.0.0.1", 0))
        self._socket.setblocking(False)

    @property
    def address(self) -> tuple[str, int]:
        host, port = self._socket.getsockname()[:2]
        return host, port

    def send(self, data: str | bytes, address: tuple[str, int]):
        if isinstance(data, str):
            data = data.encode(self.encoding)

        self._socket.sendto(data, address)

    async def receive(self, timeout: float = 2.0) -> str:
        loop = asyncio.get_running_loop()
        data, _ = await asyncio.wait_for(
            loop.sock_recvfrom(self._socket, 65535),
            timeout,
        )

        return data.decode(self.encoding)

    async def request(
        self,
        data: str | bytes,
        address: tuple[str, int],
        timeout: float = 2.0,
    ) -> str:
        self.send(data, address)
        return await self.receive(timeout=timeout)

    async def silent(self, timeout: float = 0.3) -> bool:
        try:
            await self.receive(timeout=timeout)

        except asyncio.TimeoutError:
            return True

        return False

    def close(self):
        self._socket.close()


ServerFactory = Callable[..., Awaitable[UDPServer]]


@pytest.fixture(autouse=True)
def configure_log_level():
    config = LoggingConfig()
    config.update(log_level="error")
    yield


@pytest.fixture
def env() -> Env:
    return Env(
        SWITCHBOARD_HOST="127.0.0.1",
        SWITCHBOARD_PORT=0,
        SWITCHBOARD_LOG_LEVEL="error",
        SWITCHBOARD_WORKER_SHUTDOWN_TIMEOUT="2s",
    )


@pytest.fixture
def client() -> Generator[UDPClient, None, None]:
    udp_client = UDPClient()
    yield udp_client
    udp_client.close()


@pytest.fixture
def client_factory() -> Generator[Callable[[], UDPClient], None, None]:
    clients: list[UDPClient] = []

    def create_client() -> UDPClient:
        udp_client = UDPClient()
        clients.append(udp_client)
        return udp_client

    yield create_client

    for udp_client in clients:
        udp_client.close()


@pytest.fixture
async def serve(env: Env) -> AsyncGenerator[ServerFactory, None]:
    servers: list[UDPServer] = []

    async def start_server(
        registry: Registry | RegistryBuilder,
        workers: str | int | None = None,
    ) -> UDPServer:
        server = UDPServer(
            registry,
            host="127.0.0.1",
            port=0,
            workers=workers,
            env=env,
        )

        servers.append(server)
        return await server.start()

    yield start_server

    for server in servers:
        await server.close()
