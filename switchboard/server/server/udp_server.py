from __future__ import annotations

import asyncio

from switchboard.env import Env, load_env
from switchboard.logging import Logger, LoggingConfig
from switchboard.logging.switchboard_logging_models import (
    ServerDebug,
    ServerFatal,
    ServerInfo,
    ServerTrace,
)
from switchboard.server.context import Context
from switchboard.server.registry import Pipeline, Registry, RegistryBuilder
from switchboard.server.transport import Address, UDPTransport, parse_address
from switchboard.server.workers import SlotSelector, WorkerPool, WorkerRange

from .server_status import ServerStatus


class UDPServer:
    """
    Connectionless packet server. One intake loop receives a datagram,
    finishes it, and only then reads the next. With a pooled worker
    range, each packet is placed by a cyclic slot selector either
    inline or on a worker, whose staged replies are sent back to the
    sender as one datagram.

    Any fault raised while handling a packet stops the server and is
    re-raised from `wait()`.
    """

    def __init__(
        self,
        registry: Registry | RegistryBuilder,
        host: str | None = None,
        port: int | None = None,
        workers: WorkerRange | str | int | range | None = None,
        env: Env | None = None,
    ) -> None:
        if env is None:
            env = Env()

        if isinstance(registry, RegistryBuilder):
            registry = registry.build()

        self.env = env
        self.registry = registry
        self.data = Context()
        self.worker_range = WorkerRange.parse(
            workers if workers is not None else env.SWITCHBOARD_WORKERS
        )

        self.transport = UDPTransport(
            host if host is not None else env.SWITCHBOARD_HOST,
            port if port is not None else env.SWITCHBOARD_PORT,
            receive_buffer_size=env.SWITCHBOARD_RECEIVE_BUFFER_SIZE,
        )

        self.state = ServerStatus.CREATED
        self.packets_received = 0

        self._pipeline = Pipeline(
            self.registry,
            self.data,
            self.transport,
            encoding=env.SWITCHBOARD_PACKET_ENCODING,
        )
        self._selector = SlotSelector(self.worker_range)
        self._pool: WorkerPool | None = None
        self._serve_task: asyncio.Task | None = None
        self._closed = False

        self._logger = Logger()
        self._logger_name = f"switchboard_server_{id(self)}"

    @property
    def host(self) -> str:
        return self.transport.host

    @property
    def port(self) -> int:
        return self.transport.port

    @property
    def address(self) -> tuple[str, int]:
        return self.transport.address

    @property
    def active(self) -> bool:
        return (
            self._serve_task is not None
            and self._serve_task.done() is False
            and self.transport.bound
        )

    @property
    def workers(self) -> WorkerPool | None:
        return self._pool

    @property
    def status(self) -> str:
        activity = "active" if self.active else "inactive"
        return f"{activity} ({self.state.value})"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.host}:{self.port}, {self.status}, "
            f"handlers={len(self.registry.handlers)}, "
            f"extensions={len(self.registry.extensions)}, "
            f"workers={self.worker_range!r})"
        )

    async def start(self) -> UDPServer:
        if self._serve_task is not None:
            return self

        LoggingConfig().update(**self.env.get_logging_config())

        self.transport.bind()

        node_details = {
            'node_host': self.host,
            'node_port': self.port,
        }

        self._logger.configure(
            name=self._logger_name,
            path=self.env.SWITCHBOARD_LOGS_DIRECTORY,
            nested=True,
            models={
                'trace': (ServerTrace, node_details),
                'debug': (ServerDebug, node_details),
                'info': (ServerInfo, node_details),
            },
        )

        try:
            await self._pipeline.start()

            if self.worker_range.pooled:
                self._pool = WorkerPool(
                    self.worker_range,
                    self.registry,
                    self.data,
                    self.transport,
                    self.env,
                )

                await asyncio.get_running_loop().run_in_executor(
                    None,
                    self._pool.spawn,
                )

                await self._log(
                    f"Spawned {len(self._pool)} workers for slots {self._pool.slots}",
                    name='debug',
                )

        except Exception as err:
            await self._fail(err)
            raise

        self.state = ServerStatus.LISTENING
        self._serve_task = asyncio.create_task(self._serve())

        await self._log(
            f"Server listening on {self.host}:{self.port} with {self.worker_range!r}",
            name='info',
        )

        return self

    async def wait(self):
        """Block until the server closes, re-raising the fault that stopped it."""
        if self._serve_task is None:
            return

        try:
            await asyncio.shield(self._serve_task)

        except asyncio.CancelledError:
            if self._serve_task.cancelled() is False:
                raise

    async def close(self):
        if self._closed:
            return

        self._closed = True

        if self._serve_task is not None and self._serve_task.done() is False:
            self._serve_task.cancel()

            try:
                await self._serve_task

            except asyncio.CancelledError:
                pass

        await self._teardown()

        await self._log(
            f"Server on {self.host}:{self.port} closed after {self.packets_received} packets",
            name='info',
        )

        await self._logger.close()

    def send(self, data: str | bytes, address: Address):
        if isinstance(data, str):
            data = data.encode(self.env.SWITCHBOARD_PACKET_ENCODING)

        self.transport.send(data, parse_address(address))

    async def _serve(self):
        try:
            while True:
                self.state = ServerStatus.LISTENING
                raw, address = await self.transport.receive()

                self.state = ServerStatus.PROCESSING
                self.packets_received += 1

                await self._process(raw, address)

        except Exception as err:
            await self._fail(err)
            raise

        finally:
            self.state = ServerStatus.CLOSED

    async def _process(self, raw: bytes, address: tuple[str, int]):
        if self._pool is None:
            await self._dispatch_inline(raw, address)
            return

        slot = self._selector.next()
        if SlotSelector.is_inline(slot):
            await self._log(
                f"Packet from {address[0]}:{address[1]} handled inline (slot {slot})",
                name='trace',
            )

            await self._dispatch_inline(raw, address)
            return

        await self._log(
            f"Packet from {address[0]}:{address[1]} sent to worker {slot}",
            name='trace',
        )

        reply = await self._pool.run(slot, raw, address)
        if reply is not None:
            self.transport.send(reply, address)

    async def _dispatch_inline(self, raw: bytes, address: tuple[str, int]):
        handled = await self._pipeline.dispatch(raw, address)
        if handled is False:
            await self._log(
                f"Packet from {address[0]}:{address[1]} stopped by an extension",
                name='debug',
            )

    async def _fail(self, err: Exception):
        await self._logger.log(
            ServerFatal(
                message=f"Server on {self.host}:{self.port} stopping - {type(err).__name__}: {err}",
                node_host=self.host,
                node_port=self.port,
            ),
            name=self._logger_name,
        )

        await self._teardown()

    async def _teardown(self):
        self.state = ServerStatus.CLOSED
        self.transport.close()

        if self._pool is not None:
            pool = self._pool
            self._pool = None

            await asyncio.get_running_loop().run_in_executor(
                None,
                pool.shutdown,
            )

    async def _log(self, message: str, name: str = 'info'):
        async with self._logger.context(name=self._logger_name) as ctx:
            await ctx.log_prepared(message, name=name)


async def start(
    registry: Registry | RegistryBuilder,
    host: str | None = None,
    port: int | None = None,
    workers: WorkerRange | str | int | range | None = None,
    env: Env | None = None,
    env_file: str | None = None,
) -> UDPServer:
    """
    Build and start a server, reading unset options from the
    environment and `.env`.
    """
    if env is None:
        env = load_env(Env, env_file=env_file)

    server = UDPServer(
        registry,
        host=host,
        port=port,
        workers=workers,
        env=env,
    )

    return await server.start()


def run(
    registry: Registry | RegistryBuilder,
    host: str | None = None,
    port: int | None = None,
    workers: WorkerRange | str | int | range | None = None,
    env: Env | None = None,
    env_file: str | None = None,
):
    """Start a server and block until it stops."""

    async def serve():
        server = await start(
            registry,
            host=host,
            port=port,
            workers=workers,
            env=env,
            env_file=env_file,
        )

        try:
            await server.wait()

        finally:
            await server.close()

    asyncio.run(serve())
