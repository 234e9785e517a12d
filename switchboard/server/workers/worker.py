from __future__ import annotations

import asyncio
import concurrent.futures
import threading

from switchboard.env import Env
from switchboard.logging import Logger, LoggingConfig
from switchboard.logging.switchboard_logging_models import WorkerDebug, WorkerError
from switchboard.server.connection import OutputBuffer
from switchboard.server.context import Context
from switchboard.server.registry import Pipeline, Registry
from switchboard.server.transport import UDPTransport


class Worker:
    """
    A pooled thread running its own event loop. Owns a private copy of
    the registry and store, so extension state and stored values never
    cross between workers or back to the intake thread. Replies made
    with `respond` are staged in the worker's output buffer.
    """

    def __init__(
        self,
        slot: int,
        registry: Registry,
        data: Context,
        transport: UDPTransport,
        env: Env,
    ) -> None:
        self.slot = slot
        self.registry = registry
        self.data = data
        self.output = OutputBuffer()

        self._transport = transport
        self._env = env
        self._logger = Logger()
        self._logger_name = f"switchboard_worker_{slot}_{id(self)}"

        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._pipeline: Pipeline | None = None
        self._ready = threading.Event()
        self._jobs_run = 0

    @property
    def running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and self._loop is not None
            and self._loop.is_running()
        )

    @property
    def jobs_run(self) -> int:
        return self._jobs_run

    def start(self, timeout: float | None = None):
        self._thread = threading.Thread(
            target=self._run,
            name=f"switchboard-worker-{self.slot}",
            daemon=True,
        )

        self._thread.start()
        self._ready.wait(timeout)

    def submit(self, raw: bytes, address: tuple[str, int]) -> concurrent.futures.Future:
        self.output.clear()

        return asyncio.run_coroutine_threadsafe(
            self._process(raw, address),
            self._loop,
        )

    def stop(self, timeout: float | None = None):
        if self._loop is not None and self._loop.is_closed() is False:
            self._loop.call_soon_threadsafe(self._loop.stop)

        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _run(self):
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)

        self._loop = loop

        LoggingConfig().update(**self._env.get_logging_config())

        self._pipeline = Pipeline(
            self.registry,
            self.data,
            self._transport,
            encoding=self._env.SWITCHBOARD_PACKET_ENCODING,
        )

        self._logger.configure(
            name=self._logger_name,
            path=self._env.SWITCHBOARD_LOGS_DIRECTORY,
            nested=True,
            models={
                'debug': (
                    WorkerDebug,
                    self._log_defaults(),
                ),
                'error': (
                    WorkerError,
                    self._log_defaults(),
                ),
            },
        )

        try:
            loop.run_until_complete(
                self._log(f"Worker {self.slot} started", name='debug')
            )
            self._ready.set()

            loop.run_forever()

        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()

            if pending:
                loop.run_until_complete(
                    asyncio.gather(*pending, return_exceptions=True)
                )

            loop.run_until_complete(
                self._log(f"Worker {self.slot} stopped after {self._jobs_run} jobs", name='debug')
            )
            loop.run_until_complete(self._logger.close())
            loop.run_until_complete(loop.shutdown_default_executor())
            loop.close()

            self._ready.set()

    async def _process(self, raw: bytes, address: tuple[str, int]):
        self._jobs_run += 1

        try:
            handled = await self._pipeline.dispatch(
                raw,
                address,
                output=self.output,
            )

            if handled is False:
                await self._log(
                    f"Worker {self.slot} packet from {address[0]}:{address[1]} stopped by an extension",
                    name='debug',
                )

        except Exception as err:
            await self._log(
                f"Worker {self.slot} job from {address[0]}:{address[1]} failed - {err}",
                name='error',
            )

            raise

    def _log_defaults(self):
        return {
            'node_host': self._transport.host,
            'node_port': self._transport.port,
            'worker_slot': self.slot,
        }

    async def _log(self, message: str, name: str = 'debug'):
        async with self._logger.context(name=self._logger_name) as ctx:
            await ctx.log_prepared(message, name=name)
