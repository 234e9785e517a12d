from __future__ import annotations

import asyncio
from typing import Dict

from switchboard.env import Env, TimeParser
from switchboard.server.context import Context
from switchboard.server.registry import Registry
from switchboard.server.transport import UDPTransport

from .worker import Worker
from .worker_range import WorkerRange


class WorkerPool:
    """
    Holds one Worker per slot above 1 in the range. Each worker gets
    its own deep copy of the registry and store, taken when the pool
    spawns.
    """

    def __init__(
        self,
        worker_range: WorkerRange,
        registry: Registry,
        data: Context,
        transport: UDPTransport,
        env: Env,
    ) -> None:
        self.worker_range = worker_range
        self._registry = registry
        self._data = data
        self._transport = transport
        self._env = env
        self._shutdown_timeout = TimeParser(env.SWITCHBOARD_WORKER_SHUTDOWN_TIMEOUT).time

        self._workers: Dict[int, Worker] = {}

    def __getitem__(self, slot: int) -> Worker:
        return self._workers[slot]

    def __len__(self):
        return len(self._workers)

    def __iter__(self):
        return iter(self._workers.values())

    @property
    def slots(self) -> list[int]:
        return list(self._workers)

    def spawn(self):
        for slot in self.worker_range.worker_slots:
            if slot in self._workers:
                continue

            registry, data = self._registry.copy(self._data)

            worker = Worker(
                slot,
                registry,
                data,
                self._transport,
                self._env,
            )

            worker.start(timeout=self._shutdown_timeout)
            self._workers[slot] = worker

    async def run(
        self,
        slot: int,
        raw: bytes,
        address: tuple[str, int],
    ) -> bytes | None:
        """
        Ship one packet to the worker at `slot`, wait for it to finish
        and return everything it staged with `respond`, or None when
        the job never responded.
        """
        worker = self._workers[slot]

        await asyncio.wrap_future(
            worker.submit(raw, address)
        )

        if not worker.output.written:
            return None

        return worker.output.flush()

    def shutdown(self):
        for worker in self._workers.values():
            worker.stop(timeout=self._shutdown_timeout)

        self._workers.clear()
