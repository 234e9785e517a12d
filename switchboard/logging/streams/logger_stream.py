import asyncio
import os
import pathlib
import sys
from collections import defaultdict
from typing import (
    Any,
    Callable,
    Dict,
    TextIO,
    TypeVar,
)

import msgspec

from switchboard.logging.config import LoggingConfig, StreamType
from switchboard.logging.models import Entry, Log, LogLevel


T = TypeVar('T', bound=Entry)

DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"

ModelConfig = dict[str, tuple[type[Entry], dict[str, Any]]]


class LoggerStream:
    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
        models: ModelConfig | None = None,
    ) -> None:
        if name is None:
            name = "default"

        self._name = name
        self._default_template = template or DEFAULT_TEMPLATE
        self._default_logfile = filename
        self._default_log_directory = directory

        self._config = LoggingConfig()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._initialized = False

        self._files: Dict[str, Any] = {}
        self._file_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._streams: Dict[StreamType, TextIO] = {}
        self._cwd: str | None = None

        self._models: ModelConfig = {
            'default': (Entry, {'level': LogLevel.INFO}),
            **(models or {}),
        }

    @property
    def name(self):
        return self._name

    async def initialize(self):
        if self._initialized:
            return

        self._loop = asyncio.get_running_loop()
        self._streams = {
            StreamType.STDOUT: sys.stdout,
            StreamType.STDERR: sys.stderr,
        }

        if self._cwd is None:
            self._cwd = await self._loop.run_in_executor(
                None,
                os.getcwd,
            )

        self._initialized = True

    def update_models(self, models: ModelConfig):
        self._models.update(models)

    async def log_prepared(
        self,
        message: str,
        name: str = 'default',
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        await self.log(
            self._to_entry(message, name),
            template=template,
            path=path,
            filter=filter,
        )

    async def log(
        self,
        entry: T,
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        if self._initialized is False:
            await self.initialize()

        log = Log.from_caller(entry, depth=self._caller_depth())

        destination = self._destination(path)
        if destination is None:
            await self._log(
                log,
                template=template or self._default_template,
            )
            return

        async with self._file_locks[destination]:
            await self._loop.run_in_executor(
                None,
                self._append,
                destination,
                msgspec.json.encode(log),
            )

    def _destination(self, path: str | None) -> str | None:
        """
        Where a record goes on disk, or None for console output. An
        explicit `path` naming a file overrides both the stream's file
        and directory; a `path` without a suffix only moves the directory.
        """
        filename = self._default_logfile
        directory = self._default_log_directory or self._config.directory

        if path:
            target = pathlib.Path(path).absolute()
            if target.suffix:
                filename, directory = target.name, str(target.parent)

            else:
                directory = str(target)

        if not (filename or directory):
            return None

        filename = filename or f"{self._name}.json"
        if not filename.endswith(".json"):
            raise ValueError(f"Err. - log file {filename} must be a .json file")

        return os.path.join(
            directory or os.path.join(self._cwd, "logs"),
            filename,
        )

    def _to_entry(
        self,
        message: str,
        name: str,
    ):
        model, defaults = self._models.get(
            name,
            self._models['default'],
        )

        return model(
            message=message,
            **defaults,
        )

    def _caller_depth(self):
        # log() called directly, or through log_prepared()
        frame = sys._getframe(2)
        if frame.f_code.co_name == 'log_prepared' and frame.f_code.co_filename == __file__:
            return 3

        return 2

    async def _log(
        self,
        log: Log[T],
        template: str,
    ):
        stream = self._streams[self._config.output]
        line = log.entry.to_template(
            template,
            context=log.context(),
        )

        await self._loop.run_in_executor(
            None,
            self._write_to_stream,
            stream,
            line,
        )

    def _write_to_stream(self, stream: TextIO, line: str):
        if stream.closed is False:
            stream.write(line + "\n")
            stream.flush()

    def _append(self, destination: str, record: bytes):
        logfile = self._files.get(destination)
        if logfile is None or logfile.closed:
            resolved = pathlib.Path(destination).resolve()
            resolved.parent.mkdir(parents=True, exist_ok=True)

            logfile = self._files[destination] = resolved.open("ab")

        logfile.write(record + b"\n")
        logfile.flush()

    async def close(self):
        if self._loop is None:
            return

        for destination in list(self._files):
            async with self._file_locks[destination]:
                logfile = self._files.pop(destination)
                await self._loop.run_in_executor(None, logfile.close)
