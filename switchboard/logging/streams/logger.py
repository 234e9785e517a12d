from __future__ import annotations

import pathlib
from typing import Dict

from switchboard.logging.models import Entry

from .logger_context import LoggerContext
from .logger_stream import ModelConfig


class Logger:
    """
    Registry of named logging contexts. Owners configure a context
    once, with the entry models they log through `log_prepared`, then
    reopen it by name wherever they need to write.

        logger.configure(
            name="switchboard_server",
            path="logs/",
            models={"info": (ServerInfo, {"node_host": host, "node_port": port})},
        )

        async with logger.context(name="switchboard_server") as ctx:
            await ctx.log_prepared("listening", name="info")

    """

    def __init__(self) -> None:
        self._contexts: Dict[str, LoggerContext] = {}

    def configure(
        self,
        name: str = 'default',
        template: str | None = None,
        path: str | None = None,
        nested: bool = False,
        models: ModelConfig | None = None,
    ) -> LoggerContext:
        """
        `path` is either a `.json` log file or a directory, in which
        case entries go to `<name>.json` inside it.
        """
        filename: str | None = None
        directory: str | None = None

        if path is not None:
            logfile_path = pathlib.Path(path).absolute()

            if logfile_path.suffix:
                filename = logfile_path.name
                directory = str(logfile_path.parent)

            else:
                directory = str(logfile_path)

        context = LoggerContext(
            name,
            template=template,
            filename=filename,
            directory=directory,
            nested=nested,
            models=models,
        )

        self._contexts[name] = context
        return context

    def context(
        self,
        name: str = 'default',
        nested: bool | None = None,
        models: ModelConfig | None = None,
    ) -> LoggerContext:
        context = self._contexts.get(name)
        if context is None:
            return self.configure(
                name=name,
                nested=bool(nested),
                models=models,
            )

        if nested is not None:
            context.nested = nested

        if models:
            context.stream.update_models(models)

        return context

    async def log(self, entry: Entry, name: str = 'default'):
        async with self.context(name=name) as ctx:
            await ctx.log(entry)

    async def close(self):
        for context in self._contexts.values():
            await context.stream.close()
