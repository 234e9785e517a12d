from .logger_stream import LoggerStream, ModelConfig


class LoggerContext:
    """
    Named, reusable entry point to one LoggerStream. Entering the
    context initializes the stream; leaving it closes open log files
    unless the context is `nested`, which long-lived owners like the
    server and its workers use to keep files open between entries.
    """

    def __init__(
        self,
        name: str,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
        nested: bool = False,
        models: ModelConfig | None = None,
    ) -> None:
        self.name = name
        self.nested = nested
        self.stream = LoggerStream(
            name=name,
            template=template,
            filename=filename,
            directory=directory,
            models=models,
        )

    async def __aenter__(self) -> LoggerStream:
        await self.stream.initialize()
        return self.stream

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if not self.nested:
            await self.stream.close()
