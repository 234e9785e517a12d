import contextvars
from typing import Literal

import msgspec

from switchboard.logging.models import LogLevel, LogLevelName
from .stream_type import StreamType


LogOutput = Literal['stdout', 'stderr']


class LoggingSettings(msgspec.Struct, frozen=True):
    level: LogLevel = LogLevel.INFO
    output: StreamType = StreamType.STDOUT
    directory: str | None = None
    disabled: tuple[str, ...] = ()


_settings: contextvars.ContextVar[LoggingSettings] = contextvars.ContextVar(
    "switchboard_logging_settings",
    default=LoggingSettings(),
)


class LoggingConfig:
    """
    Logging settings held in a context variable. Tasks inherit the
    settings of the context that created them, but threads start from
    the defaults, so worker threads call `update()` with the server's
    Env values when they boot.
    """

    def update(
        self,
        log_directory: str | None = None,
        log_level: LogLevelName | None = None,
        log_output: LogOutput | None = None,
    ):
        changes = {}

        if log_directory:
            changes['directory'] = log_directory

        if log_level:
            changes['level'] = LogLevel.to_level(log_level)

        if log_output:
            changes['output'] = StreamType(log_output)

        if changes:
            _settings.set(
                msgspec.structs.replace(_settings.get(), **changes)
            )

    def disable(self, *logger_names: str):
        settings = _settings.get()
        _settings.set(
            msgspec.structs.replace(
                settings,
                disabled=(*settings.disabled, *logger_names),
            )
        )

    def enabled(self, logger_name: str, log_level: LogLevel) -> bool:
        settings = _settings.get()
        return (
            logger_name not in settings.disabled
            and log_level.rank >= settings.level.rank
        )

    @property
    def level(self) -> LogLevel:
        return _settings.get().level

    @property
    def output(self) -> StreamType:
        return _settings.get().output

    @property
    def directory(self) -> str | None:
        return _settings.get().directory
