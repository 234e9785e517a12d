from __future__ import annotations
from pydantic import BaseModel, StrictInt, StrictStr
from typing import Callable, Dict, Literal, Union

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    SWITCHBOARD_HOST: StrictStr = "127.0.0.1"
    SWITCHBOARD_PORT: StrictInt = 2000
    SWITCHBOARD_WORKERS: StrictStr = "1"
    SWITCHBOARD_RECEIVE_BUFFER_SIZE: StrictInt = 65535
    SWITCHBOARD_PACKET_ENCODING: StrictStr = "utf-8"
    SWITCHBOARD_WORKER_SHUTDOWN_TIMEOUT: StrictStr = "5s"
    SWITCHBOARD_LOG_LEVEL: StrictStr = "info"
    SWITCHBOARD_LOG_OUTPUT: Literal["stdout", "stderr"] = "stdout"
    SWITCHBOARD_LOGS_DIRECTORY: StrictStr | None = None

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "SWITCHBOARD_HOST": str,
            "SWITCHBOARD_PORT": int,
            "SWITCHBOARD_WORKERS": str,
            "SWITCHBOARD_RECEIVE_BUFFER_SIZE": int,
            "SWITCHBOARD_PACKET_ENCODING": str,
            "SWITCHBOARD_WORKER_SHUTDOWN_TIMEOUT": str,
            "SWITCHBOARD_LOG_LEVEL": str,
            "SWITCHBOARD_LOG_OUTPUT": str,
            "SWITCHBOARD_LOGS_DIRECTORY": str,
        }

    def get_logging_config(self) -> dict:
        return {
            "log_level": self.SWITCHBOARD_LOG_LEVEL,
            "log_output": self.SWITCHBOARD_LOG_OUTPUT,
            "log_directory": self.SWITCHBOARD_LOGS_DIRECTORY,
        }
