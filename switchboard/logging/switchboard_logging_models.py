from .models import Entry, LogLevel


class ServerTrace(Entry, kw_only=True):
    node_host: str
    node_port: int
    level: LogLevel = LogLevel.TRACE

class ServerDebug(Entry, kw_only=True):
    node_host: str
    node_port: int
    level: LogLevel = LogLevel.DEBUG

class ServerInfo(Entry, kw_only=True):
    node_host: str
    node_port: int
    level: LogLevel = LogLevel.INFO

class ServerFatal(Entry, kw_only=True):
    node_host: str
    node_port: int
    level: LogLevel = LogLevel.FATAL

class WorkerDebug(Entry, kw_only=True):
    node_host: str
    node_port: int
    worker_slot: int
    level: LogLevel = LogLevel.DEBUG

class WorkerError(Entry, kw_only=True):
    node_host: str
    node_port: int
    worker_slot: int
    level: LogLevel = LogLevel.ERROR
