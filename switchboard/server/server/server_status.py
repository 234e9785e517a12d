from enum import Enum


class ServerStatus(Enum):
    CREATED = "created"
    LISTENING = "listening"
    PROCESSING = "processing"
    CLOSED = "closed"
