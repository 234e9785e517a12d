from .server_status import ServerStatus as ServerStatus
from .udp_server import (
    UDPServer as UDPServer,
    run as run,
    start as start,
)
