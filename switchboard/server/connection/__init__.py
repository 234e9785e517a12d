from .output_buffer import OutputBuffer as OutputBuffer
from .udp_connection import (
    UDPConnection as UDPConnection,
    remove_handler as remove_handler,
    respond as respond,
    set_handler as set_handler,
)
