from .address import (
    Address as Address,
    format_address as format_address,
    parse_address as parse_address,
)
from .send import send as send
from .udp_transport import UDPTransport as UDPTransport
