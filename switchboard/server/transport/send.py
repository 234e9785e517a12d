import socket

from .address import Address, parse_address


def send(
    data: str | bytes,
    address: Address,
    from_port: int | None = None,
    from_host: str = "127.0.0.1",
    offset: int = 5,
    encoding: str = "utf-8",
) -> tuple[str, int]:
    """
    Send one datagram from a short-lived socket, closing it afterwards.

    The throwaway socket binds to `from_port`, defaulting to the
    destination port minus `offset`. Pass `from_port=0` for an
    ephemeral port. Returns the address the datagram was sent from.
    """
    host, port = parse_address(address)

    if from_port is None:
        from_port = max(port - offset, 0)

    if isinstance(data, str):
        data = data.encode(encoding)

    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP) as udp_socket:
        udp_socket.bind((from_host, from_port))
        udp_socket.sendto(data, (host, port))

        sent_from = udp_socket.getsockname()

    return sent_from[0], sent_from[1]
