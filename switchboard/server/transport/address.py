from typing import Union

from switchboard.exceptions import AddressValidationError


Address = Union[tuple[str, int], str]

# Valid port range. Zero is accepted for binds to an ephemeral port.
MIN_PORT = 0
MAX_PORT = 65535

_ALLOWED_HOST_CHARS = frozenset(
    'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789.-'
)


def parse_address(address: Address) -> tuple[str, int]:
    """
    Normalize a `(host, port)` tuple or a `"host:port"` string into a
    `(host, port)` tuple.

    Raises:
        AddressValidationError: If the address is malformed or the port
            is out of range.
    """
    if isinstance(address, tuple):
        if len(address) < 2:
            raise AddressValidationError(f"Address tuple must be (host, port), got {address!r}")

        host, port = address[0], address[1]

    elif isinstance(address, str):
        parts = address.rsplit(':', 1)
        if len(parts) != 2:
            raise AddressValidationError("Address must be in host:port format")

        host, port = parts

    else:
        raise AddressValidationError(f"Unsupported address type {type(address).__name__}")

    if not host:
        raise AddressValidationError("Host cannot be empty")

    if not all(char in _ALLOWED_HOST_CHARS for char in host):
        raise AddressValidationError("Host contains invalid characters")

    try:
        port = int(port)

    except (TypeError, ValueError):
        raise AddressValidationError(f"Port is not a valid integer: {port!r}")

    if port < MIN_PORT or port > MAX_PORT:
        raise AddressValidationError(f"Port {port} out of valid range ({MIN_PORT}-{MAX_PORT})")

    return (host, port)


def format_address(address: tuple[str, int]) -> str:
    host, port = address
    return f'{host}:{port}'
