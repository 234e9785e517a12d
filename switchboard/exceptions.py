class SwitchboardError(Exception):
    pass


class HandlerNotFoundError(SwitchboardError, LookupError):
    """Raised when a selected handler name has no registered NamedHandler."""

    def __init__(self, name: str, address: tuple[str, int] | None = None) -> None:
        self.name = name
        self.address = address

        message = f"Err. - no handler named {name!r} is registered"
        if address:
            host, port = address
            message = f"{message} (selected for {host}:{port})"

        super().__init__(message)


class MultiHandlerNotInstalledError(SwitchboardError):
    """Raised when handler selection is used without a MultiHandler extension."""
    pass


class WorkerRangeError(SwitchboardError, ValueError):
    pass


class AddressValidationError(SwitchboardError, ValueError):
    """Raised when address validation fails."""
    pass


class ServerNotStartedError(SwitchboardError):
    pass
