from __future__ import annotations

import functools
import inspect
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    overload,
)

if TYPE_CHECKING:
    from switchboard.server.connection import UDPConnection


HandlerCall = Callable[["UDPConnection"], Awaitable[Any] | Any]


class Handler:
    """
    The default, anonymous handler. A registry treats the first handler
    added as the fallback run when no extension stops the pipeline.
    """

    __slots__ = ("_call",)

    def __init__(self, call: HandlerCall) -> None:
        if not callable(call):
            raise TypeError(f"Err. - handler call must be callable, got {type(call).__name__}")

        object.__setattr__(self, "_call", call)

    def __setattr__(self, name: str, value: Any):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def call(self) -> HandlerCall:
        return self._call

    @property
    def name(self) -> str | None:
        return None

    def __call__(self, connection: UDPConnection):
        return self._call(connection)

    async def run(self, connection: UDPConnection):
        result = self._call(connection)
        if inspect.isawaitable(result):
            result = await result

        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}({getattr(self._call, '__name__', repr(self._call))})"

    def __deepcopy__(self, memo: dict[int, Any]):
        return self


class NamedHandler(Handler):

    __slots__ = ("_name",)

    def __init__(self, call: HandlerCall, name: str) -> None:
        super().__init__(call)

        if not isinstance(name, str) or len(name) == 0:
            raise ValueError("Err. - named handlers require a non-empty string name")

        object.__setattr__(self, "_name", name)

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"


@overload
def handler(call: HandlerCall) -> Handler: ...

@overload
def handler(name: str, call: HandlerCall) -> NamedHandler: ...

@overload
def handler(name: str) -> Callable[[HandlerCall], NamedHandler]: ...

@overload
def handler() -> Callable[[HandlerCall], Handler]: ...


def handler(
    name_or_call: str | HandlerCall | None = None,
    call: HandlerCall | None = None,
):
    """
    Build a handler from a function taking the UDPConnection.

        main = handler(lambda connection: respond(connection, "pong"))
        confirm = handler("confirm", confirm_call)

        @handler("confirm")
        async def confirm(connection): ...

    """
    if isinstance(name_or_call, str):
        if call is not None:
            return NamedHandler(call, name_or_call)

        return functools.partial(NamedHandler, name=name_or_call)

    if name_or_call is None:
        return Handler

    return Handler(name_or_call)
