from __future__ import annotations

import copy
from typing import Any, Iterable

from switchboard.server.context import Context, copy_or_share
from switchboard.server.extensions import Extension
from switchboard.server.hooks import Handler, NamedHandler


class Registry:
    """
    The assembled, read-only set of handlers and extensions a server
    (or one of its workers) dispatches through. Both sequences keep
    the order they were registered in.
    """

    __slots__ = ("_handlers", "_extensions")

    def __init__(
        self,
        handlers: Iterable[Handler] = (),
        extensions: Iterable[Extension] = (),
    ) -> None:
        self._handlers: tuple[Handler, ...] = tuple(handlers)
        self._extensions: tuple[Extension, ...] = tuple(extensions)

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return self._handlers

    @property
    def extensions(self) -> tuple[Extension, ...]:
        return self._extensions

    @property
    def default_handler(self) -> Handler | None:
        if len(self._handlers) > 0:
            return self._handlers[0]

        return None

    def named(self, name: str) -> NamedHandler | None:
        for candidate in self._handlers:
            if isinstance(candidate, NamedHandler) and candidate.name == name:
                return candidate

        return None

    def copy(self, data: Context) -> tuple[Registry, Context]:
        """
        Independent copies of the registry and the store for a worker.
        Handlers are immutable and shared. Extensions and store values
        are deep copied through one memo, so an object an extension
        also keeps in the store stays a single object in the copy.

        A value that cannot be deep copied (a lock, a socket) is shared
        by reference instead. Store values are copied first, so an
        extension that holds the same uncopyable value still copies.
        """
        memo: dict[int, Any] = {}
        store = data.dict()

        try:
            extensions, store = copy.deepcopy((self._extensions, store), memo)

        except (TypeError, copy.Error):
            memo = {}
            store = {
                key: copy_or_share(value, memo) for key, value in store.items()
            }
            extensions = tuple(
                copy_or_share(extension, memo) for extension in self._extensions
            )

        return (
            Registry(handlers=self._handlers, extensions=extensions),
            Context(store),
        )

    def __len__(self):
        return len(self._handlers) + len(self._extensions)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(handlers={len(self._handlers)}, extensions={len(self._extensions)})"


class RegistryBuilder:
    """
    Collects what the hosting application registers, in order, and
    assembles a Registry. Anything that is neither a Handler nor an
    Extension is skipped.

        registry = (
            RegistryBuilder()
            .add(main_handler, confirm_handler)
            .add(MultiHandler(main_handler))
            .build()
        )

    """

    def __init__(self) -> None:
        self._handlers: list[Handler] = []
        self._extensions: list[Extension] = []

    def add(self, *exports: Any) -> RegistryBuilder:
        for export in exports:
            if isinstance(export, Handler):
                self._handlers.append(export)

            elif isinstance(export, Extension):
                self._extensions.append(export)

        return self

    def add_all(self, exports: Iterable[Any]) -> RegistryBuilder:
        return self.add(*exports)

    def build(self) -> Registry:
        return Registry(
            handlers=self._handlers,
            extensions=self._extensions,
        )
