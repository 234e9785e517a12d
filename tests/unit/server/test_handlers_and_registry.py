"""
Tests for the handler factory and the registry builder.

Covers:
- handler() building anonymous and named handlers, directly and as a decorator
- handler immutability and argument validation
- RegistryBuilder ordering, default handler selection and filtering
- Registry.copy() sharing handlers while copying extension state and the store
- objects shared between extensions and the store staying shared in the copy
- uncopyable values being shared by reference
"""

import threading

import pytest

from switchboard.server import (
    Context,
    Extension,
    Handler,
    MultiHandler,
    NamedHandler,
    Registry,
    RegistryBuilder,
    handler,
)


def reply_pong(connection):
    connection.respond("pong")


class TestHandlerFactory:
    def test_callable_builds_default_handler(self):
        built = handler(reply_pong)

        assert type(built) is Handler
        assert built.name is None
        assert built.call is reply_pong

    def test_name_and_callable_build_named_handler(self):
        built = handler("confirm", reply_pong)

        assert isinstance(built, NamedHandler)
        assert built.name == "confirm"

    def test_name_alone_returns_decorator(self):
        @handler("confirm")
        def confirm(connection):
            return "confirmed"

        assert isinstance(confirm, NamedHandler)
        assert confirm.name == "confirm"
        assert confirm(None) == "confirmed"

    def test_bare_call_returns_decorator(self):
        @handler()
        def main(connection):
            return "main"

        assert type(main) is Handler

    def test_handlers_are_immutable(self):
        built = handler("confirm", reply_pong)

        with pytest.raises(AttributeError):
            built.name = "other"

    def test_non_callable_is_rejected(self):
        with pytest.raises(TypeError):
            Handler("not callable")

    def test_empty_name_is_rejected(self):
        with pytest.raises(ValueError):
            NamedHandler(reply_pong, "")

    @pytest.mark.asyncio
    async def test_run_awaits_coroutine_handlers(self):
        async def main(connection):
            return "awaited"

        assert await handler(main).run(None) == "awaited"

    @pytest.mark.asyncio
    async def test_run_returns_sync_results(self):
        assert await handler(lambda connection: "direct").run(None) == "direct"


class TestRegistryBuilder:
    def test_first_handler_is_default(self):
        main = handler(reply_pong)
        confirm = handler("confirm", reply_pong)

        registry = RegistryBuilder().add(main, confirm).build()

        assert registry.default_handler is main
        assert registry.handlers == (main, confirm)

    def test_named_handler_registered_first_is_default(self):
        confirm = handler("confirm", reply_pong)
        main = handler(reply_pong)

        registry = RegistryBuilder().add(confirm).add(main).build()

        assert registry.default_handler is confirm

    def test_extensions_keep_registration_order(self):
        first = Extension()
        second = Extension()

        registry = (
            RegistryBuilder()
            .add(second)
            .add(handler(reply_pong))
            .add(first)
            .build()
        )

        assert registry.extensions == (second, first)

    def test_unrelated_exports_are_ignored(self):
        main = handler(reply_pong)

        registry = RegistryBuilder().add_all(
            [main, "text", 42, reply_pong, None]
        ).build()

        assert registry.handlers == (main,)
        assert registry.extensions == ()

    def test_empty_registry_has_no_default(self):
        registry = Registry()

        assert registry.default_handler is None
        assert registry.named("confirm") is None

    def test_named_lookup(self):
        confirm = handler("confirm", reply_pong)
        registry = RegistryBuilder().add(handler(reply_pong), confirm).build()

        assert registry.named("confirm") is confirm
        assert registry.named("missing") is None


class TestRegistryCopy:
    def test_copy_shares_handlers(self):
        main = handler(reply_pong)
        registry = RegistryBuilder().add(main, MultiHandler(main)).build()

        copied, _ = registry.copy(Context())

        assert copied.handlers[0] is main
        assert copied.extensions[0].main is main

    def test_copy_isolates_extension_state(self):
        main = handler(reply_pong)
        multi_handler = MultiHandler(main)
        registry = RegistryBuilder().add(main, multi_handler).build()

        copied, _ = registry.copy(Context())
        copied.extensions[0].select(("127.0.0.1", 4000), "confirm")

        assert copied.extensions[0] is not multi_handler
        assert multi_handler.selected(("127.0.0.1", 4000)) is None

    def test_copy_keeps_extension_and_store_objects_joined(self):
        class Sessions(Extension):
            def __init__(self) -> None:
                self.seen: list[str] = []

            def on_start(self, data: Context):
                data["seen"] = self.seen

        sessions = Sessions()
        data = Context()
        sessions.on_start(data)

        registry = RegistryBuilder().add(handler(reply_pong), sessions).build()
        copied, copied_data = registry.copy(data)

        copied.extensions[0].seen.append("a")

        assert copied_data["seen"] is copied.extensions[0].seen
        assert copied_data["seen"] == ["a"]
        assert sessions.seen == []
        assert data["seen"] == []

    def test_copy_shares_uncopyable_values(self):
        class Guarded(Extension):
            def __init__(self, lock) -> None:
                self.lock = lock
                self.hits: list[str] = []

        lock = threading.Lock()
        guarded = Guarded(lock)
        data = Context({"lock": lock, "users": ["alice"]})

        registry = RegistryBuilder().add(handler(reply_pong), guarded).build()
        copied, copied_data = registry.copy(data)

        assert copied_data["lock"] is lock
        assert copied_data["users"] == ["alice"]
        assert copied_data["users"] is not data["users"]

        assert copied.extensions[0] is not guarded
        assert copied.extensions[0].lock is lock

    def test_copy_shares_extension_it_cannot_copy(self):
        class Holding(Extension):
            def __init__(self) -> None:
                self.lock = threading.Lock()

        holding = Holding()
        registry = RegistryBuilder().add(handler(reply_pong), holding).build()

        copied, _ = registry.copy(Context({"count": 1}))

        assert copied.extensions[0] is holding
