"""
Tests for per-client handler selection.

Covers:
- MultiHandler running the main handler for unselected clients
- selections persisting across packets until cleared
- set_handler/remove_handler for the sender and for other clients
- "host:port" addresses resolving to the same client
- unknown handler names raising HandlerNotFoundError
- selection without a MultiHandler raising MultiHandlerNotInstalledError
"""

import pytest

from switchboard.exceptions import (
    HandlerNotFoundError,
    MultiHandlerNotInstalledError,
)
from switchboard.server import (
    Context,
    MultiHandler,
    OutputBuffer,
    Pipeline,
    RegistryBuilder,
    UDPTransport,
    handler,
    remove_handler,
    respond,
    set_handler,
)


CLIENT = ("127.0.0.1", 4000)
OTHER_CLIENT = ("127.0.0.1", 4001)


def main_call(connection):
    if connection.packet == "start":
        set_handler(connection, "confirm")
        respond(connection, "ok")

    elif connection.packet == "redirect":
        set_handler(connection, OTHER_CLIENT, "confirm")
        respond(connection, "redirected")

    else:
        respond(connection, "main")


def confirm_call(connection):
    if connection.packet == "yes":
        remove_handler(connection)
        respond(connection, "confirm")

    else:
        respond(connection, "confirm?")


def create_pipeline() -> tuple[Pipeline, MultiHandler]:
    main = handler(main_call)
    confirm = handler("confirm", confirm_call)
    multi_handler = MultiHandler(main)

    registry = RegistryBuilder().add(main, confirm, multi_handler).build()
    pipeline = Pipeline(registry, Context(), UDPTransport("127.0.0.1", 0))

    return pipeline, multi_handler


async def exchange(
    pipeline: Pipeline,
    packet: str,
    address: tuple[str, int] = CLIENT,
) -> str:
    output = OutputBuffer()
    await pipeline.dispatch(packet.encode(), address, output=output)

    return output.flush().decode()


class TestMultiHandlerSelection:
    def test_select_and_clear(self):
        multi_handler = MultiHandler(handler(main_call))

        multi_handler.select(CLIENT, "confirm")
        assert multi_handler.selected(CLIENT) == "confirm"

        multi_handler.clear(CLIENT)
        assert multi_handler.selected(CLIENT) is None

    def test_string_addresses_match_tuples(self):
        multi_handler = MultiHandler(handler(main_call))

        multi_handler.select("127.0.0.1:4000", "confirm")

        assert multi_handler.selected(CLIENT) == "confirm"

    def test_clearing_unselected_client_is_a_no_op(self):
        multi_handler = MultiHandler(handler(main_call))
        multi_handler.clear(CLIENT)

        assert multi_handler.selections == {}

    def test_main_must_be_a_handler(self):
        with pytest.raises(TypeError):
            MultiHandler(main_call)


class TestMultiHandlerRouting:
    @pytest.mark.asyncio
    async def test_unselected_client_gets_main(self):
        pipeline, _ = create_pipeline()

        assert await exchange(pipeline, "hello") == "main"

    @pytest.mark.asyncio
    async def test_multi_turn_conversation(self):
        pipeline, multi_handler = create_pipeline()

        assert await exchange(pipeline, "start") == "ok"
        assert multi_handler.selected(CLIENT) == "confirm"

        assert await exchange(pipeline, "maybe") == "confirm?"
        assert await exchange(pipeline, "yes") == "confirm"
        assert multi_handler.selected(CLIENT) is None

        assert await exchange(pipeline, "hello") == "main"

    @pytest.mark.asyncio
    async def test_selection_is_per_client(self):
        pipeline, _ = create_pipeline()

        await exchange(pipeline, "start")

        assert await exchange(pipeline, "hello", address=OTHER_CLIENT) == "main"
        assert await exchange(pipeline, "hello") == "confirm?"

    @pytest.mark.asyncio
    async def test_redirecting_another_client(self):
        pipeline, multi_handler = create_pipeline()

        assert await exchange(pipeline, "redirect") == "redirected"
        assert multi_handler.selected(CLIENT) is None
        assert await exchange(pipeline, "hello", address=OTHER_CLIENT) == "confirm?"

    @pytest.mark.asyncio
    async def test_default_handler_does_not_run_twice(self):
        calls: list[str] = []
        main = handler(lambda connection: calls.append("main"))

        registry = RegistryBuilder().add(main, MultiHandler(main)).build()
        pipeline = Pipeline(registry, Context(), UDPTransport("127.0.0.1", 0))

        handled = await pipeline.dispatch(b"ping", CLIENT)

        assert handled is False
        assert calls == ["main"]

    @pytest.mark.asyncio
    async def test_unknown_selection_raises(self):
        pipeline, multi_handler = create_pipeline()
        multi_handler.select(CLIENT, "missing")

        with pytest.raises(HandlerNotFoundError) as raised:
            await exchange(pipeline, "hello")

        assert raised.value.name == "missing"
        assert raised.value.address == CLIENT


class TestSelectionWithoutMultiHandler:
    @pytest.mark.asyncio
    async def test_set_handler_requires_multi_handler(self):
        registry = RegistryBuilder().add(
            handler(lambda connection: set_handler(connection, "confirm"))
        ).build()
        pipeline = Pipeline(registry, Context(), UDPTransport("127.0.0.1", 0))

        with pytest.raises(MultiHandlerNotInstalledError):
            await pipeline.dispatch(b"start", CLIENT)
