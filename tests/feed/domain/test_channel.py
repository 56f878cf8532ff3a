"""Tests for the bounded ChangeChannel."""

import asyncio

import pytest

from change_listener.feed.domain.channel import ChangeChannel
from change_listener.feed.domain.errors import ChannelClosedError


class TestSendReceive:
    async def test_fifo_order(self) -> None:
        channel = ChangeChannel(capacity=4)
        for payload in (b"a", b"b", b"c"):
            await channel.send(payload)

        assert [await channel.receive() for _ in range(3)] == [b"a", b"b", b"c"]

    async def test_receive_waits_for_send(self) -> None:
        channel = ChangeChannel()
        receiver = asyncio.create_task(channel.receive())
        await asyncio.sleep(0)
        assert not receiver.done()

        await channel.send(b"x")
        assert await asyncio.wait_for(receiver, timeout=1) == b"x"

    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            ChangeChannel(capacity=0)


class TestBackpressure:
    async def test_send_blocks_while_full(self) -> None:
        channel = ChangeChannel(capacity=1)
        await channel.send(b"first")
        sender = asyncio.create_task(channel.send(b"second"))
        await asyncio.sleep(0.01)
        assert not sender.done()

        assert await channel.receive() == b"first"
        await asyncio.wait_for(sender, timeout=1)
        assert await channel.receive() == b"second"

    async def test_nothing_is_dropped(self) -> None:
        channel = ChangeChannel(capacity=2)
        payloads = [str(i).encode() for i in range(20)]

        async def produce() -> None:
            for payload in payloads:
                await channel.send(payload)
            await channel.close()

        producer = asyncio.create_task(produce())
        received = []
        while (payload := await channel.receive()) is not None:
            received.append(payload)
        await producer

        assert received == payloads


class TestClose:
    async def test_receive_drains_then_returns_none(self) -> None:
        channel = ChangeChannel()
        await channel.send(b"pending")
        await channel.close()

        assert await channel.receive() == b"pending"
        assert await channel.receive() is None

    async def test_close_wakes_waiting_receiver(self) -> None:
        channel = ChangeChannel()
        receiver = asyncio.create_task(channel.receive())
        await asyncio.sleep(0)

        await channel.close()
        assert await asyncio.wait_for(receiver, timeout=1) is None

    async def test_send_after_close_raises(self) -> None:
        channel = ChangeChannel()
        await channel.close()

        with pytest.raises(ChannelClosedError):
            await channel.send(b"late")

    async def test_close_wakes_blocked_sender(self) -> None:
        channel = ChangeChannel(capacity=1)
        await channel.send(b"first")
        sender = asyncio.create_task(channel.send(b"second"))
        await asyncio.sleep(0)

        await channel.close()
        with pytest.raises(ChannelClosedError):
            await asyncio.wait_for(sender, timeout=1)

    async def test_discard_pending_reports_dropped(self) -> None:
        channel = ChangeChannel()
        await channel.send(b"a")
        await channel.send(b"b")

        assert await channel.close(discard_pending=True) == 2
        assert len(channel) == 0
        assert channel.closed
        assert await channel.receive() is None
