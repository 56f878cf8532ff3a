"""Tests for the listener registry."""

import pytest

from change_listener.changes.domain.kind import ChangeKind
from change_listener.listener.application.listener import ChangeListener
from change_listener.listener.domain.errors import ListenerKindNotSupportedError
from change_listener.listener.infrastructure.registry import (
    create_listener,
    create_member_listener,
    create_network_listener,
)
from tests.broker.fake_broker import FakeBroker
from tests.feed.fake_observer import FakeFeedObserver
from tests.listener.fake_callback import RecordingCallback
from tests.listener.fake_observer import FakeListenerObserver


async def _create(kind: ChangeKind | str, broker: FakeBroker) -> ChangeListener:
    return await create_listener(
        kind,
        connection=broker,
        controller_id="ctl1",
        session_timeout_seconds=5,
        callback=RecordingCallback(),
        context=None,
        observer=FakeListenerObserver(),
        feed_observer=FakeFeedObserver(),
    )


class TestCreateListener:
    async def test_accepts_kind_value(self) -> None:
        listener = await _create("member", FakeBroker())
        assert listener.kind is ChangeKind.MEMBER

    async def test_accepts_kind_enum(self) -> None:
        listener = await _create(ChangeKind.NETWORK, FakeBroker())
        assert listener.kind is ChangeKind.NETWORK

    async def test_unknown_kind_raises(self) -> None:
        with pytest.raises(ListenerKindNotSupportedError, match="router"):
            await _create("router", FakeBroker())

    async def test_unknown_kind_does_not_touch_broker(self) -> None:
        broker = FakeBroker()
        with pytest.raises(ListenerKindNotSupportedError):
            await _create("router", broker)
        assert broker.ensure_topic_calls == 0


class TestVariantFactories:
    async def test_network_listener(self) -> None:
        broker = FakeBroker()
        listener = await create_network_listener(
            connection=broker,
            controller_id="ctl1",
            session_timeout_seconds=5,
            callback=RecordingCallback(),
            context=None,
            observer=FakeListenerObserver(),
            feed_observer=FakeFeedObserver(),
        )

        assert listener.kind is ChangeKind.NETWORK
        assert broker.topics == {"controller-network-change-stream"}

    async def test_member_listener_passes_options_through(self) -> None:
        broker = FakeBroker()
        listener = await create_member_listener(
            connection=broker,
            controller_id="ctl1",
            session_timeout_seconds=7,
            callback=RecordingCallback(),
            context=None,
            observer=FakeListenerObserver(),
            feed_observer=FakeFeedObserver(),
            channel_capacity=4,
        )

        assert listener.kind is ChangeKind.MEMBER
        assert listener.feed_config.session_timeout_seconds == 7
        assert listener.feed_config.subscription_name == (
            "ctl1-member-change-subscription"
        )
