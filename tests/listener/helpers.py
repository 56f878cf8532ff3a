"""Shared wiring for listener tests: build, publish, and wait."""

import asyncio
from collections.abc import Callable
from typing import Any

from change_listener.changes.application.publisher import ChangePublisher
from change_listener.changes.domain.codec import ChangeCodec
from change_listener.changes.domain.kind import ChangeKind
from change_listener.changes.domain.record import ChangeRecord
from change_listener.changes.infrastructure.protobuf_codec import ProtobufChangeCodec
from change_listener.listener.application.listener import ChangeListener
from tests.broker.fake_broker import FakeBroker
from tests.feed.fake_observer import FakeFeedObserver
from tests.listener.fake_callback import RecordingCallback
from tests.listener.fake_observer import FakeListenerObserver


async def build_listener(
    broker: FakeBroker,
    callback: RecordingCallback,
    kind: ChangeKind = ChangeKind.MEMBER,
    context: Any = None,
    observer: FakeListenerObserver | None = None,
    feed_observer: FakeFeedObserver | None = None,
    timeout: int = 1,
    backoff: float = 0.0,
    capacity: int = 64,
    codec: ChangeCodec | None = None,
) -> ChangeListener:
    listener = await ChangeListener.create(
        connection=broker,
        kind=kind,
        controller_id="ctl1",
        session_timeout_seconds=timeout,
        callback=callback,
        context=context,
        codec=codec if codec is not None else ProtobufChangeCodec(),
        observer=observer if observer is not None else FakeListenerObserver(),
        feed_observer=(
            feed_observer if feed_observer is not None else FakeFeedObserver()
        ),
        channel_capacity=capacity,
        resubscribe_backoff_seconds=backoff,
    )
    # Subscribe up front so changes published before the first session are kept.
    await broker.ensure_subscription(listener.feed_config.subscription_spec())
    return listener


async def publish(
    broker: FakeBroker, *records: ChangeRecord, controller_id: str = "ctl1"
) -> None:
    publisher = ChangePublisher(
        connection=broker, codec=ProtobufChangeCodec(), controller_id=controller_id
    )
    for record in records:
        await publisher.publish(record)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.01)
