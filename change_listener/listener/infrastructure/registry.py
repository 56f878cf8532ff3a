"""Listener registry — maps a change kind to a wired ChangeListener."""

from typing import Any

from change_listener.broker.domain.connection import BrokerConnection
from change_listener.changes.domain.codec import ChangeCodec
from change_listener.changes.domain.kind import ChangeKind
from change_listener.changes.infrastructure.protobuf_codec import ProtobufChangeCodec
from change_listener.feed.domain.observer import FeedObserver
from change_listener.listener.application.listener import ChangeListener
from change_listener.listener.domain.callback import ChangeCallback
from change_listener.listener.domain.errors import ListenerKindNotSupportedError
from change_listener.listener.domain.observer import ListenerObserver


async def create_listener(
    kind: ChangeKind | str,
    connection: BrokerConnection,
    controller_id: str,
    session_timeout_seconds: int,
    callback: ChangeCallback,
    context: Any,
    observer: ListenerObserver,
    feed_observer: FeedObserver,
    codec: ChangeCodec | None = None,
    channel_capacity: int = 64,
    resubscribe_backoff_seconds: float = 5.0,
) -> ChangeListener:
    """Return a listener for the given kind, decoding with the protobuf codec
    unless another codec is supplied.

    Raises:
        ListenerKindNotSupportedError: if kind is not a known change kind.
        ConstructionError: if the listener cannot be built (see ChangeListener.create).
    """
    try:
        change_kind = ChangeKind(kind)
    except ValueError as exc:
        raise ListenerKindNotSupportedError(kind=str(kind)) from exc

    return await ChangeListener.create(
        connection=connection,
        kind=change_kind,
        controller_id=controller_id,
        session_timeout_seconds=session_timeout_seconds,
        callback=callback,
        context=context,
        codec=codec if codec is not None else ProtobufChangeCodec(),
        observer=observer,
        feed_observer=feed_observer,
        channel_capacity=channel_capacity,
        resubscribe_backoff_seconds=resubscribe_backoff_seconds,
    )


async def create_network_listener(
    connection: BrokerConnection,
    controller_id: str,
    session_timeout_seconds: int,
    callback: ChangeCallback,
    context: Any,
    observer: ListenerObserver,
    feed_observer: FeedObserver,
    **options: Any,
) -> ChangeListener:
    return await create_listener(
        ChangeKind.NETWORK,
        connection=connection,
        controller_id=controller_id,
        session_timeout_seconds=session_timeout_seconds,
        callback=callback,
        context=context,
        observer=observer,
        feed_observer=feed_observer,
        **options,
    )


async def create_member_listener(
    connection: BrokerConnection,
    controller_id: str,
    session_timeout_seconds: int,
    callback: ChangeCallback,
    context: Any,
    observer: ListenerObserver,
    feed_observer: FeedObserver,
    **options: Any,
) -> ChangeListener:
    return await create_listener(
        ChangeKind.MEMBER,
        connection=connection,
        controller_id=controller_id,
        session_timeout_seconds=session_timeout_seconds,
        callback=callback,
        context=context,
        observer=observer,
        feed_observer=feed_observer,
        **options,
    )
