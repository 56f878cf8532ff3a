"""ChangeFeed — time-bounded receive sessions on one filtered, ordered subscription."""

import asyncio
from contextlib import aclosing
from typing import Self

from change_listener.broker.domain.connection import BrokerConnection
from change_listener.broker.domain.message import ReceivedMessage
from change_listener.core.errors import SessionError
from change_listener.feed.domain.channel import ChangeChannel
from change_listener.feed.domain.config import FeedConfig
from change_listener.feed.domain.observer import FeedObserver


class ChangeFeed:
    """Forwards raw payloads from one subscription into a ChangeChannel.

    Each call to listen() is one session: it ensures the subscription exists,
    receives until the session timeout elapses, and returns. The feed is the
    only producer on its channel.

    Delivery contract: a message is acked as soon as its payload has been
    handed to the channel, before it is decoded or dispatched. Redelivery is
    therefore limited to messages that never reached the channel; a process
    crash between hand-off and dispatch loses that change.
    """

    def __init__(
        self,
        connection: BrokerConnection,
        config: FeedConfig,
        channel: ChangeChannel,
        observer: FeedObserver,
    ) -> None:
        self._connection = connection
        self._config = config
        self._channel = channel
        self._observer = observer

    @classmethod
    async def create(
        cls,
        connection: BrokerConnection,
        config: FeedConfig,
        channel: ChangeChannel,
        observer: FeedObserver,
    ) -> Self:
        """Resolve the feed's topic and return a ready feed.

        Raises:
            TopicProvisioningError: if the topic can neither be found nor created.
        """
        await connection.ensure_topic(config.topic_name)
        return cls(
            connection=connection, config=config, channel=channel, observer=observer
        )

    @property
    def config(self) -> FeedConfig:
        return self._config

    async def listen(self) -> int:
        """Run one receive session and return the number of payloads forwarded.

        Returns when the session timeout elapses or the broker ends the stream.
        A full channel blocks the session; nothing is dropped.

        Raises:
            SessionError: if the subscription cannot be provisioned or the
                receive stream fails.
            ChannelClosedError: if the channel is closed mid-session.
        """
        spec = self._config.subscription_spec()
        forwarded = 0
        try:
            await self._connection.ensure_subscription(spec)
            self._observer.session_started(
                subscription=spec.name,
                controller_id=self._config.controller_id,
                timeout_seconds=self._config.session_timeout_seconds,
            )
            deadline = asyncio.timeout(self._config.session_timeout_seconds)
            try:
                async with deadline:
                    async with aclosing(
                        self._connection.receive(spec.name)
                    ) as messages:
                        async for message in messages:
                            await self._channel.send(message.data)
                            self._acknowledge(message)
                            forwarded += 1
                            self._observer.message_forwarded(
                                subscription=spec.name,
                                message_id=message.message_id,
                                ordering_key=message.ordering_key,
                                size=len(message.data),
                            )
            except TimeoutError:
                if not deadline.expired():
                    raise
                self._observer.session_expired(
                    subscription=spec.name, forwarded=forwarded
                )
                return forwarded
        except SessionError as exc:
            self._observer.session_failed(subscription=spec.name, reason=str(exc))
            raise

        self._observer.session_ended(subscription=spec.name, forwarded=forwarded)
        return forwarded

    def _acknowledge(self, message: ReceivedMessage) -> None:
        """Ack a forwarded message. Failures are logged and never retried."""
        try:
            message.ack()
        except Exception as exc:
            self._observer.ack_failed(
                subscription=self._config.subscription_name,
                message_id=message.message_id,
                reason=str(exc),
            )
