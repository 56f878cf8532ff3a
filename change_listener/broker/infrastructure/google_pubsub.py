"""GooglePubSubConnection — BrokerConnection implementation on Google Cloud Pub/Sub."""

import asyncio
import os
import threading
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Any, Self

from google.api_core.exceptions import AlreadyExists, GoogleAPIError, NotFound
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import pubsub_v1
from google.cloud.pubsub_v1.publisher.exceptions import (
    PublishToPausedOrderingKeyException,
)
from google.cloud.pubsub_v1.subscriber.futures import StreamingPullFuture
from google.cloud.pubsub_v1.subscriber.message import Message

from change_listener.broker.domain.message import ReceivedMessage
from change_listener.broker.domain.observer import BrokerObserver
from change_listener.broker.domain.subscription import SubscriptionSpec
from change_listener.broker.infrastructure.errors import (
    BrokerConnectionError,
    PublishError,
    ReceiveStreamError,
    SubscriptionProvisioningError,
    TopicProvisioningError,
)
from change_listener.config.domain.broker import BrokerConfig

_EMULATOR_ENV_VAR = "PUBSUB_EMULATOR_HOST"

# How often a held delivery checks whether its stream is shutting down.
_SETTLE_POLL_SECONDS = 0.5


@dataclass(frozen=True)
class _StreamClosed:
    error: BaseException | None


def _post(
    loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[Any], item: Any
) -> bool:
    """Hand an item from a client-library thread to the event loop's queue."""
    try:
        loop.call_soon_threadsafe(queue.put_nowait, item)
    except RuntimeError:
        # The loop has already been closed.
        return False
    return True


class GooglePubSubConnection:
    """Broker connection backed by the google-cloud-pubsub clients.

    Satisfies the BrokerConnection protocol structurally. The clients are
    synchronous and thread-safe; admin and publish calls run in worker threads
    so the event loop is never blocked. One instance is shared by every
    listener in a process.
    """

    def __init__(
        self,
        project_id: str,
        publisher: pubsub_v1.PublisherClient,
        subscriber: pubsub_v1.SubscriberClient,
        observer: BrokerObserver,
        max_outstanding_messages: int = 64,
    ) -> None:
        self._project_id = project_id
        self._publisher = publisher
        self._subscriber = subscriber
        self._observer = observer
        self._max_outstanding_messages = max_outstanding_messages

    @classmethod
    def connect(cls, config: BrokerConfig, observer: BrokerObserver) -> Self:
        """Build authenticated clients from ambient credentials.

        When an emulator host is configured it is exported for the client
        library, which then skips credential resolution.

        Raises:
            BrokerConnectionError: if no credentials can be resolved.
        """
        if config.emulator_host is not None:
            os.environ[_EMULATOR_ENV_VAR] = config.emulator_host
        try:
            publisher = pubsub_v1.PublisherClient(
                publisher_options=pubsub_v1.types.PublisherOptions(
                    enable_message_ordering=True
                )
            )
            subscriber = pubsub_v1.SubscriberClient()
        except DefaultCredentialsError as exc:
            raise BrokerConnectionError(reason=str(exc)) from exc

        observer.broker_connected(
            project_id=config.project_id, emulator_host=config.emulator_host
        )
        return cls(
            project_id=config.project_id,
            publisher=publisher,
            subscriber=subscriber,
            observer=observer,
            max_outstanding_messages=config.max_outstanding_messages,
        )

    async def ensure_topic(self, topic: str) -> None:
        """Resolve the topic, creating it when absent.

        Raises:
            TopicProvisioningError: on any broker error other than a lost
                creation race.
        """
        path = self._publisher.topic_path(self._project_id, topic)
        try:
            await asyncio.to_thread(self._publisher.get_topic, request={"topic": path})
            return
        except NotFound:
            pass
        except GoogleAPIError as exc:
            raise TopicProvisioningError(topic=topic, reason=str(exc)) from exc

        try:
            await asyncio.to_thread(
                self._publisher.create_topic, request={"name": path}
            )
        except AlreadyExists:
            # Another caller created it first.
            return
        except GoogleAPIError as exc:
            raise TopicProvisioningError(topic=topic, reason=str(exc)) from exc
        self._observer.topic_created(topic=topic)

    async def ensure_subscription(self, spec: SubscriptionSpec) -> None:
        """Resolve the subscription, creating it with its filter when absent.

        An existing subscription is used as-is; its filter and ordering flag
        are immutable on the broker side.

        Raises:
            SubscriptionProvisioningError: on any broker error other than a
                lost creation race.
        """
        path = self._subscriber.subscription_path(self._project_id, spec.name)
        try:
            await asyncio.to_thread(
                self._subscriber.get_subscription, request={"subscription": path}
            )
            return
        except NotFound:
            pass
        except GoogleAPIError as exc:
            raise SubscriptionProvisioningError(
                subscription=spec.name, reason=str(exc)
            ) from exc

        request = {
            "name": path,
            "topic": self._publisher.topic_path(self._project_id, spec.topic),
            "filter": spec.filter_expression,
            "enable_message_ordering": spec.enable_message_ordering,
        }
        try:
            await asyncio.to_thread(
                self._subscriber.create_subscription, request=request
            )
        except AlreadyExists:
            return
        except GoogleAPIError as exc:
            raise SubscriptionProvisioningError(
                subscription=spec.name, reason=str(exc)
            ) from exc
        self._observer.subscription_created(subscription=spec.name, topic=spec.topic)

    async def receive(
        self, subscription: str
    ) -> AsyncGenerator[ReceivedMessage, None]:
        """Stream deliveries from a streaming pull until closed or failed.

        The client library invokes the message callback on its own thread
        pool and, with ordering enabled, never runs two callbacks for the same
        ordering key at once. Each callback hands its message to the event
        loop and then holds until the message is acked, so per-key order is
        preserved through to the consumer. Messages still held when the
        iterator closes are nacked for redelivery.

        Raises:
            ReceiveStreamError: if the stream terminates with an error.
        """
        path = self._subscriber.subscription_path(self._project_id, subscription)
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[ReceivedMessage | _StreamClosed] = asyncio.Queue()
        closing = threading.Event()

        def on_message(message: Message) -> None:
            settled = threading.Event()

            def ack() -> None:
                message.ack()
                settled.set()

            received = ReceivedMessage(
                message_id=message.message_id,
                data=message.data,
                ordering_key=message.ordering_key,
                attributes=dict(message.attributes),
                ack=ack,
            )
            if not _post(loop, queue, received):
                message.nack()
                return
            while not settled.wait(_SETTLE_POLL_SECONDS):
                if closing.is_set():
                    message.nack()
                    return

        def on_stream_done(future: StreamingPullFuture) -> None:
            error = None if future.cancelled() else future.exception()
            _post(loop, queue, _StreamClosed(error=error))

        streaming_pull = self._subscriber.subscribe(
            path,
            callback=on_message,
            flow_control=pubsub_v1.types.FlowControl(
                max_messages=self._max_outstanding_messages
            ),
        )
        streaming_pull.add_done_callback(on_stream_done)
        try:
            while True:
                item = await queue.get()
                if isinstance(item, _StreamClosed):
                    if item.error is not None:
                        raise ReceiveStreamError(
                            subscription=subscription, reason=str(item.error)
                        ) from item.error
                    return
                yield item
        finally:
            closing.set()
            await asyncio.to_thread(streaming_pull.cancel)

    async def publish(
        self,
        topic: str,
        data: bytes,
        ordering_key: str,
        attributes: dict[str, str],
    ) -> str:
        """Publish one payload and wait for the broker to confirm it.

        Raises:
            PublishError: if the publish fails. Publishing for the ordering key
                is resumed so later messages are not blocked behind the failure.
        """
        path = self._publisher.topic_path(self._project_id, topic)
        try:
            future = self._publisher.publish(
                path, data, ordering_key=ordering_key, **attributes
            )
            return await asyncio.to_thread(future.result)
        except (GoogleAPIError, PublishToPausedOrderingKeyException) as exc:
            self._publisher.resume_publish(path, ordering_key)
            raise PublishError(topic=topic, reason=str(exc)) from exc

    async def close(self) -> None:
        await asyncio.to_thread(self._publisher.stop)
        await asyncio.to_thread(self._subscriber.close)
