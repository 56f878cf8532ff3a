"""BrokerConnection Protocol — structural interface for the message broker."""

from collections.abc import AsyncGenerator
from typing import Protocol

from change_listener.broker.domain.message import ReceivedMessage
from change_listener.broker.domain.subscription import SubscriptionSpec


class BrokerConnection(Protocol):
    """Authenticated access to topics and subscriptions on one broker.

    One connection is shared by every feed opened against the same broker;
    implementations must tolerate concurrent use from several listeners.
    """

    async def ensure_topic(self, topic: str) -> None:
        """Resolve the topic, creating it if absent. Already-exists is success."""
        ...

    async def ensure_subscription(self, spec: SubscriptionSpec) -> None:
        """Resolve the subscription, creating it with its filter if absent."""
        ...

    def receive(self, subscription: str) -> AsyncGenerator[ReceivedMessage, None]:
        """Stream deliveries until the iterator is closed or the stream fails.

        Messages sharing an ordering key are yielded in publish order; the next
        one for a key is not yielded until the previous one has been acked.
        """
        ...

    async def publish(
        self,
        topic: str,
        data: bytes,
        ordering_key: str,
        attributes: dict[str, str],
    ) -> str:
        """Publish one payload and return the broker-assigned message id."""
        ...

    async def close(self) -> None: ...
