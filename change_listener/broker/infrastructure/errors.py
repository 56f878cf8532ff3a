"""Error types raised by the broker infrastructure."""

from change_listener.core.errors import (
    ChangeListenerError,
    ConstructionError,
    SessionError,
)


class BrokerConnectionError(ConstructionError):
    """Raised when credentials cannot be resolved or the clients cannot be built."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to connect to broker: {reason}", retriable=False)


class TopicProvisioningError(ConstructionError):
    """Raised when a topic can neither be found nor created."""

    def __init__(self, topic: str, reason: str) -> None:
        self.topic = topic
        super().__init__(
            f"Failed to provision topic '{topic}': {reason}", retriable=False
        )


class SubscriptionProvisioningError(SessionError):
    """Raised when a subscription can neither be found nor created.

    Provisioning runs at the start of each session, so the failure is retriable.
    """

    def __init__(self, subscription: str, reason: str) -> None:
        self.subscription = subscription
        super().__init__(
            f"Failed to provision subscription '{subscription}': {reason}",
            retriable=True,
        )


class ReceiveStreamError(SessionError):
    """Raised when the streaming pull ends with an error mid-session."""

    def __init__(self, subscription: str, reason: str) -> None:
        self.subscription = subscription
        super().__init__(
            f"Failed to receive from subscription '{subscription}': {reason}",
            retriable=True,
        )


class PublishError(ChangeListenerError):
    """Raised when the broker rejects or fails to confirm a publish."""

    def __init__(self, topic: str, reason: str, retriable: bool = False) -> None:
        self.topic = topic
        super().__init__(
            f"Failed to publish to topic '{topic}': {reason}", retriable=retriable
        )
