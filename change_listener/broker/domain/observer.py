"""BrokerObserver port — domain events emitted by the broker adapter."""

from typing import Protocol


class BrokerObserver(Protocol):
    """Observer port for broker domain events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def broker_connected(self, project_id: str, emulator_host: str | None) -> None: ...

    def topic_created(self, topic: str) -> None: ...

    def subscription_created(self, subscription: str, topic: str) -> None: ...
