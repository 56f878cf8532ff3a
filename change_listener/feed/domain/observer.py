"""FeedObserver port — domain events emitted during receive sessions."""

from typing import Protocol


class FeedObserver(Protocol):
    """Observer port for feed domain events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def session_started(
        self, subscription: str, controller_id: str, timeout_seconds: int
    ) -> None: ...

    def session_expired(self, subscription: str, forwarded: int) -> None: ...

    def session_ended(self, subscription: str, forwarded: int) -> None: ...

    def session_failed(self, subscription: str, reason: str) -> None: ...

    def message_forwarded(
        self, subscription: str, message_id: str, ordering_key: str, size: int
    ) -> None: ...

    def ack_failed(self, subscription: str, message_id: str, reason: str) -> None: ...
