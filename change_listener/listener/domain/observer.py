"""ListenerObserver port — domain events emitted while dispatching changes."""

from typing import Protocol


class ListenerObserver(Protocol):
    """Observer port for listener domain events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def change_dispatched(self, kind: str, network_id: str, size: int) -> None: ...

    def change_decode_failed(self, kind: str, reason: str, size: int) -> None: ...

    def callback_failed(self, kind: str, reason: str) -> None: ...

    def session_retry(self, kind: str, reason: str, backoff_seconds: float) -> None: ...

    def listener_stopped(self, kind: str, dispatched: int) -> None: ...

    def listener_closed(self, kind: str, dropped: int) -> None: ...
