"""Structlog implementation of the ListenerObserver port."""

import structlog


class StructlogListenerObserver:
    """Delegates listener domain events to structlog.

    Satisfies the ListenerObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def change_dispatched(self, kind: str, network_id: str, size: int) -> None:
        self._log.debug(
            "listener.change_dispatched", kind=kind, network_id=network_id, size=size
        )

    def change_decode_failed(self, kind: str, reason: str, size: int) -> None:
        self._log.error(
            "listener.change_decode_failed", kind=kind, reason=reason, size=size
        )

    def callback_failed(self, kind: str, reason: str) -> None:
        self._log.error("listener.callback_failed", kind=kind, reason=reason)

    def session_retry(self, kind: str, reason: str, backoff_seconds: float) -> None:
        self._log.warning(
            "listener.session_retry",
            kind=kind,
            reason=reason,
            backoff_seconds=backoff_seconds,
        )

    def listener_stopped(self, kind: str, dispatched: int) -> None:
        self._log.info("listener.stopped", kind=kind, dispatched=dispatched)

    def listener_closed(self, kind: str, dropped: int) -> None:
        self._log.info("listener.closed", kind=kind, dropped=dropped)
