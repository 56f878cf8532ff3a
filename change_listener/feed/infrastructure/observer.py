"""Structlog implementation of the FeedObserver port."""

import structlog


class StructlogFeedObserver:
    """Delegates feed domain events to structlog.

    Satisfies the FeedObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def session_started(
        self, subscription: str, controller_id: str, timeout_seconds: int
    ) -> None:
        self._log.info(
            "feed.session_started",
            subscription=subscription,
            controller_id=controller_id,
            timeout_seconds=timeout_seconds,
        )

    def session_expired(self, subscription: str, forwarded: int) -> None:
        self._log.info(
            "feed.session_expired", subscription=subscription, forwarded=forwarded
        )

    def session_ended(self, subscription: str, forwarded: int) -> None:
        self._log.info(
            "feed.session_ended", subscription=subscription, forwarded=forwarded
        )

    def session_failed(self, subscription: str, reason: str) -> None:
        self._log.error("feed.session_failed", subscription=subscription, reason=reason)

    def message_forwarded(
        self, subscription: str, message_id: str, ordering_key: str, size: int
    ) -> None:
        self._log.debug(
            "feed.message_forwarded",
            subscription=subscription,
            message_id=message_id,
            ordering_key=ordering_key,
            size=size,
        )

    def ack_failed(self, subscription: str, message_id: str, reason: str) -> None:
        self._log.warning(
            "feed.ack_failed",
            subscription=subscription,
            message_id=message_id,
            reason=reason,
        )
