"""Error types raised by the feed domain."""

from change_listener.core.errors import ChangeListenerError, ConstructionError


class FeedConfigError(ConstructionError):
    """Raised when a feed is constructed with invalid parameters."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to configure change feed: {reason}", retriable=False)


class ChannelClosedError(ChangeListenerError):
    """Raised when a payload is sent on a channel that has been closed."""

    def __init__(self) -> None:
        super().__init__(
            "Failed to send payload: change channel is closed", retriable=False
        )
