"""Error types raised by the listener domain."""

from change_listener.core.errors import ChangeListenerError, ConstructionError


class ListenerConfigError(ConstructionError):
    """Raised when a listener is constructed with an invalid parameter."""

    def __init__(self, kind: str, reason: str) -> None:
        self.kind = kind
        super().__init__(
            f"Failed to construct {kind} listener: {reason}", retriable=False
        )


class ListenerKindNotSupportedError(ConstructionError):
    """Raised when a listener is requested for an unknown change kind."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(
            f"Failed to construct listener: unsupported change kind '{kind}'",
            retriable=False,
        )


class ListenerClosedError(ChangeListenerError):
    """Raised when a closed listener is asked to listen or run again."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(
            f"Failed to start {kind} listener: listener is closed", retriable=False
        )
