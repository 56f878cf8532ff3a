"""Error types raised by the change codec."""

from change_listener.core.errors import ChangeListenerError


class ChangeDecodeError(ChangeListenerError):
    """Raised when a payload cannot be decoded into a change record.

    A single malformed payload never ends a session; the dispatcher skips it.
    """

    def __init__(self, kind: str, reason: str) -> None:
        self.kind = kind
        super().__init__(
            f"Failed to decode {kind} change: {reason}", retriable=False
        )


class ChangeEncodeError(ChangeListenerError):
    """Raised when a change record cannot be encoded to its wire form."""

    def __init__(self, kind: str, reason: str) -> None:
        self.kind = kind
        super().__init__(
            f"Failed to encode {kind} change: {reason}", retriable=False
        )
