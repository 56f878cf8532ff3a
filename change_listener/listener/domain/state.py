"""ListenerState — lifecycle of a change listener instance."""

from enum import StrEnum


class ListenerState(StrEnum):
    """Session-side lifecycle of a listener.

    CONSTRUCTED -> LISTENING <-> SESSION_EXPIRED, and CLOSED from any state.
    CLOSED is terminal.
    """

    CONSTRUCTED = "constructed"
    LISTENING = "listening"
    SESSION_EXPIRED = "session_expired"
    CLOSED = "closed"
