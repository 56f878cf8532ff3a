"""Base exception classes for all change-listener errors."""


class ChangeListenerError(Exception):
    """Base class for all change-listener errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable


class ConstructionError(ChangeListenerError):
    """Raised when a feed or listener cannot be built.

    Fatal to the instance being constructed; nothing is retried internally.
    """


class SessionError(ChangeListenerError):
    """Raised when a receive session fails mid-flight.

    The caller decides whether to open another session.
    """
