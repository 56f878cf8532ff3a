"""ChangeCallback Protocol — the boundary to a caller-owned change handler."""

from typing import Any, Protocol


class ChangeCallback(Protocol):
    """Handler invoked once per dispatched change.

    context is the opaque value supplied when the listener was built; the
    listener threads it through untouched and never outlives the caller's
    ownership of it. data is the complete serialized record and length is
    len(data). The return value is ignored.
    """

    def __call__(self, context: Any, data: bytes, length: int) -> None: ...
