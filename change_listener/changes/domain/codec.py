"""ChangeCodec Protocol — structural interface for the change wire format."""

from typing import Protocol

from change_listener.changes.domain.kind import ChangeKind
from change_listener.changes.domain.record import ChangeRecord


class ChangeCodec(Protocol):
    """Converts change records to and from their broker payload bytes."""

    def decode(self, kind: ChangeKind, data: bytes) -> ChangeRecord: ...

    def encode(self, record: ChangeRecord) -> bytes: ...
