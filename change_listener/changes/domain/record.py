"""ChangeRecord — the decoded form of any change, and its callback serialization."""

from change_listener.changes.domain.kind import ChangeKind
from change_listener.changes.domain.member import MemberChange
from change_listener.changes.domain.network import NetworkChange

type ChangeRecord = NetworkChange | MemberChange

RECORD_TYPES: dict[ChangeKind, type[NetworkChange] | type[MemberChange]] = {
    ChangeKind.NETWORK: NetworkChange,
    ChangeKind.MEMBER: MemberChange,
}


def kind_of(record: ChangeRecord) -> ChangeKind:
    if isinstance(record, NetworkChange):
        return ChangeKind.NETWORK
    return ChangeKind.MEMBER


def serialize(record: ChangeRecord) -> bytes:
    """Render a record as compact UTF-8 JSON for the callback bridge.

    The full document is always returned; there is no size cap.
    """
    return record.model_dump_json(exclude_none=True).encode("utf-8")
