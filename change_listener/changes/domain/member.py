"""Member and MemberChange value objects — a device's membership of a network."""

from typing import Self

from pydantic import BaseModel, model_validator

from change_listener.changes.domain.metadata import (
    ChangeMetadata,
    ChangeSource,
    ChangeSourceField,
)


class Member(BaseModel, frozen=True):
    """Snapshot of one device's membership record on a network.

    capabilities and tags carry JSON text exactly as the controller stores it.
    """

    device_id: str = ""
    network_id: str = ""
    authorized: bool = False
    identity: str = ""
    ip_assignments: list[str] = []
    active_bridge: bool = False
    no_auto_assign_ips: bool = False
    tags: str = ""
    capabilities: str = ""
    creation_time: int = 0
    revision: int = 0
    last_authorized_time: int = 0
    last_deauthorized_time: int = 0
    last_authorized_credential_type: str = ""
    last_authorized_credential: str = ""
    version_major: int = 0
    version_minor: int = 0
    version_rev: int = 0
    version_protocol: int = 0
    remote_trace_level: int = 0
    remote_trace_target: str = ""
    sso_exempt: bool = False
    auth_expiry_time: int = 0


class MemberChange(BaseModel, frozen=True):
    """One membership mutation: a creation, modification, or deletion.

    previous is absent for a new member, current is absent for a deleted one.
    """

    previous: Member | None = None
    current: Member | None = None
    change_source: ChangeSourceField = ChangeSource.UNKNOWN
    metadata: ChangeMetadata | None = None

    @model_validator(mode="after")
    def _require_snapshot(self) -> Self:
        if self.previous is None and self.current is None:
            raise ValueError("member change carries neither previous nor current")
        return self

    @property
    def network_id(self) -> str:
        snapshot = self.current if self.current is not None else self.previous
        assert snapshot is not None  # guaranteed by _require_snapshot
        return snapshot.network_id
