"""Network and NetworkChange value objects — a virtual network's configuration."""

from typing import Self

from pydantic import BaseModel, model_validator

from change_listener.changes.domain.metadata import (
    ChangeMetadata,
    ChangeSource,
    ChangeSourceField,
)


class IpRange(BaseModel, frozen=True):
    start_ip: str = ""
    end_ip: str = ""


class Route(BaseModel, frozen=True):
    target: str = ""
    via: str = ""


class Ipv4AssignMode(BaseModel, frozen=True):
    zt: bool = False


class Ipv6AssignMode(BaseModel, frozen=True):
    zt: bool = False
    six_plane: bool = False
    rfc4193: bool = False


class Dns(BaseModel, frozen=True):
    domain: str = ""
    nameservers: list[str] = []


class Network(BaseModel, frozen=True):
    """Snapshot of one network's configuration.

    capabilities, rules and tags carry JSON text exactly as the controller stores it.
    """

    network_id: str = ""
    name: str = ""
    capabilities: str = ""
    creation_time: int = 0
    enable_broadcast: bool = False
    assignment_pools: list[IpRange] = []
    mtu: int = 0
    multicast_limit: int = 0
    is_private: bool = False
    remote_trace_level: int = 0
    remote_trace_target: str = ""
    revision: int = 0
    routes: list[Route] = []
    rules: str = ""
    rules_source: str = ""
    tags: str = ""
    ipv4_assign_mode: Ipv4AssignMode | None = None
    ipv6_assign_mode: Ipv6AssignMode | None = None
    dns: Dns | None = None
    sso_enabled: bool = False
    sso_client_id: str = ""
    sso_authorization_endpoint: str = ""
    sso_issuer: str = ""
    sso_provider: str = ""


class NetworkChange(BaseModel, frozen=True):
    """One network mutation: a creation, modification, or deletion.

    previous is absent for a new network, current is absent for a deleted one.
    """

    previous: Network | None = None
    current: Network | None = None
    change_source: ChangeSourceField = ChangeSource.UNKNOWN
    metadata: ChangeMetadata | None = None

    @model_validator(mode="after")
    def _require_snapshot(self) -> Self:
        if self.previous is None and self.current is None:
            raise ValueError("network change carries neither previous nor current")
        return self

    @property
    def network_id(self) -> str:
        snapshot = self.current if self.current is not None else self.previous
        assert snapshot is not None  # guaranteed by _require_snapshot
        return snapshot.network_id
