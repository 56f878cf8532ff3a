"""Top-level AppConfig aggregate — the root configuration object."""

from pydantic import BaseModel, Field

from change_listener.changes.domain.kind import ChangeKind
from change_listener.config.domain.broker import BrokerConfig
from change_listener.config.domain.listener import ListenerConfig


class AppConfig(BaseModel, frozen=True):
    """Root configuration aggregate for a change-listener process."""

    broker: BrokerConfig
    listener: ListenerConfig
    kinds: list[ChangeKind] = Field(
        default=[ChangeKind.NETWORK, ChangeKind.MEMBER], min_length=1
    )
