"""Per-controller listener configuration model."""

from pydantic import BaseModel, Field


class ListenerConfig(BaseModel, frozen=True):
    """Settings shared by every change listener started for one controller."""

    controller_id: str = Field(min_length=1)
    session_timeout_seconds: int = Field(ge=1)
    channel_capacity: int = Field(default=64, ge=1)
    resubscribe_backoff_seconds: float = Field(default=5.0, ge=0.0)
