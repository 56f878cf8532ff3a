"""Broker connection configuration model."""

from pydantic import BaseModel, Field


class BrokerConfig(BaseModel, frozen=True):
    project_id: str = Field(min_length=1)
    emulator_host: str | None = None
    max_outstanding_messages: int = Field(default=64, ge=1)
