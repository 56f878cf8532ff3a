"""SubscriptionSpec — the shape of a filtered, ordered subscription."""

from pydantic import BaseModel, Field


class SubscriptionSpec(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    topic: str = Field(min_length=1)
    filter_expression: str = ""
    enable_message_ordering: bool = True
