"""FeedConfig — immutable per-feed subscription settings."""

from typing import Any, Self

from pydantic import BaseModel, Field, ValidationError

from change_listener.broker.domain.subscription import SubscriptionSpec
from change_listener.feed.domain.errors import FeedConfigError


class FeedConfig(BaseModel, frozen=True):
    """Settings for one ordered, controller-filtered subscription.

    Message ordering is always enabled for change feeds; the flag exists so
    the subscription spec can state it explicitly.
    """

    controller_id: str = Field(min_length=1)
    topic_name: str = Field(min_length=1)
    subscription_name: str = Field(min_length=1)
    session_timeout_seconds: int = Field(ge=1)
    enable_message_ordering: bool = True

    @classmethod
    def build(cls, **values: Any) -> Self:
        """Validate values into a FeedConfig.

        Raises:
            FeedConfigError: if any value is empty or out of range.
        """
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise FeedConfigError(reason=str(exc)) from exc

    @property
    def filter_expression(self) -> str:
        return f"attributes.controller_id = '{self.controller_id}'"

    def subscription_spec(self) -> SubscriptionSpec:
        return SubscriptionSpec(
            name=self.subscription_name,
            topic=self.topic_name,
            filter_expression=self.filter_expression,
            enable_message_ordering=self.enable_message_ordering,
        )
