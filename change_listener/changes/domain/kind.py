"""ChangeKind — the two change streams a controller listens to."""

from enum import StrEnum


class ChangeKind(StrEnum):
    """Entity kind carried by a change stream.

    Each kind owns a fixed topic; subscriptions and ordering keys are derived
    from the kind so publishers and listeners agree on naming.
    """

    NETWORK = "network"
    MEMBER = "member"

    @property
    def topic_name(self) -> str:
        return f"controller-{self.value}-change-stream"

    def subscription_name(self, controller_id: str) -> str:
        return f"{controller_id}-{self.value}-change-subscription"

    def ordering_key(self, network_id: str) -> str:
        return f"{self.value}-{network_id}"
