"""ReceivedMessage — one broker delivery awaiting acknowledgment."""

from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReceivedMessage:
    """A payload delivered on a subscription, plus its acknowledgment handle.

    The message is owned transiently by the feed: it is forwarded and acked,
    then dropped. Calling ack more than once is harmless.
    """

    message_id: str
    data: bytes
    ordering_key: str
    attributes: dict[str, str]
    ack: Callable[[], None] = field(repr=False, compare=False)
