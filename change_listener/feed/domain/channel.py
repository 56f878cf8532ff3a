"""ChangeChannel — bounded hand-off between a feed and its dispatcher."""

import asyncio
from collections import deque

from change_listener.feed.domain.errors import ChannelClosedError


class ChangeChannel:
    """Bounded single-producer, single-consumer queue of raw payloads.

    A full channel blocks the producer rather than dropping payloads. Once
    closed, the consumer drains what is left and then receives None.
    """

    def __init__(self, capacity: int = 64) -> None:
        if capacity < 1:
            raise ValueError("channel capacity must be at least 1")
        self._capacity = capacity
        self._items: deque[bytes] = deque()
        self._closed = False
        self._condition = asyncio.Condition()

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._items)

    async def send(self, payload: bytes) -> None:
        """Append a payload, waiting while the channel is full.

        Raises:
            ChannelClosedError: if the channel is closed before or while waiting.
        """
        async with self._condition:
            await self._condition.wait_for(
                lambda: self._closed or len(self._items) < self._capacity
            )
            if self._closed:
                raise ChannelClosedError()
            self._items.append(payload)
            self._condition.notify_all()

    async def receive(self) -> bytes | None:
        """Return the next payload, or None once closed and drained."""
        async with self._condition:
            await self._condition.wait_for(lambda: self._closed or bool(self._items))
            if not self._items:
                return None
            payload = self._items.popleft()
            self._condition.notify_all()
            return payload

    async def close(self, discard_pending: bool = False) -> int:
        """Close the channel and return how many pending payloads were discarded."""
        async with self._condition:
            self._closed = True
            dropped = 0
            if discard_pending:
                dropped = len(self._items)
                self._items.clear()
            self._condition.notify_all()
            return dropped
