"""ChangeListener — decodes one change stream and dispatches it to a callback."""

import asyncio
import contextlib
from typing import Any, Self

from change_listener.broker.domain.connection import BrokerConnection
from change_listener.changes.domain.codec import ChangeCodec
from change_listener.changes.domain.kind import ChangeKind
from change_listener.changes.domain.record import serialize
from change_listener.changes.infrastructure.errors import ChangeDecodeError
from change_listener.core.errors import ChangeListenerError
from change_listener.feed.application.change_feed import ChangeFeed
from change_listener.feed.domain.channel import ChangeChannel
from change_listener.feed.domain.config import FeedConfig
from change_listener.feed.domain.errors import ChannelClosedError
from change_listener.feed.domain.observer import FeedObserver
from change_listener.listener.domain.callback import ChangeCallback
from change_listener.listener.domain.errors import (
    ListenerClosedError,
    ListenerConfigError,
)
from change_listener.listener.domain.observer import ListenerObserver
from change_listener.listener.domain.state import ListenerState


class ChangeListener:
    """Owns a ChangeFeed for one change kind and the consuming side of its channel.

    listen() and dispatch_loop() may be driven by the caller as two concurrent
    tasks, or run() supervises both until stop() or close() is called.
    """

    def __init__(
        self,
        kind: ChangeKind,
        feed: ChangeFeed,
        channel: ChangeChannel,
        callback: ChangeCallback,
        context: Any,
        codec: ChangeCodec,
        observer: ListenerObserver,
        resubscribe_backoff_seconds: float = 5.0,
    ) -> None:
        self._kind = kind
        self._feed = feed
        self._channel = channel
        self._callback = callback
        self._context = context
        self._codec = codec
        self._observer = observer
        self._resubscribe_backoff_seconds = resubscribe_backoff_seconds
        self._state = ListenerState.CONSTRUCTED
        self._dispatch_lock = asyncio.Lock()
        self._stop_requested = asyncio.Event()

    @classmethod
    async def create(
        cls,
        connection: BrokerConnection,
        kind: ChangeKind,
        controller_id: str,
        session_timeout_seconds: int,
        callback: ChangeCallback,
        context: Any,
        codec: ChangeCodec,
        observer: ListenerObserver,
        feed_observer: FeedObserver,
        channel_capacity: int = 64,
        resubscribe_backoff_seconds: float = 5.0,
    ) -> Self:
        """Build a listener for one change kind and resolve its topic.

        The topic and subscription names are derived from the kind and the
        controller id.

        Raises:
            FeedConfigError: if controller_id is empty or the timeout is not
                a positive number of seconds.
            ListenerConfigError: if callback is not callable.
            TopicProvisioningError: if the kind's topic cannot be resolved.
        """
        if not callable(callback):
            raise ListenerConfigError(kind=kind, reason="callback is not callable")
        config = FeedConfig.build(
            controller_id=controller_id,
            topic_name=kind.topic_name,
            subscription_name=kind.subscription_name(controller_id),
            session_timeout_seconds=session_timeout_seconds,
        )
        channel = ChangeChannel(capacity=channel_capacity)
        feed = await ChangeFeed.create(
            connection=connection,
            config=config,
            channel=channel,
            observer=feed_observer,
        )
        return cls(
            kind=kind,
            feed=feed,
            channel=channel,
            callback=callback,
            context=context,
            codec=codec,
            observer=observer,
            resubscribe_backoff_seconds=resubscribe_backoff_seconds,
        )

    @property
    def kind(self) -> ChangeKind:
        return self._kind

    @property
    def state(self) -> ListenerState:
        return self._state

    @property
    def feed_config(self) -> FeedConfig:
        return self._feed.config

    async def listen(self) -> int:
        """Run one receive session; see ChangeFeed.listen.

        Raises:
            ListenerClosedError: if the listener has been closed.
        """
        self._ensure_open()
        self._state = ListenerState.LISTENING
        try:
            return await self._feed.listen()
        finally:
            if self._state is ListenerState.LISTENING:
                self._state = ListenerState.SESSION_EXPIRED

    async def dispatch_loop(self) -> int:
        """Drain the channel until it is closed, returning the dispatch count.

        Only one loop drains the channel at a time; a second concurrent call
        waits until the first has returned.
        """
        async with self._dispatch_lock:
            dispatched = 0
            while (payload := await self._channel.receive()) is not None:
                if self._dispatch(payload):
                    dispatched += 1
            return dispatched

    async def run(self) -> None:
        """Receive and dispatch continuously until stop() or close() is called.

        Sessions are reopened as each one expires. Retriable session errors
        are logged and retried after the resubscribe backoff; any other error
        ends the run, as does the dispatcher exiting with an error. On exit
        the channel is closed and the dispatcher drains what was already
        received before returning. The listener is closed afterwards.

        Raises:
            ListenerClosedError: if the listener has been closed.
            ChangeListenerError: on a non-retriable session error.
            Exception: whatever ended the dispatcher, if it failed.
        """
        self._ensure_open()
        dispatcher = asyncio.create_task(self.dispatch_loop())
        try:
            while not self._stop_requested.is_set() and not dispatcher.done():
                try:
                    await self._run_session(dispatcher)
                except ChannelClosedError:
                    break
                except ChangeListenerError as exc:
                    if not exc.retriable or dispatcher.done():
                        raise
                    self._observer.session_retry(
                        kind=self._kind,
                        reason=str(exc),
                        backoff_seconds=self._resubscribe_backoff_seconds,
                    )
                    await self._wait_for_stop(self._resubscribe_backoff_seconds)
        finally:
            self._state = ListenerState.CLOSED
            await self._channel.close()
            # Re-raises a dispatcher failure.
            dispatched = await dispatcher
            self._observer.listener_stopped(kind=self._kind, dispatched=dispatched)

    def stop(self) -> None:
        """Ask run() to end the current session and return.

        A stopped listener is closed; build a new one to listen again.
        """
        self._stop_requested.set()

    async def close(self) -> None:
        """Release the channel. Undispatched payloads are dropped.

        The listener cannot be used afterwards; closing twice is a no-op.
        """
        if self._state is ListenerState.CLOSED:
            return
        self._state = ListenerState.CLOSED
        self._stop_requested.set()
        dropped = await self._channel.close(discard_pending=True)
        self._observer.listener_closed(kind=self._kind, dropped=dropped)

    async def _run_session(self, dispatcher: asyncio.Task[int]) -> None:
        """Run one session, cutting it short on stop or if the dispatcher exits."""
        session = asyncio.create_task(self.listen())
        stopped = asyncio.create_task(self._stop_requested.wait())
        try:
            await asyncio.wait(
                {session, stopped, dispatcher}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            stopped.cancel()
            if not session.done():
                session.cancel()
                await asyncio.wait({session})
        if not session.cancelled():
            session.result()

    async def _wait_for_stop(self, seconds: float) -> None:
        with contextlib.suppress(TimeoutError):
            async with asyncio.timeout(seconds):
                await self._stop_requested.wait()

    def _dispatch(self, payload: bytes) -> bool:
        try:
            record = self._codec.decode(self._kind, payload)
        except ChangeDecodeError as exc:
            self._observer.change_decode_failed(
                kind=self._kind, reason=str(exc), size=len(payload)
            )
            return False

        data = serialize(record)
        try:
            self._callback(self._context, data, len(data))
        except Exception as exc:
            self._observer.callback_failed(kind=self._kind, reason=str(exc))
            return False

        self._observer.change_dispatched(
            kind=self._kind, network_id=record.network_id, size=len(data)
        )
        return True

    def _ensure_open(self) -> None:
        if self._state is ListenerState.CLOSED:
            raise ListenerClosedError(kind=self._kind)
