"""ListenerThread — hosts a ChangeListener on a private event loop."""

import asyncio
import contextlib
import threading
from collections.abc import Awaitable, Callable
from concurrent.futures import Future
from types import TracebackType
from typing import Self

from change_listener.listener.application.listener import ChangeListener

type ListenerFactory = Callable[[], Awaitable[ChangeListener]]


class ListenerThread:
    """Runs a listener in a background thread for synchronous callers.

    The factory is awaited on the thread's own event loop, so the listener's
    asyncio primitives never cross loops. The callback therefore runs on the
    background thread, and the caller's context must be safe to use there.
    """

    def __init__(
        self, factory: ListenerFactory, name: str = "change-listener"
    ) -> None:
        self._factory = factory
        self._thread = threading.Thread(target=self._main, name=name, daemon=True)
        self._started: Future[None] = Future()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._listener: ChangeListener | None = None
        self._error: BaseException | None = None

    @property
    def listener(self) -> ChangeListener | None:
        return self._listener

    def start(self, timeout: float | None = None) -> None:
        """Start the thread and wait until the listener has been built.

        Raises:
            ConstructionError: if the factory fails; the thread has exited.
            TimeoutError: if construction does not finish within timeout.
        """
        self._thread.start()
        self._started.result(timeout=timeout)

    def stop(self, timeout: float | None = None) -> None:
        """Signal the listener to stop and wait for the thread to exit.

        Raises:
            ChangeListenerError: the error that ended the run early, if any.
        """
        loop, listener = self._loop, self._listener
        if loop is not None and listener is not None:
            # The loop is already closed if the run ended on its own.
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(listener.stop)
        self._thread.join(timeout)
        if self._error is not None:
            raise self._error

    def __enter__(self) -> Self:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

    def _main(self) -> None:
        asyncio.run(self._serve())

    async def _serve(self) -> None:
        try:
            listener = await self._factory()
        except Exception as exc:
            self._started.set_exception(exc)
            return

        self._loop = asyncio.get_running_loop()
        self._listener = listener
        self._started.set_result(None)
        try:
            await listener.run()
        except Exception as exc:
            self._error = exc
        finally:
            await listener.close()
