"""RecordingCallback — a ChangeCallback that keeps every invocation."""

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CallbackInvocation:
    context: Any
    data: bytes
    length: int

    def document(self) -> dict[str, Any]:
        return json.loads(self.data[: self.length])


class RecordingCallback:
    """Records (context, data, length) per call.

    fail_on_call makes the given 1-based call raise after it is recorded.
    on_call runs after each recorded call, e.g. to stop a listener.
    """

    def __init__(
        self,
        fail_on_call: int | None = None,
        on_call: Callable[[int], None] | None = None,
    ) -> None:
        self.invocations: list[CallbackInvocation] = []
        self._fail_on_call = fail_on_call
        self._on_call = on_call

    def __call__(self, context: Any, data: bytes, length: int) -> None:
        self.invocations.append(
            CallbackInvocation(context=context, data=data, length=length)
        )
        count = len(self.invocations)
        if self._on_call is not None:
            self._on_call(count)
        if count == self._fail_on_call:
            raise RuntimeError(f"callback failed on call {count}")
