"""ChangeSink — the CLI's change callback, writing each change as one JSON line."""

import json
from typing import IO

from rich.console import Console

from change_listener.changes.domain.kind import ChangeKind


class ChangeSink:
    """Callback context for one listener; collects a count for the summary line.

    With a console, changes are pretty-printed with rich; otherwise each change
    is written as a single compact JSON line wrapped with its kind.
    """

    def __init__(
        self, kind: ChangeKind, stream: IO[str], console: Console | None = None
    ) -> None:
        self.kind = kind
        self.count = 0
        self._stream = stream
        self._console = console

    def write(self, data: bytes) -> None:
        self.count += 1
        change = json.loads(data)
        if self._console is not None:
            self._console.rule(f"{self.kind} change #{self.count}")
            self._console.print_json(data=change)
            return
        line = json.dumps({"kind": str(self.kind), "change": change})
        self._stream.write(line + "\n")
        self._stream.flush()


def write_change(context: ChangeSink, data: bytes, length: int) -> None:
    """ChangeCallback that forwards the serialized change to its sink."""
    context.write(data[:length])
