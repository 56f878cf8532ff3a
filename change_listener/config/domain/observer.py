"""Observer port for the config domain — defines events in domain language."""

from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(self, controller_id: str, kinds: list[str]) -> None: ...

    def config_emulator_in_use(self, emulator_host: str) -> None: ...
