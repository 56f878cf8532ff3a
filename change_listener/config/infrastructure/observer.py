"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, controller_id: str, kinds: list[str]) -> None:
        self._log.info("config.loaded", controller_id=controller_id, kinds=kinds)

    def config_emulator_in_use(self, emulator_host: str) -> None:
        self._log.warning(
            "config.emulator_in_use",
            emulator_host=emulator_host,
            message="Pub/Sub emulator configured; credentials are not checked",
        )
