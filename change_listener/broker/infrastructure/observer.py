"""Structlog implementation of the BrokerObserver port."""

import structlog


class StructlogBrokerObserver:
    """Delegates broker domain events to structlog.

    Satisfies the BrokerObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def broker_connected(self, project_id: str, emulator_host: str | None) -> None:
        self._log.info(
            "broker.connected", project_id=project_id, emulator_host=emulator_host
        )

    def topic_created(self, topic: str) -> None:
        self._log.info("broker.topic_created", topic=topic)

    def subscription_created(self, subscription: str, topic: str) -> None:
        self._log.info(
            "broker.subscription_created", subscription=subscription, topic=topic
        )
