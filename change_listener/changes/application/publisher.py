"""ChangePublisher — publishes change records on their kind's topic."""

from change_listener.broker.domain.connection import BrokerConnection
from change_listener.changes.domain.codec import ChangeCodec
from change_listener.changes.domain.kind import ChangeKind
from change_listener.changes.domain.metadata import ChangeMetadata
from change_listener.changes.domain.record import ChangeRecord, kind_of

CONTROLLER_ID_ATTRIBUTE = "controller_id"


class ChangePublisher:
    """Publishes change records the way controller listeners expect them.

    Every message carries the controller_id attribute that subscription
    filters match on, taken from the record's metadata so the attribute and
    payload agree, and is ordered by {kind}-{network_id} so changes to one
    network arrive in publish order.
    """

    def __init__(
        self, connection: BrokerConnection, codec: ChangeCodec, controller_id: str
    ) -> None:
        self._connection = connection
        self._codec = codec
        self._controller_id = controller_id
        self._ready_topics: set[ChangeKind] = set()

    async def publish(self, record: ChangeRecord) -> str:
        """Encode and publish one record, returning the broker message id.

        A record without metadata, or with an empty controller_id in its
        metadata, is stamped with this publisher's controller id.

        Raises:
            ChangeEncodeError: if the record cannot be encoded.
            TopicProvisioningError: if the kind's topic cannot be resolved.
            PublishError: if the broker rejects the message.
        """
        kind = kind_of(record)
        record = self._stamp(record)
        assert record.metadata is not None  # set by _stamp
        if kind not in self._ready_topics:
            await self._connection.ensure_topic(kind.topic_name)
            self._ready_topics.add(kind)

        return await self._connection.publish(
            topic=kind.topic_name,
            data=self._codec.encode(record),
            ordering_key=kind.ordering_key(record.network_id),
            attributes={CONTROLLER_ID_ATTRIBUTE: record.metadata.controller_id},
        )

    def _stamp(self, record: ChangeRecord) -> ChangeRecord:
        metadata = record.metadata or ChangeMetadata()
        if metadata.controller_id:
            return record
        return record.model_copy(
            update={
                "metadata": metadata.model_copy(
                    update={"controller_id": self._controller_id}
                )
            }
        )
