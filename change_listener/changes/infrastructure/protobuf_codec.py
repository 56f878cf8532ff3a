"""ProtobufChangeCodec — the pbmessages wire format for change records."""

from typing import Any

from google.protobuf import json_format
from google.protobuf.message import DecodeError, Message
from pydantic import ValidationError

from change_listener.changes.domain.kind import ChangeKind
from change_listener.changes.domain.record import (
    RECORD_TYPES,
    ChangeRecord,
    kind_of,
)
from change_listener.changes.infrastructure.errors import (
    ChangeDecodeError,
    ChangeEncodeError,
)
from change_listener.changes.infrastructure.protobuf_schema import (
    MemberChangeMessage,
    NetworkChangeMessage,
)

_MESSAGE_TYPES: dict[ChangeKind, type[Message]] = {
    ChangeKind.NETWORK: NetworkChangeMessage,
    ChangeKind.MEMBER: MemberChangeMessage,
}

# Wire names on the left, record field names on the right.
_SNAPSHOT_FIELDS = (("old", "previous"), ("new", "current"))
_WIRE_FIELDS = tuple((field, wire) for wire, field in _SNAPSHOT_FIELDS)


def _rename(document: dict[str, Any], pairs: tuple[tuple[str, str], ...]) -> None:
    for source, target in pairs:
        if source in document:
            document[target] = document.pop(source)


class ProtobufChangeCodec:
    """Converts between change records and serialized pbmessages payloads.

    Satisfies the ChangeCodec protocol structurally. Field names are preserved
    as written in the schema, so records and messages share one vocabulary
    apart from the snapshot pair (old/new on the wire, previous/current here).
    """

    def decode(self, kind: ChangeKind, data: bytes) -> ChangeRecord:
        """Parse a payload published on the topic for the given kind.

        Raises:
            ChangeDecodeError: if the bytes are not a valid message, or the
                message carries neither snapshot.
        """
        message = _MESSAGE_TYPES[kind]()
        try:
            message.ParseFromString(data)
        except DecodeError as exc:
            raise ChangeDecodeError(kind=kind, reason=str(exc)) from exc

        document = json_format.MessageToDict(
            message, preserving_proto_field_name=True
        )
        _rename(document, _SNAPSHOT_FIELDS)
        try:
            return RECORD_TYPES[kind].model_validate(document)
        except ValidationError as exc:
            raise ChangeDecodeError(kind=kind, reason=str(exc)) from exc

    def encode(self, record: ChangeRecord) -> bytes:
        """Serialize a record to the wire format of its kind.

        Raises:
            ChangeEncodeError: if the record holds values the schema cannot carry.
        """
        kind = kind_of(record)
        document = record.model_dump(mode="json", exclude_none=True)
        _rename(document, _WIRE_FIELDS)
        message = _MESSAGE_TYPES[kind]()
        try:
            json_format.ParseDict(document, message)
        except json_format.ParseError as exc:
            raise ChangeEncodeError(kind=kind, reason=str(exc)) from exc
        return message.SerializeToString()
