"""Protobuf message classes for the change wire format, built from descriptors at import.

Equivalent .proto (package pbmessages, proto3):

    enum ChangeSource { UNKNOWN = 0; CV1 = 1; CV2 = 2; CONTROLLER = 3; }
    message ChangeMetadata { string controller_id = 1; string trace_id = 2; }
    message MemberChange {
      message Member { string device_id = 1; string network_id = 2; ... }
      Member old = 1; Member new = 2;
      ChangeSource change_source = 3; ChangeMetadata metadata = 4;
    }
    message NetworkChange {
      message Network { string network_id = 1; string name = 2; ... }
      Network old = 1; Network new = 2;
      ChangeSource change_source = 3; ChangeMetadata metadata = 4;
    }

Field numbers below are the wire contract shared with publishers; never renumber.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import Message

_PACKAGE = "pbmessages"
_FILE_NAME = "pbmessages/changes.proto"

_T = descriptor_pb2.FieldDescriptorProto
_STRING = _T.TYPE_STRING
_BOOL = _T.TYPE_BOOL
_UINT64 = _T.TYPE_UINT64
_UINT32 = _T.TYPE_UINT32
_INT32 = _T.TYPE_INT32

type FieldSpec = (
    tuple[str, int, int] | tuple[str, int, int, str] | tuple[str, int, int, str, bool]
)


def _add_fields(
    message: descriptor_pb2.DescriptorProto, fields: list[FieldSpec]
) -> None:
    """Append fields given as (name, number, type[, type_name[, repeated]])."""
    for spec in fields:
        name, number, field_type = spec[0], spec[1], spec[2]
        type_name = spec[3] if len(spec) > 3 else ""
        repeated = spec[4] if len(spec) > 4 else False
        field = message.field.add()
        field.name = name
        field.number = number
        field.type = field_type
        field.label = _T.LABEL_REPEATED if repeated else _T.LABEL_OPTIONAL
        if type_name:
            field.type_name = f".{_PACKAGE}.{type_name}"


def _add_message(
    parent: descriptor_pb2.FileDescriptorProto | descriptor_pb2.DescriptorProto,
    name: str,
    fields: list[FieldSpec],
) -> descriptor_pb2.DescriptorProto:
    message = (
        parent.message_type.add()
        if isinstance(parent, descriptor_pb2.FileDescriptorProto)
        else parent.nested_type.add()
    )
    message.name = name
    _add_fields(message, fields)
    return message


_MEMBER_FIELDS: list[FieldSpec] = [
    ("device_id", 1, _STRING),
    ("network_id", 2, _STRING),
    ("identity", 3, _STRING),
    ("authorized", 4, _BOOL),
    ("ip_assignments", 5, _STRING, "", True),
    ("active_bridge", 6, _BOOL),
    ("tags", 7, _STRING),
    ("capabilities", 8, _STRING),
    ("creation_time", 9, _UINT64),
    ("no_auto_assign_ips", 10, _BOOL),
    ("revision", 11, _UINT64),
    ("last_authorized_time", 12, _UINT64),
    ("last_deauthorized_time", 13, _UINT64),
    ("last_authorized_credential_type", 14, _STRING),
    ("last_authorized_credential", 15, _STRING),
    ("version_major", 16, _INT32),
    ("version_minor", 17, _INT32),
    ("version_rev", 18, _INT32),
    ("version_protocol", 19, _INT32),
    ("remote_trace_level", 20, _INT32),
    ("remote_trace_target", 21, _STRING),
    ("sso_exempt", 22, _BOOL),
    ("auth_expiry_time", 23, _UINT64),
]

_NETWORK_FIELDS: list[FieldSpec] = [
    ("network_id", 1, _STRING),
    ("name", 2, _STRING),
    ("capabilities", 3, _STRING),
    ("creation_time", 4, _UINT64),
    ("enable_broadcast", 5, _BOOL),
    ("assignment_pools", 6, _T.TYPE_MESSAGE, "NetworkChange.IPRange", True),
    ("mtu", 7, _UINT32),
    ("multicast_limit", 8, _UINT32),
    ("is_private", 9, _BOOL),
    ("remote_trace_level", 10, _INT32),
    ("remote_trace_target", 11, _STRING),
    ("revision", 12, _UINT64),
    ("routes", 13, _T.TYPE_MESSAGE, "NetworkChange.Route", True),
    ("rules", 14, _STRING),
    ("tags", 15, _STRING),
    ("ipv4_assign_mode", 16, _T.TYPE_MESSAGE, "NetworkChange.IPV4AssignMode"),
    ("ipv6_assign_mode", 17, _T.TYPE_MESSAGE, "NetworkChange.IPV6AssignMode"),
    ("dns", 18, _T.TYPE_MESSAGE, "NetworkChange.DNS"),
    ("sso_enabled", 19, _BOOL),
    ("sso_client_id", 20, _STRING),
    ("sso_authorization_endpoint", 21, _STRING),
    ("sso_issuer", 22, _STRING),
    ("sso_provider", 23, _STRING),
    ("rules_source", 24, _STRING),
]


def _change_fields(snapshot_type: str) -> list[FieldSpec]:
    return [
        ("old", 1, _T.TYPE_MESSAGE, snapshot_type),
        ("new", 2, _T.TYPE_MESSAGE, snapshot_type),
        ("change_source", 3, _T.TYPE_ENUM, "ChangeSource"),
        ("metadata", 4, _T.TYPE_MESSAGE, "ChangeMetadata"),
    ]


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file = descriptor_pb2.FileDescriptorProto(
        name=_FILE_NAME, package=_PACKAGE, syntax="proto3"
    )

    source = file.enum_type.add(name="ChangeSource")
    for number, name in enumerate(("UNKNOWN", "CV1", "CV2", "CONTROLLER")):
        source.value.add(name=name, number=number)

    _add_message(
        file,
        "ChangeMetadata",
        [("controller_id", 1, _STRING), ("trace_id", 2, _STRING)],
    )

    member_change = _add_message(
        file, "MemberChange", _change_fields("MemberChange.Member")
    )
    _add_message(member_change, "Member", _MEMBER_FIELDS)

    network_change = _add_message(
        file, "NetworkChange", _change_fields("NetworkChange.Network")
    )
    _add_message(network_change, "Network", _NETWORK_FIELDS)
    _add_message(
        network_change, "IPRange", [("start_ip", 1, _STRING), ("end_ip", 2, _STRING)]
    )
    _add_message(network_change, "Route", [("target", 1, _STRING), ("via", 2, _STRING)])
    _add_message(network_change, "IPV4AssignMode", [("zt", 1, _BOOL)])
    _add_message(
        network_change,
        "IPV6AssignMode",
        [("zt", 1, _BOOL), ("six_plane", 2, _BOOL), ("rfc4193", 3, _BOOL)],
    )
    _add_message(
        network_change,
        "DNS",
        [("domain", 1, _STRING), ("nameservers", 2, _STRING, "", True)],
    )
    return file


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file().SerializeToString())

MemberChangeMessage: type[Message] = message_factory.GetMessageClass(
    _POOL.FindMessageTypeByName(f"{_PACKAGE}.MemberChange")
)
NetworkChangeMessage: type[Message] = message_factory.GetMessageClass(
    _POOL.FindMessageTypeByName(f"{_PACKAGE}.NetworkChange")
)
