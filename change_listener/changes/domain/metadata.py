"""ChangeSource and ChangeMetadata value objects shared by all change records."""

from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator


class ChangeSource(StrEnum):
    """System that originated a change.

    Declared in wire order: a source's position is its protobuf enum number.
    """

    UNKNOWN = "UNKNOWN"
    CV1 = "CV1"
    CV2 = "CV2"
    CONTROLLER = "CONTROLLER"


def _known_source(value: Any) -> Any:
    """Map a source this schema does not name to UNKNOWN.

    Publishers on a newer schema may send numbers or names added after this
    one; the change itself is still valid.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        sources = list(ChangeSource)
        return sources[value] if 0 <= value < len(sources) else ChangeSource.UNKNOWN
    if isinstance(value, str) and value not in ChangeSource.__members__:
        return ChangeSource.UNKNOWN
    return value


ChangeSourceField = Annotated[ChangeSource, BeforeValidator(_known_source)]


class ChangeMetadata(BaseModel, frozen=True):
    controller_id: str = ""
    trace_id: str = ""
