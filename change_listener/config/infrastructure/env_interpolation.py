"""${ENV_VAR} references in raw config data, resolved before validation."""

import os
import re
from collections.abc import Callable, Iterator, Mapping

_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

type RawValue = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def referenced_vars(data: RawValue) -> Iterator[str]:
    """Yield each variable name referenced in data, in document order."""
    if isinstance(data, str):
        for match in _REFERENCE.finditer(data):
            yield match.group(1)
    elif isinstance(data, list):
        for item in data:
            yield from referenced_vars(item)
    elif isinstance(data, dict):
        for value in data.values():
            yield from referenced_vars(value)


def missing_vars(
    data: RawValue, environ: Mapping[str, str] = os.environ
) -> list[str]:
    """Names referenced in data but absent from environ, without duplicates."""
    return list(
        dict.fromkeys(name for name in referenced_vars(data) if name not in environ)
    )


def interpolate(data: RawValue, environ: Mapping[str, str] = os.environ) -> RawValue:
    """Return a copy of data with every reference replaced by its value.

    Every referenced name must be present in environ; check with
    missing_vars() first.
    """
    return _map_strings(
        data, lambda text: _REFERENCE.sub(lambda m: environ[m.group(1)], text)
    )


def _map_strings(data: RawValue, convert: Callable[[str], str]) -> RawValue:
    if isinstance(data, str):
        return convert(data)
    if isinstance(data, list):
        return [_map_strings(item, convert) for item in data]
    if isinstance(data, dict):
        return {key: _map_strings(value, convert) for key, value in data.items()}
    return data
