from collections.abc import Mapping
from typing import Any


def resolve(mapping: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Look up a value by key path, descending through nested mappings.

    Returns ``default`` when a key is missing or when an intermediate value
    is not a mapping. With no keys the mapping itself is returned.
    """
    if not keys:
        return mapping

    if keys[0] not in mapping:
        return default

    value = mapping[keys[0]]
    if len(keys) == 1:
        return value

    if isinstance(value, Mapping):
        return resolve(value, *keys[1:], default=default)

    return default


def resolve_str(mapping: Mapping[str, Any], *keys: str) -> str | None:
    value = resolve(mapping, *keys)
    return value if isinstance(value, str) else None
