from typing import Any, Iterable, List, Mapping


def is_missing(value: Any) -> bool:
    return value is None or value == ""


def missing_fields(payload: Mapping[str, Any], required: Iterable[str]) -> List[str]:
    """Names of required fields that are absent, null or empty in the payload."""
    return [name for name in required if is_missing(payload.get(name))]


def blank_fields(changes: Mapping[str, Any]) -> List[str]:
    """Names of fields an update would set to the empty string."""
    return [name for name, value in changes.items() if is_missing(value)]
