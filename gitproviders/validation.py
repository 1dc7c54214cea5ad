"""Validation of objects decoded from provider responses."""

from collections.abc import Iterable, Mapping
from typing import Any

from gitproviders.exceptions import FieldRequiredError, InvalidServerDataError


def missing_fields(obj: str, data: Mapping[str, Any], required: Iterable[str]) -> list[Exception]:
    """
    Return a :class:`FieldRequiredError` for every required key that is absent
    or empty in ``data``. Dotted keys ("group.name") descend into nested objects.
    """
    errors: list[Exception] = []
    for path in required:
        value: Any = data
        for part in path.split("."):
            value = value.get(part) if isinstance(value, Mapping) else None
        if value is None or value == "":
            errors.append(FieldRequiredError(obj, path))
    return errors


def validate_api_object(obj: str, data: Any, required: Iterable[str]) -> None:
    """
    Check that a decoded provider object carries every required field.

    Raises:
        InvalidServerDataError: Bundling one error per missing field
    """
    if not isinstance(data, Mapping):
        raise InvalidServerDataError(obj, [TypeError(f"expected a JSON object, got {type(data).__name__}")])
    errors = missing_fields(obj, data, required)
    if errors:
        raise InvalidServerDataError(obj, errors)


__all__ = ["missing_fields", "validate_api_object"]
