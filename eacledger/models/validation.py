"""Boundary validation: payload dicts to models, pydantic errors to ValidationError."""

from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from eacledger.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def validate_payload(model: type[M], data: M | Mapping[str, Any]) -> M:
    """Validate a payload against ``model`` before any I/O.

    Already-built model instances are revalidated so mutated instances cannot
    slip through.

    Raises:
        ValidationError: With the first failing field and its message
    """
    try:
        if isinstance(data, model):
            return model.model_validate(data.model_dump(exclude_unset=True, by_alias=False))
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(_first_error(exc)) from exc


def _first_error(exc: pydantic.ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    if len(errors) > 1:
        message = f"{message} (+{len(errors) - 1} more)"
    return f"{location}: {message}" if location else message
