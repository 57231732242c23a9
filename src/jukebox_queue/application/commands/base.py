"""Helpers shared by request commands."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from jukebox_queue.domain.shared.exceptions import ValidationError
from jukebox_queue.domain.shared.messages import ErrorMessages

CommandT = TypeVar("CommandT", bound=BaseModel)


def parse_command(command_type: type[CommandT], raw: Any) -> CommandT:
    """Validate a raw request body into a command, before any I/O happens.

    Raises:
        ValidationError: If the body is missing or a required field is absent
            or malformed. Only the first problem is reported.
    """
    if raw is None:
        raise ValidationError(ErrorMessages.REQUEST_BODY_REQUIRED, field="body")

    try:
        return command_type.model_validate(raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "body"
        raise ValidationError(
            ErrorMessages.INVALID_REQUEST_FIELD.format(field=field, error=first["msg"]),
            field=field,
        ) from e
