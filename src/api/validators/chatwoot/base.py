"""Conversão de erros do pydantic para a rejeição padronizada da ponte."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from utils.errors import ValidationError

WEBHOOK_VALIDATION_MESSAGE = "Webhook validation failed"
REQUEST_VALIDATION_MESSAGE = "Validation failed"


def _field_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False, include_input=False):
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        errors.setdefault(field, []).append(error["msg"])
    return errors


def validate_model(
    model: type[BaseModel],
    data: Any,
    message: str = REQUEST_VALIDATION_MESSAGE,
) -> dict[str, Any]:
    """Valida `data` contra `model` e retorna o dict normalizado.

    Raises:
        ValidationError: Com `details` no formato {campo: [mensagens]}.
    """
    try:
        instance = model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(message, details=_field_errors(exc)) from exc
    return instance.model_dump(mode="json")
