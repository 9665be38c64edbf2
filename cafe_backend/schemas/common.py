"""Shared schema helpers."""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from cafe_backend.core.exceptions import ValidationException

ModelT = TypeVar("ModelT", bound=BaseModel)


class CamelModel(BaseModel):
    """Schema serialised with camelCase keys; accepts camelCase or snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def parse_payload(model: type[ModelT], data: ModelT | Mapping[str, Any]) -> ModelT:
    """
    Validate a raw payload against a schema.

    Args:
        model: Schema class
        data: Schema instance or mapping of raw fields

    Returns:
        Validated schema instance

    Raises:
        ValidationException: Listing every violated constraint
    """
    if isinstance(data, model):
        return data

    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
            }
            for error in e.errors()
        ]
        raise ValidationException("Validation failed", errors=errors) from e
