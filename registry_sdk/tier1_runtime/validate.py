"""
registry_sdk.tier1_runtime.validate
──────────────────────────────────────
Registry response validation via Pydantic v2. Raises SchemaParseError
(not raw Pydantic errors) so a malformed registry body surfaces as a
``parse_error`` result like any other malformed input.
"""
from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from registry_sdk.tier0_core.errors import SchemaParseError

T = TypeVar("T", bound=BaseModel)


def validate_payload(model: Type[T], data: Any) -> T:
    """
    Validate a decoded registry response body against a Pydantic model.

    Usage:
        class Registered(BaseModel):
            id: int

        body = validate_payload(Registered, {"id": 7})
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        fields = {
            ".".join(str(loc) for loc in err["loc"]) or "__root__": err["msg"]
            for err in exc.errors()
        }
        raise SchemaParseError(
            f"unexpected registry response for {model.__name__}",
            fields=fields,
        ) from exc


__all__ = ["validate_payload"]
