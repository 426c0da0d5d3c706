"""
Source validator for host documents.

Wraps Pydantic validation (:class:`AdjustableEntity`) and converts
validation errors into a standardised error list, so callers can treat a
malformed document as "not adjustable" instead of crashing mid-import or
mid-batch.
"""
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import ValidationError

from pwl_dc_adjuster.models.entity import AdjustableEntity


class EntitySourceError(ValueError):
    """Raised when a document source cannot be read as an adjustable entity."""

    def __init__(self, errors: List[Dict[str, str]], name: str = "") -> None:
        self.validation_errors = errors
        self.entity_name = name
        messages = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(f"Invalid document source {name!r}: {messages}")


def validate_entity_source(raw: Any) -> AdjustableEntity:
    """
    Validate a raw host document source and return its :class:`AdjustableEntity`.

    Raises:
        :class:`EntitySourceError` if *raw* is not an object, or if its level,
        text fields, numeric fields or embedded documents have the wrong type.
    """
    if not isinstance(raw, dict):
        raise EntitySourceError(
            [{"field": "", "message": f"expected an object, got {type(raw).__name__}", "type": "type_error"}]
        )

    payload = AdjustableEntity.payload_from_source(raw)
    try:
        return AdjustableEntity.model_validate(payload)
    except ValidationError as exc:
        errors = [
            {
                "field": ".".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        raise EntitySourceError(errors, name=str(payload.get("name", ""))) from exc
