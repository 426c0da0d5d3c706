"""
Adjustable entity model and the field layouts it is read from.

Host documents are nested dicts addressed with dotted field paths
(``system.description.value``), which is also the form updates are emitted
in.  :class:`FieldLayout` names, per document kind, where the level lives
and which paths hold text with ``@Check`` tags, which hold plain numeric
DCs, and which embedded documents carry their own adjustable number.

Absent values are ``None`` and mean "not applicable".
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Dotted-path helpers
# ---------------------------------------------------------------------------


def get_path(source: Any, path: str) -> Any:
    """Return the value at dotted *path* in *source*, or ``None`` if any step is missing."""
    node = source
    for key in path.split("."):
        if not isinstance(node, Mapping) or key not in node:
            return None
        node = node[key]
    return node


def apply_updates(source: MutableMapping[str, Any], updates: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """
    Apply a flat ``{dotted path: value}`` update map to *source* in place.

    Intermediate objects are created when missing.  Returns *source*.
    """
    for path, value in updates.items():
        keys = path.split(".")
        node = source
        for key in keys[:-1]:
            child = node.get(key)
            if not isinstance(child, MutableMapping):
                child = {}
                node[key] = child
            node = child
        node[keys[-1]] = value
    return source


# ---------------------------------------------------------------------------
# Field layouts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldLayout:
    """Where one document kind keeps its level and its DC-bearing fields."""

    level_path: str
    text_paths: Tuple[str, ...] = ()
    numeric_paths: Tuple[str, ...] = ()
    embedded_type: Optional[str] = None
    """``type`` of embedded documents whose own number is adjusted with the parent."""
    embedded_path: Optional[str] = None
    """Field path of that number inside the embedded document."""


ITEM_LAYOUT = FieldLayout(
    level_path="system.level.value",
    text_paths=("system.description.value",),
)

HAZARD_LAYOUT = FieldLayout(
    level_path="system.details.level.value",
    text_paths=("system.details.disable",),
    numeric_paths=(
        "system.attributes.ac.value",
        "system.attributes.stealth.value",
        "system.saves.fortitude.value",
        "system.saves.reflex.value",
        "system.saves.will.value",
    ),
    embedded_type="melee",
    embedded_path="system.bonus.value",
)

#: Embedded documents live under this top-level key of the parent source.
EMBEDDED_KEY = "items"


def layout_for(kind: Optional[str]) -> FieldLayout:
    """Return the layout for a document ``type``; everything but hazards is an item."""
    if kind == "hazard":
        return HAZARD_LAYOUT
    return ITEM_LAYOUT


# ---------------------------------------------------------------------------
# AdjustableEntity
# ---------------------------------------------------------------------------


class AdjustableEntity(BaseModel):
    """
    Validated view of one host document, reduced to what the adjuster reads.

    ``sub_entities`` keeps the embedded document dicts themselves (not copies),
    so unchanged ones can be handed back to the host as the same objects.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    name: str = Field(default="", description="Display name of the document")
    kind: str = Field(default="item", description="Host document type")
    level: Optional[int] = Field(default=None, description="Offset magnitude; None if absent")
    text_fields: Dict[str, Optional[str]] = Field(default_factory=dict)
    numeric_fields: Dict[str, Optional[int]] = Field(default_factory=dict)
    sub_entities: Optional[List[Any]] = Field(default=None)
    embedded_type: Optional[str] = None
    embedded_path: Optional[str] = None

    @field_validator("sub_entities")
    @classmethod
    def _validate_sub_entities(cls, v: Optional[List[Any]]) -> Optional[List[Any]]:
        if v is None:
            return v
        for i, item in enumerate(v):
            if not isinstance(item, Mapping):
                raise ValueError(f"embedded document at index {i} must be an object")
        return v

    # ------------------------------------------------------------------
    # Eligibility helpers
    # ------------------------------------------------------------------

    @property
    def is_eligible(self) -> bool:
        """True when the level is a strictly positive integer."""
        return self.level is not None and self.level > 0

    def present_text_fields(self) -> Dict[str, str]:
        """Text fields that hold a non-empty string."""
        return {path: text for path, text in self.text_fields.items() if text}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def payload_from_source(cls, source: Mapping[str, Any]) -> Dict[str, Any]:
        """Build the unvalidated constructor payload for a raw document *source*."""
        kind = source.get("type") or "item"
        layout = layout_for(kind)
        payload: Dict[str, Any] = {
            "name": source.get("name") or "",
            "kind": kind,
            "level": get_path(source, layout.level_path),
            "text_fields": {p: get_path(source, p) for p in layout.text_paths},
            "numeric_fields": {p: get_path(source, p) for p in layout.numeric_paths},
        }
        if layout.embedded_type is not None:
            payload["sub_entities"] = source.get(EMBEDDED_KEY) or []
            payload["embedded_type"] = layout.embedded_type
            payload["embedded_path"] = layout.embedded_path
        return payload
