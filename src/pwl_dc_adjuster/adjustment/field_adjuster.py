"""
Entity Field Adjuster — proposes the field updates for one entity.

Three kinds of fields are lowered by the entity level:

  1. Text fields: every ``@Check`` tag DC (see :mod:`.offset_adjuster`).
     An update is emitted only when the rewritten text differs.
  2. Numeric fields (AC, stealth DC, saves): lowered only when present and
     strictly positive.  Zero means the hazard has no such defense and stays 0.
  3. Embedded documents of the layout's ``embedded_type`` (melee strikes):
     their own number is lowered when strictly positive.  Only changed
     documents are replaced; the others are returned as the same objects so
     the host sees no spurious diff.

The result is a flat ``{field path: new value}`` map, empty when nothing
changed.  Nothing is written here; committing is the caller's job.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from pwl_dc_adjuster.adjustment.offset_adjuster import adjust_text, adjusted_value
from pwl_dc_adjuster.models.entity import EMBEDDED_KEY, AdjustableEntity, apply_updates, get_path

_INT = TypeAdapter(int)


def _as_number(value: Any) -> Optional[int]:
    """Coerce an embedded number the way entity numeric fields are validated."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return _INT.validate_python(value)
    except ValidationError:
        return None


def _resolve_level(entity: AdjustableEntity, level: Optional[int]) -> Optional[int]:
    lvl = entity.level if level is None else level
    if lvl is None or lvl <= 0:
        return None
    return lvl


def adjust_text_fields(entity: AdjustableEntity, level: Optional[int] = None) -> Dict[str, str]:
    """Return updates for the text fields of *entity* only."""
    lvl = _resolve_level(entity, level)
    if lvl is None:
        return {}

    updates: Dict[str, str] = {}
    for path, text in entity.present_text_fields().items():
        adjusted = adjust_text(text, lvl)
        if adjusted != text:
            updates[path] = adjusted
    return updates


def adjust_numeric_fields(entity: AdjustableEntity, level: Optional[int] = None) -> Dict[str, int]:
    lvl = _resolve_level(entity, level)
    if lvl is None:
        return {}

    updates: Dict[str, int] = {}
    for path, value in entity.numeric_fields.items():
        if value is not None and value > 0:
            updates[path] = adjusted_value(value, lvl)
    return updates


def adjust_sub_entities(entity: AdjustableEntity, level: Optional[int] = None) -> Optional[List[Any]]:
    """
    Return the embedded document list with qualifying numbers lowered, or
    ``None`` when no embedded document changed.
    """
    lvl = _resolve_level(entity, level)
    if lvl is None or not entity.sub_entities or not entity.embedded_path:
        return None

    changed = False
    adjusted: List[Any] = []
    for sub in entity.sub_entities:
        if sub.get("type") != entity.embedded_type:
            adjusted.append(sub)
            continue
        value = _as_number(get_path(sub, entity.embedded_path))
        if value is None or value <= 0:
            adjusted.append(sub)
            continue
        replacement = copy.deepcopy(sub)
        apply_updates(replacement, {entity.embedded_path: adjusted_value(value, lvl)})
        adjusted.append(replacement)
        changed = True

    return adjusted if changed else None


def adjust_entity(entity: AdjustableEntity, level: Optional[int] = None) -> Dict[str, Any]:
    """
    Propose every field update for *entity*.

    Args:
        entity: Validated entity.
        level:  Offset to apply; defaults to the entity's own level.  A
                missing or non-positive level yields no updates.

    Returns:
        Flat ``{field path: new value}`` map; ``{}`` when nothing changed.
    """
    lvl = _resolve_level(entity, level)
    if lvl is None:
        return {}

    updates: Dict[str, Any] = {}
    updates.update(adjust_numeric_fields(entity, lvl))
    updates.update(adjust_text_fields(entity, lvl))

    items = adjust_sub_entities(entity, lvl)
    if items is not None:
        updates[EMBEDDED_KEY] = items
    return updates
