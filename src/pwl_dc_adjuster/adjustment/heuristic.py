"""
Adjustment-needed heuristic for bulk re-runs.

An adjusted DC and an unadjusted DC are both plain integers, so nothing in
the text says whether a tag was already lowered.  The bulk path relies on a
convention instead: PwL DCs are typically 10-22 and standard DCs 20-45, so
an entity is queued only when at least one of its check DCs is above
:data:`~pwl_dc_adjuster.config.ADJUSTED_DC_CEILING`.

Known false negative: a document whose *original* DCs are all 20 or lower
(low-level items, mostly) is reported as already adjusted and is skipped by
every bulk scan.  The import hooks do not use this heuristic and adjust such
documents normally.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pwl_dc_adjuster.adjustment.check_matcher import find_checks
from pwl_dc_adjuster.adjustment.input_validator import validate_entity_source
from pwl_dc_adjuster.config import ADJUSTED_DC_CEILING
from pwl_dc_adjuster.models.entity import AdjustableEntity


class AdjustmentStatus(str, enum.Enum):
    NOT_ELIGIBLE = "not_eligible"
    NEEDS_ADJUSTMENT = "needs_adjustment"
    ALREADY_ADJUSTED = "already_adjusted"


@dataclass(frozen=True)
class AdjustmentCheck:
    status: AdjustmentStatus
    level: Optional[int] = None

    @property
    def needs_adjustment(self) -> bool:
        return self.status is AdjustmentStatus.NEEDS_ADJUSTMENT


def check_needs_adjustment(entity: AdjustableEntity) -> AdjustmentCheck:
    """Classify *entity* for the bulk path.  See the module docstring for the caveat."""
    if not entity.is_eligible:
        return AdjustmentCheck(AdjustmentStatus.NOT_ELIGIBLE)

    for text in entity.present_text_fields().values():
        if any(occ.value > ADJUSTED_DC_CEILING for occ in find_checks(text)):
            return AdjustmentCheck(AdjustmentStatus.NEEDS_ADJUSTMENT, entity.level)

    return AdjustmentCheck(AdjustmentStatus.ALREADY_ADJUSTED, entity.level)


def check_item_needs_adjustment(source: Any) -> Optional[Dict[str, int]]:
    """
    Scripting entry point on a raw document source.

    Returns ``{"level": L}`` when the document needs adjustment, ``None``
    otherwise.  Raises :class:`EntitySourceError` for malformed sources.
    """
    result = check_needs_adjustment(validate_entity_source(source))
    if result.needs_adjustment and result.level is not None:
        return {"level": result.level}
    return None
