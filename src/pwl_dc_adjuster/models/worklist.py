"""Worklist entry selected by the bulk scan."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pwl_dc_adjuster.models.entity import AdjustableEntity


@dataclass(frozen=True)
class WorkItem:
    """One document queued for bulk DC adjustment."""

    document: Any
    """Host document handle, passed back to the store on commit."""

    entity: AdjustableEntity
    level: int
    source: str
    """Human-readable origin, e.g. the owning actor's name or ``World Items``."""

    @property
    def name(self) -> str:
        return self.entity.name

    def to_dict(self) -> dict:
        return {"name": self.name, "level": self.level, "source": self.source}
