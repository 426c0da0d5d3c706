"""Domain models — public API."""
from pwl_dc_adjuster.models.annotation import CheckOccurrence
from pwl_dc_adjuster.models.batch_report import BatchReport
from pwl_dc_adjuster.models.entity import AdjustableEntity, FieldLayout, apply_updates, get_path
from pwl_dc_adjuster.models.worklist import WorkItem

__all__ = [
    "AdjustableEntity",
    "BatchReport",
    "CheckOccurrence",
    "FieldLayout",
    "WorkItem",
    "apply_updates",
    "get_path",
]
