"""DC adjustment sub-package — public API."""
from pwl_dc_adjuster.adjustment.batch import BatchOrchestrator, BatchState, adjust_all_items
from pwl_dc_adjuster.adjustment.check_matcher import find_checks, has_checks, list_checks
from pwl_dc_adjuster.adjustment.field_adjuster import adjust_entity, adjust_text_fields
from pwl_dc_adjuster.adjustment.heuristic import (
    AdjustmentStatus,
    check_item_needs_adjustment,
    check_needs_adjustment,
)
from pwl_dc_adjuster.adjustment.hooks import on_pre_create_actor, on_pre_create_item
from pwl_dc_adjuster.adjustment.offset_adjuster import adjust_text, render_check

__all__ = [
    "AdjustmentStatus",
    "BatchOrchestrator",
    "BatchState",
    "adjust_all_items",
    "adjust_entity",
    "adjust_text",
    "adjust_text_fields",
    "check_item_needs_adjustment",
    "check_needs_adjustment",
    "find_checks",
    "has_checks",
    "list_checks",
    "on_pre_create_actor",
    "on_pre_create_item",
    "render_check",
]
