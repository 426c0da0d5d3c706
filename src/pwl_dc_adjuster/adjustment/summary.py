"""Confirmation prompt content for the bulk flatten run."""
from __future__ import annotations

import html
from typing import List, Sequence

from pwl_dc_adjuster.config import PREVIEW_LIMIT
from pwl_dc_adjuster.models.worklist import WorkItem

CONFIRM_TITLE = "Flatten DCs for PwL"


def preview_lines(worklist: Sequence[WorkItem], limit: int = PREVIEW_LIMIT) -> List[str]:
    """Plain-text preview: up to *limit* entries, then a ``...and N more`` line."""
    lines = [f"{w.name} (Level {w.level}) - {w.source}" for w in worklist[:limit]]
    if len(worklist) > limit:
        lines.append(f"...and {len(worklist) - limit} more")
    return lines


def render_confirmation(worklist: Sequence[WorkItem], limit: int = PREVIEW_LIMIT) -> str:
    """Render the dialog body listing the worklist."""
    entries = "".join(
        f"<li><strong>{html.escape(w.name)}</strong> (Level {w.level}) - {html.escape(w.source)}</li>"
        for w in worklist[:limit]
    )
    if len(worklist) > limit:
        entries += f"<li><em>...and {len(worklist) - limit} more</em></li>"
    return (
        f"<p>Found <strong>{len(worklist)}</strong> items with DCs to adjust:</p>"
        f"<ul>{entries}</ul>"
        "<p>Each item's DC will be reduced by its item level.</p>"
        "<p><strong>Proceed?</strong></p>"
    )
