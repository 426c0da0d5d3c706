"""
Result of one bulk flatten run.

The report is built incrementally by the batch orchestrator and is **always**
serialisable, whatever happened during the run: ``status`` tells the
outcome, ``errors`` lists the per-item commit failures.
"""
from __future__ import annotations

import json
import time
from typing import Any, Dict, List, Optional

STATUS_COMPLETED = "completed"
STATUS_NOTHING_TO_DO = "nothing_to_do"
STATUS_DECLINED = "declined"
STATUS_FAILED = "failed"


class BatchReport:
    """
    Mutable report object built incrementally by the batch orchestrator.

    Serialised via :meth:`to_dict` / :meth:`to_json` once the run is over.
    """

    def __init__(self, batch_id: str, module_version: str) -> None:
        self.batch_id = batch_id
        self._module_version = module_version

        self.status: str = STATUS_COMPLETED
        self.found: int = 0
        self.succeeded: int = 0
        self.failed: int = 0
        self._errors: List[Dict[str, str]] = []
        self._worklist: List[Dict[str, Any]] = []

        self._timings: Dict[str, float] = {}
        self._start_ts: float = time.perf_counter()

    # ------------------------------------------------------------------
    # Builder methods
    # ------------------------------------------------------------------

    def set_worklist(self, entries: List[Dict[str, Any]]) -> None:
        self._worklist = entries
        self.found = len(entries)

    def record_success(self) -> None:
        self.succeeded += 1

    def record_failure(self, entity_name: str, message: str) -> None:
        """Record a **non-blocking** per-item commit failure."""
        self.failed += 1
        self._errors.append({"entity": entity_name, "message": message})

    def set_status(self, status: str) -> None:
        self.status = status

    def set_failed(self, reason: str) -> None:
        """Mark the run as hard-failed."""
        self.status = STATUS_FAILED
        self._errors.append({"entity": "", "message": reason})

    def record_timing(self, component: str, elapsed_ms: float) -> None:
        self._timings[component] = round(elapsed_ms, 3)

    @property
    def errors(self) -> List[Dict[str, str]]:
        return list(self._errors)

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def summary(self) -> str:
        """One-line outcome, e.g. ``'4 succeeded, 1 error'``."""
        noun = "error" if self.failed == 1 else "errors"
        return f"{self.succeeded} succeeded, {self.failed} {noun}"

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        total_ms = round((time.perf_counter() - self._start_ts) * 1000, 3)
        return {
            "batch_id": self.batch_id,
            "status": self.status,
            "counts": {
                "found": self.found,
                "succeeded": self.succeeded,
                "failed": self.failed,
            },
            "worklist": self._worklist,
            "errors": self._errors,
            "meta": {
                "module_version": self._module_version,
                "processing_time_ms": total_ms,
                "component_timings_ms": self._timings,
            },
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent, default=str)

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"BatchReport(status={self.status!r}, found={self.found},"
            f" succeeded={self.succeeded}, failed={self.failed})"
        )
