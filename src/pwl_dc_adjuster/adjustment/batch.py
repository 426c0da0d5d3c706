"""
Batch Orchestrator — the bulk "Flatten DCs" run.

State machine::

    IDLE → SCANNING → AWAITING_CONFIRMATION → APPLYING → DONE
             │                 │
             └─ nothing to do ─┴─ declined ──→ IDLE

  SCANNING               Embedded documents of every actor (source label =
                         actor name), then world documents (source label
                         ``World Items``), classified by the heuristic.
  AWAITING_CONFIRMATION  One yes/no prompt listing the worklist.
  APPLYING               Strictly sequential: each commit is awaited before
                         the next starts, in scan order.  A failed commit is
                         logged, counted and skipped.

Only text-embedded check DCs are rewritten on this path; numeric hazard
fields belong to the import hook.

:meth:`BatchOrchestrator.run` never raises: an unexpected failure is logged
and returned as a report with ``status == "failed"``.
"""
from __future__ import annotations

import enum
import uuid
from typing import Any, Iterator, List, Optional, Tuple

from pwl_dc_adjuster.adjustment.field_adjuster import adjust_text_fields
from pwl_dc_adjuster.adjustment.heuristic import check_needs_adjustment
from pwl_dc_adjuster.adjustment.host import Confirmer, Notifier, WorldStore
from pwl_dc_adjuster.adjustment.input_validator import EntitySourceError, validate_entity_source
from pwl_dc_adjuster.adjustment.summary import CONFIRM_TITLE, render_confirmation
from pwl_dc_adjuster.config import MODULE_VERSION, AdjusterConfig
from pwl_dc_adjuster.models.batch_report import (
    STATUS_COMPLETED,
    STATUS_DECLINED,
    STATUS_NOTHING_TO_DO,
    BatchReport,
)
from pwl_dc_adjuster.models.worklist import WorkItem
from pwl_dc_adjuster.observability.logging import AdjusterLogger
from pwl_dc_adjuster.observability.metrics import BATCH_ITEMS, BATCH_RUNS, record_updates, timer


class BatchState(str, enum.Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    APPLYING = "applying"
    DONE = "done"


class BatchOrchestrator:
    """Drives one bulk flatten run against a :class:`WorldStore`."""

    def __init__(
        self,
        store: WorldStore,
        confirmer: Confirmer,
        notifier: Notifier,
        config: Optional[AdjusterConfig] = None,
        batch_id: Optional[str] = None,
    ) -> None:
        self._store = store
        self._confirmer = confirmer
        self._notifier = notifier
        self._config = config if config is not None else AdjusterConfig.default()
        self.batch_id = batch_id or uuid.uuid4().hex[:12]
        self._log = AdjusterLogger(batch_id=self.batch_id)

        self.state = BatchState.IDLE
        self.history: List[BatchState] = [BatchState.IDLE]

    def _enter(self, state: BatchState) -> None:
        self.state = state
        self.history.append(state)
        self._log.debug("state_changed", ctx_state=state.value)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _population(self) -> Iterator[Tuple[Any, str]]:
        for container in self._store.containers():
            for document in container.items:
                yield document, container.name
        for document in self._store.documents():
            yield document, self._config.world_items_label

    def scan(self) -> List[WorkItem]:
        """Build the ordered worklist of documents the heuristic flags."""
        worklist: List[WorkItem] = []
        for document, source in self._population():
            try:
                entity = validate_entity_source(document.source)
            except EntitySourceError as exc:
                self._log.warning("document_skipped", source=source, ctx_reason=str(exc))
                continue

            result = check_needs_adjustment(entity)
            if result.needs_adjustment and result.level is not None:
                worklist.append(WorkItem(document, entity, result.level, source))
        return worklist

    # ------------------------------------------------------------------
    # Applying
    # ------------------------------------------------------------------

    async def _apply(self, worklist: List[WorkItem], report: BatchReport) -> None:
        for item in worklist:
            log = self._log.bind(entity_name=item.name, entity_level=item.level, source=item.source)
            try:
                entity = validate_entity_source(item.document.source)
                updates = adjust_text_fields(entity, item.level)
                if updates:
                    await self._store.commit(item.document, updates)
                    record_updates(updates, path="bulk")
                report.record_success()
                BATCH_ITEMS.labels(outcome="ok").inc()
                log.debug("item_adjusted", ctx_fields=sorted(updates))
            except Exception as exc:  # noqa: BLE001
                report.record_failure(item.name, str(exc))
                BATCH_ITEMS.labels(outcome="failed").inc()
                log.exception("item_update_failed", ctx_error=str(exc))

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self) -> BatchReport:
        """Scan, confirm, apply.  Always returns a report."""
        report = BatchReport(batch_id=self.batch_id, module_version=MODULE_VERSION)

        try:
            self._enter(BatchState.SCANNING)
            with timer("batch_scan") as t_scan:
                worklist = self.scan()
            report.record_timing("scan", t_scan.elapsed_ms)
            report.set_worklist([w.to_dict() for w in worklist])
            self._log.info("scan_complete", ctx_found=len(worklist))

            if not worklist:
                self._notifier.info("No items need DC adjustment.")
                report.set_status(STATUS_NOTHING_TO_DO)
                BATCH_RUNS.labels(outcome=STATUS_NOTHING_TO_DO).inc()
                self._enter(BatchState.IDLE)
                return report

            self._enter(BatchState.AWAITING_CONFIRMATION)
            confirmed = await self._confirmer.confirm(CONFIRM_TITLE, render_confirmation(worklist))
            if not confirmed:
                self._log.info("batch_declined")
                report.set_status(STATUS_DECLINED)
                BATCH_RUNS.labels(outcome=STATUS_DECLINED).inc()
                self._enter(BatchState.IDLE)
                return report

            self._enter(BatchState.APPLYING)
            self._notifier.info(f"Adjusting DCs for {len(worklist)} items...")
            with timer("batch_apply") as t_apply:
                await self._apply(worklist, report)
            report.record_timing("apply", t_apply.elapsed_ms)

            if report.failed > 0:
                self._notifier.warn(
                    f"Adjusted DCs for {report.succeeded} items. {report.failed} errors occurred."
                )
            else:
                self._notifier.info(f"Successfully adjusted DCs for {report.succeeded} items.")

            report.set_status(STATUS_COMPLETED)
            BATCH_RUNS.labels(outcome=STATUS_COMPLETED).inc()
            self._log.info("batch_complete", ctx_summary=report.summary())
            self._enter(BatchState.DONE)

        except Exception as exc:  # noqa: BLE001
            # Unexpected failure outside the per-item boundary
            report.set_failed(f"Unexpected error: {exc}")
            BATCH_RUNS.labels(outcome="failed").inc()
            self._log.exception("batch_failed", ctx_error=str(exc))
            self._enter(BatchState.IDLE)

        return report


async def adjust_all_items(
    store: WorldStore,
    confirmer: Confirmer,
    notifier: Notifier,
    config: Optional[AdjusterConfig] = None,
) -> BatchReport:
    """Run one bulk flatten pass; the scripting counterpart of the toolbar button."""
    return await BatchOrchestrator(store, confirmer, notifier, config=config).run()
