"""
Import hooks — adjust a document snapshot before the host persists it.

  ``on_pre_create_item``   any document: check tags in its description.
  ``on_pre_create_actor``  hazards only: AC, stealth, saves, disable text and
                           melee strike bonuses.

Both run only for documents created by the local user and only when
``config.enabled`` is on.  Updates are applied to the unsaved snapshot via
``document.update_source`` and returned.  Malformed snapshots are logged and
left untouched; the hooks never raise into the host's creation flow for them.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pwl_dc_adjuster.adjustment.field_adjuster import adjust_entity, adjust_text_fields
from pwl_dc_adjuster.adjustment.host import HostDocument, Notifier
from pwl_dc_adjuster.adjustment.input_validator import EntitySourceError, validate_entity_source
from pwl_dc_adjuster.config import AdjusterConfig
from pwl_dc_adjuster.models.entity import AdjustableEntity
from pwl_dc_adjuster.observability.logging import AdjusterLogger
from pwl_dc_adjuster.observability.metrics import record_updates, timer


def _should_run(config: AdjusterConfig, user_id: Optional[str], local_user_id: Optional[str]) -> bool:
    if user_id != local_user_id:
        return False
    return config.enabled


def _load(document: HostDocument) -> Optional[AdjustableEntity]:
    try:
        return validate_entity_source(document.source)
    except EntitySourceError as exc:
        AdjusterLogger(entity_name=document.name).warning(
            "import_skipped_invalid_source", ctx_reason=str(exc)
        )
        return None


def on_pre_create_item(
    document: HostDocument,
    config: AdjusterConfig,
    notifier: Notifier,
    user_id: Optional[str] = None,
    local_user_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Lower check DCs in an item's description by its level."""
    if not _should_run(config, user_id, local_user_id):
        return {}

    entity = _load(document)
    if entity is None or not entity.is_eligible:
        return {}

    with timer("hook_item"):
        updates = adjust_text_fields(entity)
    if not updates:
        return {}

    document.update_source(updates)
    record_updates(updates, path="import")

    log = AdjusterLogger(entity_name=entity.name, entity_kind=entity.kind, entity_level=entity.level)
    log.info(f'Adjusted DCs in "{entity.name}" by -{entity.level}')
    log.log_updates(updates)

    if config.show_notifications:
        notifier.info(f'PwL: Adjusted DCs in "{entity.name}" by -{entity.level}')
    return updates


def on_pre_create_actor(
    document: HostDocument,
    config: AdjusterConfig,
    notifier: Notifier,
    user_id: Optional[str] = None,
    local_user_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Lower a hazard's defenses, disable DCs and strike bonuses by its level."""
    if document.type != "hazard":
        return {}
    if not _should_run(config, user_id, local_user_id):
        return {}

    entity = _load(document)
    if entity is None or not entity.is_eligible:
        return {}

    with timer("hook_hazard"):
        updates = adjust_entity(entity)
    if not updates:
        return {}

    document.update_source(updates)
    record_updates(updates, path="import")

    log = AdjusterLogger(entity_name=entity.name, entity_kind=entity.kind, entity_level=entity.level)
    log.info(f'Adjusted hazard "{entity.name}" (Level {entity.level})')
    log.log_updates(updates)

    if config.show_notifications:
        notifier.info(f'PwL: Adjusted hazard "{entity.name}" by -{entity.level}')
    return updates
