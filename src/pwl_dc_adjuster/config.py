"""
Adjuster configuration — feature flags read once and threaded explicitly.

Load order:
  1. Built-in defaults.
  2. JSON config file (if ``PWL_CONFIG_FILE`` env var is set).
  3. Individual environment variable overrides (``PWL_*`` prefix).

Nothing in the adjustment package reads the environment on its own; callers
build an :class:`AdjusterConfig` once and pass it down.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module identity
# ---------------------------------------------------------------------------
MODULE_ID = "pwl-dc-adjuster"
MODULE_VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Behaviour-defining constants (not runtime-tunable)
# ---------------------------------------------------------------------------

#: Values at or below this are assumed to be adjusted already.
#: PwL DCs are typically 10-22, standard DCs are 20-45.
ADJUSTED_DC_CEILING = 20

#: Maximum number of worklist entries listed in the confirmation prompt.
PREVIEW_LIMIT = 20


# ---------------------------------------------------------------------------
# AdjusterConfig
# ---------------------------------------------------------------------------


@dataclass
class AdjusterConfig:
    """Runtime settings for the import hooks and the bulk flatten run."""

    enabled: bool = True
    """Adjust DCs automatically when documents are imported."""

    show_notifications: bool = True
    """Show a notification when DCs are adjusted."""

    world_items_label: str = "World Items"
    """Source label used for top-level (non-embedded) documents."""

    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "AdjusterConfig":
        """Build config from environment variables, falling back to defaults."""
        cfg = cls()

        config_file = os.environ.get("PWL_CONFIG_FILE")
        if config_file:
            cfg = cls.from_file(Path(config_file), fallback=cfg)

        _apply_env_overrides(cfg)
        return cfg

    @classmethod
    def from_file(
        cls, path: Path, fallback: Optional["AdjusterConfig"] = None
    ) -> "AdjusterConfig":
        """
        Load a JSON config file.  Unknown keys are ignored.

        A missing or unreadable file logs a warning and returns *fallback*
        (or the defaults).
        """
        default = fallback if fallback is not None else cls()
        if not path.exists():
            logger.warning("Config file %s does not exist; using defaults", path)
            return default
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Failed to load config file %s: %s", path, exc)
            return default
        if not isinstance(raw, dict):
            logger.warning("Config file %s must contain a JSON object", path)
            return default

        cfg = cls()
        for f in fields(cls):
            if f.name not in raw:
                continue
            value = _coerce(f.name, raw[f.name], getattr(cfg, f.name))
            if value is None:
                logger.warning(
                    "Config file %s: invalid value %r for %s; using default",
                    path, raw[f.name], f.name,
                )
                continue
            setattr(cfg, f.name, value)
        logger.info("Loaded adjuster config from %s", path)
        return cfg

    @classmethod
    def default(cls) -> "AdjusterConfig":
        """Return a fresh config with all defaults (convenience alias)."""
        return cls()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


_BOOL_MAP = {"true": True, "1": True, "yes": True, "false": False, "0": False, "no": False}


def _parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        return _BOOL_MAP.get(value.strip().lower())
    return None


def _coerce(name: str, value: Any, current: Any) -> Any:
    """Coerce a file value to the type of field *name*; None if it does not parse."""
    if isinstance(current, bool):
        return _parse_bool(value)
    if isinstance(value, str) and value.strip():
        return value.upper() if name == "log_level" else value
    return None


def _apply_env_overrides(cfg: AdjusterConfig) -> None:
    """Apply individual PWL_* environment variable overrides to *cfg* in-place."""

    def _getenv_bool(key: str) -> Optional[bool]:
        v = os.environ.get(key, "").lower()
        return _BOOL_MAP.get(v)

    for attr, env_key in [
        ("enabled", "PWL_ENABLED"),
        ("show_notifications", "PWL_SHOW_NOTIFICATIONS"),
    ]:
        val = _getenv_bool(env_key)
        if val is not None:
            setattr(cfg, attr, val)

    level = os.environ.get("PWL_LOG_LEVEL")
    if level:
        cfg.log_level = level.upper()
