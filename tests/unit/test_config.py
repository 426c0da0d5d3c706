"""
Unit tests for AdjusterConfig loading.
"""
import json
import logging

import pytest

from pwl_dc_adjuster.config import ADJUSTED_DC_CEILING, PREVIEW_LIMIT, AdjusterConfig


class TestDefaults:

    def test_flags_default_on(self):
        cfg = AdjusterConfig.default()
        assert cfg.enabled is True
        assert cfg.show_notifications is True
        assert cfg.world_items_label == "World Items"

    def test_fixed_constants(self):
        assert ADJUSTED_DC_CEILING == 20
        assert PREVIEW_LIMIT == 20


class TestFromEnv:

    def test_env_overrides(self, monkeypatch):
        monkeypatch.delenv("PWL_CONFIG_FILE", raising=False)
        monkeypatch.setenv("PWL_ENABLED", "false")
        monkeypatch.setenv("PWL_SHOW_NOTIFICATIONS", "0")
        monkeypatch.setenv("PWL_LOG_LEVEL", "debug")
        cfg = AdjusterConfig.from_env()
        assert cfg.enabled is False
        assert cfg.show_notifications is False
        assert cfg.log_level == "DEBUG"

    def test_unrecognised_bool_ignored(self, monkeypatch):
        monkeypatch.delenv("PWL_CONFIG_FILE", raising=False)
        monkeypatch.setenv("PWL_ENABLED", "maybe")
        assert AdjusterConfig.from_env().enabled is True

    def test_config_file_then_env(self, monkeypatch, tmp_path):
        path = tmp_path / "pwl.json"
        path.write_text(json.dumps({"show_notifications": False, "enabled": False, "bogus": 1}))
        monkeypatch.setenv("PWL_CONFIG_FILE", str(path))
        monkeypatch.setenv("PWL_ENABLED", "yes")
        monkeypatch.delenv("PWL_SHOW_NOTIFICATIONS", raising=False)
        cfg = AdjusterConfig.from_env()
        assert cfg.show_notifications is False
        assert cfg.enabled is True


class TestFromFile:

    def test_missing_file_gives_defaults(self, tmp_path):
        assert AdjusterConfig.from_file(tmp_path / "nope.json") == AdjusterConfig()

    def test_invalid_json_gives_defaults(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert AdjusterConfig.from_file(path) == AdjusterConfig()

    def test_non_object_gives_defaults(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        assert AdjusterConfig.from_file(path) == AdjusterConfig()

    @pytest.mark.parametrize("raw", ["false", "no", "0", "FALSE", 0, False])
    def test_string_false_turns_flag_off(self, tmp_path, raw):
        path = tmp_path / "pwl.json"
        path.write_text(json.dumps({"enabled": raw, "show_notifications": raw}))
        cfg = AdjusterConfig.from_file(path)
        assert cfg.enabled is False
        assert cfg.show_notifications is False

    def test_string_true_turns_flag_on(self, tmp_path):
        path = tmp_path / "pwl.json"
        path.write_text(json.dumps({"enabled": "yes"}))
        assert AdjusterConfig.from_file(path).enabled is True

    def test_unparseable_flag_keeps_default_with_warning(self, tmp_path, caplog, monkeypatch):
        monkeypatch.setattr(logging.getLogger("pwl_dc_adjuster"), "propagate", True)
        path = tmp_path / "pwl.json"
        path.write_text(json.dumps({"enabled": "sometimes", "show_notifications": False}))
        with caplog.at_level(logging.WARNING, logger="pwl_dc_adjuster.config"):
            cfg = AdjusterConfig.from_file(path)
        assert cfg.enabled is True
        assert cfg.show_notifications is False
        assert any("invalid value" in r.getMessage() and "enabled" in r.getMessage()
                   for r in caplog.records)

    def test_non_string_label_keeps_default(self, tmp_path):
        path = tmp_path / "pwl.json"
        path.write_text(json.dumps({"world_items_label": 7, "log_level": "debug"}))
        cfg = AdjusterConfig.from_file(path)
        assert cfg.world_items_label == "World Items"
        assert cfg.log_level == "DEBUG"
