"""Tests for shared/config_store.py - per-tool JSON config."""

from __future__ import annotations

import json

import pytest

import shared.config_store as config_mod


# ── load_config ──────────────────────────────────────────────────────────


class TestLoadConfig:
    def test_returns_none_when_missing(self):
        assert config_mod.load_config("nonexistent") is None

    def test_reads_valid_json(self, tmp_config_dir):
        (tmp_config_dir / "enrolment.json").write_text(json.dumps({"validation_variant": "strict"}))
        assert config_mod.load_config("enrolment") == {"validation_variant": "strict"}

    def test_returns_none_on_corrupt_json(self, tmp_config_dir):
        (tmp_config_dir / "bad.json").write_text("NOT VALID JSON")
        assert config_mod.load_config("bad") is None

    def test_returns_none_for_non_object(self, tmp_config_dir):
        (tmp_config_dir / "list.json").write_text("[1, 2]")
        assert config_mod.load_config("list") is None

    def test_rejects_path_like_names(self):
        with pytest.raises(ValueError):
            config_mod.load_config("../secrets")


# ── save / get / set ─────────────────────────────────────────────────────


class TestSaveAndValues:
    def test_save_creates_file(self, tmp_config_dir):
        config_mod.save_config("enrolment", {"audit_enabled": False})
        data = json.loads((tmp_config_dir / "enrolment.json").read_text())
        assert data == {"audit_enabled": False}

    def test_get_value_default_when_no_config(self):
        assert config_mod.get_config_value("missing", "key", "default") == "default"

    def test_get_value_default_for_missing_key(self):
        config_mod.save_config("enrolment", {"audit_enabled": True})
        assert config_mod.get_config_value("enrolment", "validation_variant", "standard") == "standard"

    def test_set_value_preserves_other_keys(self):
        config_mod.save_config("enrolment", {"audit_enabled": True})
        config_mod.set_config_value("enrolment", "validation_variant", "strict")
        assert config_mod.load_config("enrolment") == {
            "audit_enabled": True,
            "validation_variant": "strict",
        }

    def test_update_config_merges(self):
        config_mod.save_config("enrolment", {"a": 1})
        result = config_mod.update_config("enrolment", {"b": 2, "a": 3})
        assert result == {"a": 3, "b": 2}
        assert config_mod.load_config("enrolment") == result
