"""Tests for enrolment/audit_log.py and enrolment/config.py."""

from __future__ import annotations

import json
from unittest.mock import patch

from enrolment import audit_log
from enrolment.config import get_settings, get_validation_variant
from shared.config_store import set_config_value


# ── Audit trail ──────────────────────────────────────────────────────────


class TestAuditLog:
    def test_log_action_appends_jsonl(self, tmp_audit_dir):
        entry = audit_log.log_action(audit_log.FORM_RESET, student_id="S-1")
        files = list(tmp_audit_dir.glob("*.jsonl"))
        assert len(files) == 1
        data = json.loads(files[0].read_text().strip())
        assert data["action"] == "form_reset"
        assert data["student_id"] == "S-1"
        assert data["timestamp"] == entry.timestamp

    def test_recent_entries_newest_first(self):
        audit_log.log_action(audit_log.SECTION_CHANGED, student_id="S-1")
        audit_log.log_action(audit_log.SUBMISSION_FAILED, student_id="S-2")
        recent = audit_log.get_recent_entries(limit=1)
        assert [e.action for e in recent] == [audit_log.SUBMISSION_FAILED]

    def test_entries_for_student(self):
        audit_log.log_action(audit_log.SECTION_CHANGED, student_id="S-1")
        audit_log.log_action(audit_log.SECTION_CHANGED, student_id="S-2")
        assert len(audit_log.get_entries_for_student("S-2")) == 1

    def test_readers_span_day_files(self, tmp_audit_dir):
        tmp_audit_dir.mkdir()
        for day, student in (("2026-10-17", "S-1"), ("2026-10-18", "S-2")):
            line = json.dumps({"timestamp": f"{day}T09:00:00", "action": "form_reset", "student_id": student})
            (tmp_audit_dir / f"{day}.jsonl").write_text(line + "\n\n")
        assert [e.student_id for e in audit_log.get_recent_entries()] == ["S-2", "S-1"]
        assert [e.timestamp for e in audit_log.get_entries_for_student("S-1")] == ["2026-10-17T09:00:00"]
        assert len(audit_log.get_entries_for_date("2026-10-18")) == 1

    def test_readers_without_trail(self, tmp_audit_dir):
        assert audit_log.get_recent_entries() == []
        assert not tmp_audit_dir.exists()

    def test_entries_for_missing_date(self):
        assert audit_log.get_entries_for_date("1999-01-01") == []

    def test_record_respects_toggle(self, tmp_audit_dir):
        set_config_value("enrolment", "audit_enabled", False)
        assert audit_log.record(audit_log.FORM_RESET) is None
        assert not tmp_audit_dir.exists()

    def test_record_swallows_write_errors(self):
        with patch.object(audit_log, "log_action", side_effect=OSError("disk full")):
            assert audit_log.record(audit_log.FORM_RESET) is None


# ── Settings and variant ─────────────────────────────────────────────────


class TestConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENROLMENT_API_TIMEOUT", raising=False)
        get_settings.cache_clear()
        assert get_settings().enrolment_api_timeout == 30.0

    def test_variant_from_tool_config(self):
        assert get_validation_variant() == "standard"
        set_config_value("enrolment", "validation_variant", "strict")
        assert get_validation_variant() == "strict"

    def test_unknown_variant_falls_back(self):
        set_config_value("enrolment", "validation_variant", "lenient")
        assert get_validation_variant() == "standard"
