"""Append-only JSONL audit trail for the enrolment wizard.

Stores one JSON object per line in date-partitioned files named
YYYY-MM-DD.jsonl under <data_dir>/audit/. Entries record wizard navigation
and every submission outcome for a student.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from itertools import islice
from pathlib import Path

from enrolment.config import get_settings
from shared.config_store import get_config_value

DATA_DIR = get_settings().data_dir / "audit"

TOOL_NAME = "enrolment"

SECTION_CHANGED = "section_changed"
FORM_RESET = "form_reset"
SUBMISSION_BLOCKED = "submission_blocked"
DOCUMENT_UPLOADED = "document_uploaded"
SUBMISSION_SUCCEEDED = "submission_succeeded"
SUBMISSION_FAILED = "submission_failed"
ENROLMENT_LOADED = "enrolment_loaded"


@dataclass
class AuditEntry:
    timestamp: str
    action: str
    student_id: str = ""
    section: str = ""
    details: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> AuditEntry:
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})


def _file_for_date(date_str: str) -> Path:
    """Return the JSONL file path for a given YYYY-MM-DD date string."""
    return DATA_DIR / f"{date_str}.jsonl"


def _today_str() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def is_enabled() -> bool:
    return bool(get_config_value(TOOL_NAME, "audit_enabled", True))


def log_action(
    action: str,
    student_id: str = "",
    section: str = "",
    details: dict | None = None,
) -> AuditEntry:
    """Append an AuditEntry to today's JSONL file and return it."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)

    entry = AuditEntry(
        timestamp=datetime.now(timezone.utc).isoformat(),
        action=action,
        student_id=student_id,
        section=section,
        details=details or {},
    )

    path = _file_for_date(_today_str())
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    return entry


def record(
    action: str,
    student_id: str = "",
    section: str = "",
    details: dict | None = None,
) -> AuditEntry | None:
    """Like log_action, but a disabled trail or a failed write never interrupts the wizard."""
    if not is_enabled():
        return None
    try:
        return log_action(action, student_id=student_id, section=section, details=details)
    except OSError:
        return None


def _entries_in(path: Path) -> list[AuditEntry]:
    if not path.exists():
        return []
    lines = path.read_text(encoding="utf-8").splitlines()
    return [AuditEntry.from_dict(json.loads(line)) for line in lines if line.strip()]


def iter_entries(student_id: str | None = None) -> Iterator[AuditEntry]:
    """Yield entries newest first, across every day file, optionally for one student."""
    if not DATA_DIR.exists():
        return
    for path in sorted(DATA_DIR.glob("*.jsonl"), reverse=True):
        for entry in reversed(_entries_in(path)):
            if student_id is None or entry.student_id == student_id:
                yield entry


def get_recent_entries(limit: int = 50) -> list[AuditEntry]:
    return list(islice(iter_entries(), limit))


def get_entries_for_student(student_id: str, limit: int = 100) -> list[AuditEntry]:
    return list(islice(iter_entries(student_id), limit))


def get_entries_for_date(date_str: str) -> list[AuditEntry]:
    """All entries written on one UTC day (YYYY-MM-DD), newest first."""
    return list(reversed(_entries_in(_file_for_date(date_str))))
