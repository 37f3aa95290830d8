"""Submission pipeline for the enrolment wizard.

Runs all section validators, uploads staged documents one at a time,
maps the form to the wire request and creates or updates the enrolment
record. Every outcome is reported through a Notifier and written to the
audit trail. Also loads an existing record into the form and runs the
public (account-creating) submission.

Network failures are caught here and turned into failed outcomes; nothing
below this layer is allowed to crash the wizard.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

import requests

from enrolment import audit_log
from enrolment.config import get_validation_variant
from enrolment.form_state import FormState
from enrolment.rules import is_shown
from enrolment.sections import FILE_URL_FIELDS, StagedFile
from enrolment.validators import first_invalid_section, validate_all, validate_registration
from enrolment.wire import to_wire_request
from shared.enrolment_client import EnrolmentApiError

MISSING_STUDENT_MSG = "Student ID not found. Please log in again."
REQUIRED_FIELDS_MSG = "Please fill in all required fields"
SUCCESS_MSG = "Enrollment form submitted successfully!"
FAILED_MSG = "Failed to submit form"
UPLOAD_FAILED_MSG = "Failed to upload document"

# Stages at which a submission can stop
STAGE_STUDENT_ID = "student_id"
STAGE_REGISTRATION = "registration"
STAGE_VALIDATION = "validation"
STAGE_UPLOAD = "upload"
STAGE_SUBMISSION = "submission"
STAGE_DONE = "done"

ACTION_CREATE = "create"
ACTION_UPDATE = "update"
ACTION_PUBLIC = "public"

# (section, staged file field, document kind), in upload order
UPLOAD_ORDER: list[tuple[str, str, str]] = [
    ("applicant", "doc_primary_id", "primaryId"),
    ("applicant", "doc_secondary_id", "secondaryId"),
    ("usi", "usi_id_upload", "usiId"),
    ("education", "qual_evidence_upload", "qualification"),
]


class Notifier(Protocol):
    """User-facing notices (toasts in a browser, messages in a CLI)."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class CollectingNotifier:
    """Notifier that keeps (level, message) pairs, for services and tests."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    @property
    def last(self) -> tuple[str, str] | None:
        return self.messages[-1] if self.messages else None


class EnrolmentService(Protocol):
    """The subset of the enrolment API the pipeline talks to."""

    def get_by_student_id(self, student_id: str) -> dict: ...

    def create(self, request: dict, student_id: str) -> dict: ...

    def update(self, request: dict, student_id: str) -> dict: ...

    def upload_document(
        self,
        filename: str,
        content: bytes,
        document_type: str,
        student_id: str,
        content_type: str = ...,
    ) -> dict: ...

    def submit_public(self, request: dict) -> dict: ...


def _envelope(resp: Any) -> dict:
    """The response envelope, or {} when the body is not a JSON object."""
    return resp if isinstance(resp, dict) else {}


@dataclass
class SubmissionOutcome:
    success: bool
    stage: str
    message: str = ""
    action: str = ""
    data: Any = None


@dataclass
class Registration:
    """Account details collected before the public wizard starts."""

    full_name: str
    email: str
    phone: str
    password: str
    agreed_to_conditions: bool = False
    transaction_id: str = ""
    payment_amount: float | None = None

    def errors(self) -> dict[str, str]:
        return validate_registration(
            self.full_name, self.email, self.phone, self.password, self.agreed_to_conditions,
        )


@dataclass
class SubmissionPipeline:
    state: FormState
    client: EnrolmentService
    notifier: Notifier
    variant: str = field(default_factory=get_validation_variant)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fail(self, stage: str, message: str, student_id: str = "", data: Any = None) -> SubmissionOutcome:
        self.notifier.error(message)
        action = audit_log.SUBMISSION_BLOCKED if stage == STAGE_VALIDATION else audit_log.SUBMISSION_FAILED
        audit_log.record(action, student_id=student_id, details={"stage": stage, "message": message})
        return SubmissionOutcome(success=False, stage=stage, message=message, data=data)

    def _validate(self, student_id: str = "") -> SubmissionOutcome | None:
        """Validate every section; on errors store them and jump to the first bad section."""
        errors = validate_all(self.state.form, self.variant)
        self.state.set_all_errors(errors)
        first = first_invalid_section(errors)
        if first is None:
            return None
        self.state.go_to(first)
        invalid = {key: errs for key, errs in errors.items() if errs}
        return self._fail(STAGE_VALIDATION, REQUIRED_FIELDS_MSG, student_id, data=invalid)

    def _upload_staged(self, student_id: str) -> SubmissionOutcome | None:
        for section, name, kind in UPLOAD_ORDER:
            record = self.state.section(section)
            staged = getattr(record, name)
            if not isinstance(staged, StagedFile) or not is_shown(section, record, name):
                continue
            try:
                resp = self.client.upload_document(
                    staged.filename, staged.content, kind, student_id, staged.content_type,
                )
            except (EnrolmentApiError, requests.RequestException) as exc:
                return self._fail(STAGE_UPLOAD, str(exc) or UPLOAD_FAILED_MSG, student_id)
            resp = _envelope(resp)
            url = _envelope(resp.get("data")).get("documentUrl") or ""
            if resp.get("success") is False or not url:
                return self._fail(STAGE_UPLOAD, resp.get("message") or UPLOAD_FAILED_MSG, student_id)

            # Keep the stored copy's URL so a retry does not upload it again
            self.state.update_section(section, {name: None, FILE_URL_FIELDS[name]: url})
            audit_log.record(
                audit_log.DOCUMENT_UPLOADED,
                student_id=student_id,
                section=section,
                details={"document_type": kind, "filename": staged.filename},
            )
        return None

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def submit(self, student_id: str) -> SubmissionOutcome:
        """Validate, upload staged documents, then create or update the record."""
        if not student_id:
            return self._fail(STAGE_STUDENT_ID, MISSING_STUDENT_MSG)

        blocked = self._validate(student_id)
        if blocked is not None:
            return blocked

        failed = self._upload_staged(student_id)
        if failed is not None:
            return failed

        request = to_wire_request(self.state.form)
        action = ACTION_UPDATE if self.state.is_update else ACTION_CREATE
        try:
            if action == ACTION_UPDATE:
                resp = self.client.update(request, student_id)
            else:
                resp = self.client.create(request, student_id)
        except (EnrolmentApiError, requests.RequestException) as exc:
            return self._fail(STAGE_SUBMISSION, str(exc) or FAILED_MSG, student_id)

        resp = _envelope(resp)
        if not resp.get("success"):
            return self._fail(STAGE_SUBMISSION, resp.get("message") or FAILED_MSG, student_id)

        if action == ACTION_CREATE:
            self.state.mark_completed()
        self.notifier.success(SUCCESS_MSG)
        audit_log.record(audit_log.SUBMISSION_SUCCEEDED, student_id=student_id, details={"action": action})
        return SubmissionOutcome(True, STAGE_DONE, SUCCESS_MSG, action, resp.get("data"))

    def load_existing(self, student_id: str) -> bool:
        """Load the student's stored form into the state.

        Any failure, or a response without data, leaves the form untouched
        and returns False.
        """
        if not student_id:
            return False
        try:
            resp = self.client.get_by_student_id(student_id)
        except (EnrolmentApiError, requests.RequestException):
            return False
        resp = _envelope(resp)
        data = resp.get("data")
        if not resp.get("success") or not isinstance(data, dict) or not data:
            return False
        self.state.load_record(data)
        audit_log.record(audit_log.ENROLMENT_LOADED, student_id=student_id)
        return True

    def submit_public(self, registration: Registration) -> SubmissionOutcome:
        """Create account and enrolment in one call. No documents are uploaded."""
        if registration.errors():
            return self._fail(STAGE_REGISTRATION, REQUIRED_FIELDS_MSG, data=registration.errors())

        blocked = self._validate()
        if blocked is not None:
            return blocked

        request = to_wire_request(self.state.form)
        request["password"] = registration.password
        if registration.transaction_id:
            request["transactionId"] = registration.transaction_id
        if registration.payment_amount is not None:
            request["paymentAmount"] = registration.payment_amount

        try:
            resp = self.client.submit_public(request)
        except (EnrolmentApiError, requests.RequestException) as exc:
            return self._fail(STAGE_SUBMISSION, str(exc) or FAILED_MSG)

        resp = _envelope(resp)
        if not resp.get("success"):
            return self._fail(STAGE_SUBMISSION, resp.get("message") or FAILED_MSG)

        data = _envelope(resp.get("data"))
        self.notifier.success(SUCCESS_MSG)
        audit_log.record(
            audit_log.SUBMISSION_SUCCEEDED,
            student_id=str(data.get("studentId", "")),
            details={"action": ACTION_PUBLIC},
        )
        result = {key: data.get(key) for key in ("userId", "studentId", "email", "fullName")}
        return SubmissionOutcome(True, STAGE_DONE, SUCCESS_MSG, ACTION_PUBLIC, result)
