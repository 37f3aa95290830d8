"""Shared fixtures for all tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

import enrolment.audit_log as audit_mod
import shared.config_store as config_mod
from enrolment.config import get_settings
from enrolment.form_state import FormState
from enrolment.sections import (
    AdditionalInfo,
    ApplicantDetails,
    EducationDetails,
    EnrolmentFormData,
    PrivacyTerms,
    USIDetails,
)

SIGNATURE = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


@pytest.fixture(autouse=True)
def _isolate_data_dirs(tmp_path: Path):
    """Redirect tool config and the audit trail to tmp_path for every test."""
    config_dir = tmp_path / "config"
    audit_dir = tmp_path / "audit"
    config_dir.mkdir()
    get_settings.cache_clear()
    with patch.object(config_mod, "CONFIG_DIR", config_dir), \
            patch.object(audit_mod, "DATA_DIR", audit_dir):
        yield {"config": config_dir, "audit": audit_dir}
    get_settings.cache_clear()


@pytest.fixture()
def tmp_config_dir(_isolate_data_dirs):
    return _isolate_data_dirs["config"]


@pytest.fixture()
def tmp_audit_dir(_isolate_data_dirs):
    return _isolate_data_dirs["audit"]


# ── Form data ────────────────────────────────────────────────────────────


@pytest.fixture()
def valid_applicant() -> ApplicantDetails:
    return ApplicantDetails(
        title="Mr",
        surname="Nguyen",
        given_name="An",
        dob="1995-04-12",
        gender="Male",
        mobile="0412345678",
        email="an.nguyen@example.com",
        res_address="1 George St",
        res_suburb="Sydney",
        res_state="NSW",
        res_postcode="2000",
        emergency_name="Bich Nguyen",
        emergency_relationship="Sister",
        emergency_contact_number="0498765432",
        emergency_permission="Yes",
    )


@pytest.fixture()
def valid_form(valid_applicant) -> EnrolmentFormData:
    """A complete enrolment that passes standard validation.

    No USI application, no post-school qualification, no disability.
    """
    return EnrolmentFormData(
        applicant=valid_applicant,
        usi=USIDetails(usi="ABCDE12345", usi_apply="No"),
        education=EducationDetails(
            school_level="12 Year 12 or equivalent",
            school_complete_year="2012",
            school_in_aus=True,
            school_state="NSW",
            school_postcode="2150",
            has_post_qual="No",
            employment_status="Full-time",
            training_reason="Job",
        ),
        additional_info=AdditionalInfo(
            country_of_birth="Australia",
            lang_other="No",
            indigenous_status="Neither",
            has_disability="No",
        ),
        privacy_terms=PrivacyTerms(
            accept_privacy=True,
            accept_terms=True,
            declare_name="An Nguyen",
            declare_date="2026-10-19",
            signature_data=SIGNATURE,
        ),
    )


@pytest.fixture()
def valid_state(valid_form) -> FormState:
    return FormState(valid_form)


# ── Enrolment API double ─────────────────────────────────────────────────


class FakeEnrolmentClient:
    """Records calls and answers from canned responses.

    Set ``responses[method]`` to a dict to answer with it, or to an
    exception instance to raise it.
    """

    def __init__(self):
        self.calls: list[tuple] = []
        self.responses: dict = {
            "get_by_student_id": {"success": False, "message": "Not found", "data": None},
            "create": {"success": True, "message": "", "data": {"studentId": "S-1"}},
            "update": {"success": True, "message": "", "data": {"studentId": "S-1"}},
            "upload_document": {"success": True, "data": {"documentUrl": "https://files.example/doc.pdf"}},
            "submit_public": {
                "success": True,
                "data": {
                    "userId": "U-9",
                    "studentId": "S-9",
                    "email": "an.nguyen@example.com",
                    "fullName": "An Nguyen",
                    "enrollmentFormStatus": "Pending",
                },
            },
        }

    def _answer(self, method: str):
        response = self.responses[method]
        if isinstance(response, Exception):
            raise response
        return response

    def get_by_student_id(self, student_id):
        self.calls.append(("get_by_student_id", student_id))
        return self._answer("get_by_student_id")

    def create(self, request, student_id):
        self.calls.append(("create", request, student_id))
        return self._answer("create")

    def update(self, request, student_id):
        self.calls.append(("update", request, student_id))
        return self._answer("update")

    def upload_document(self, filename, content, document_type, student_id, content_type="application/octet-stream"):
        self.calls.append(("upload_document", filename, document_type, student_id))
        return self._answer("upload_document")

    def submit_public(self, request):
        self.calls.append(("submit_public", request))
        return self._answer("submit_public")

    def methods_called(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture()
def fake_client() -> FakeEnrolmentClient:
    return FakeEnrolmentClient()
