"""In-memory state of one enrolment in progress.

Holds the five section records, the wizard's current section, the latest
validation errors per section and the record loaded from the backend (if
any). Section editors only ever send partial updates; nothing here runs
validation.
"""

from __future__ import annotations

from typing import Any

from enrolment.catalogs import FIRST_SECTION, LAST_SECTION, SECTION_KEYS
from enrolment.sections import (
    AdditionalInfo,
    ApplicantDetails,
    EducationDetails,
    EnrolmentFormData,
    PrivacyTerms,
    SectionRecord,
    USIDetails,
)
from enrolment.wire import from_wire_record


def _empty_errors() -> dict[str, dict[str, str]]:
    return {key: {} for key in SECTION_KEYS}


class FormState:
    """Form data plus wizard bookkeeping."""

    def __init__(self, form: EnrolmentFormData | None = None):
        self.form = form or EnrolmentFormData()
        self.current_section = FIRST_SECTION
        self.errors = _empty_errors()
        self.existing_record: dict[str, Any] | None = None

    # -- section access ---------------------------------------------------

    @property
    def applicant(self) -> ApplicantDetails:
        return self.form.applicant

    @property
    def usi(self) -> USIDetails:
        return self.form.usi

    @property
    def education(self) -> EducationDetails:
        return self.form.education

    @property
    def additional_info(self) -> AdditionalInfo:
        return self.form.additional_info

    @property
    def privacy_terms(self) -> PrivacyTerms:
        return self.form.privacy_terms

    def section(self, key: str) -> SectionRecord:
        return self.form.section(key)

    # -- updates ----------------------------------------------------------

    def update_section(self, key: str, partial: dict[str, Any]) -> None:
        """Shallow-merge *partial* into one section.

        Errors are cleared for exactly the edited fields; errors on other
        fields stay until those fields are edited or the section is
        revalidated.

        Raises:
            KeyError: unknown section key.
            ValueError: unknown field name for the section.
        """
        record = self.form.section(key)
        record.merge(partial)
        section_errors = self.errors.setdefault(key, {})
        for name in partial:
            section_errors.pop(name, None)

    def set_section_errors(self, key: str, errors: dict[str, str]) -> None:
        if key not in SECTION_KEYS:
            raise KeyError(f"Unknown section: {key}")
        self.errors[key] = dict(errors)

    def set_all_errors(self, errors: dict[str, dict[str, str]]) -> None:
        self.errors = _empty_errors()
        for key, section_errors in errors.items():
            self.set_section_errors(key, section_errors)

    def has_errors(self) -> bool:
        return any(self.errors.values())

    def go_to(self, section: int) -> None:
        if not FIRST_SECTION <= section <= LAST_SECTION:
            raise ValueError(f"Section must be between {FIRST_SECTION} and {LAST_SECTION}: {section}")
        self.current_section = section

    # -- loading and pre-fill ---------------------------------------------

    def load_record(self, record: dict[str, Any]) -> None:
        """Replace the form with a stored enrolment record."""
        self.form = from_wire_record(record)
        self.existing_record = dict(record)
        self.errors = _empty_errors()

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> FormState:
        state = cls()
        state.load_record(record)
        return state

    @property
    def is_update(self) -> bool:
        """True when the loaded record already has a completed enrolment form."""
        return bool(self.existing_record and self.existing_record.get("enrollmentFormCompleted"))

    def mark_completed(self) -> None:
        """Record that the backend now holds this student's form; later submits update it."""
        self.existing_record = {**(self.existing_record or {}), "enrollmentFormCompleted": True}

    def prefill_from_profile(
        self,
        email: str = "",
        given_name: str = "",
        surname: str = "",
        mobile: str = "",
    ) -> None:
        """Fill empty applicant fields from the signed-in user's profile."""
        values = {
            "email": email,
            "given_name": given_name,
            "surname": surname,
            "mobile": mobile,
        }
        partial = {
            name: value for name, value in values.items()
            if value and not self.applicant.get(name)
        }
        if partial:
            self.update_section("applicant", partial)

    def prefill_from_registration(self, full_name: str, email: str, phone: str) -> None:
        """Pre-fill the applicant from the public flow's registration step.

        The first word of the full name becomes the given name and the rest the
        surname.
        """
        parts = full_name.split()
        given_name = parts[0] if parts else ""
        surname = " ".join(parts[1:])
        self.prefill_from_profile(email=email, given_name=given_name, surname=surname, mobile=phone)

    def reset(self) -> None:
        """Back to an empty form on section 1. The loaded record is kept."""
        self.form = EnrolmentFormData()
        self.current_section = FIRST_SECTION
        self.errors = _empty_errors()
