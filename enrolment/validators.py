"""Section validators for the enrolment form.

Each validator maps a section record to ``{field_name: message}``. An empty
dict means the section is valid. Validators never raise for bad data; they
only report it.

Required-ness comes from the gate table in ``enrolment.rules``. The strict
variant (used by the standalone enrolment form) additionally checks uploads
and the format of emails, postcodes and the USI.
"""

from __future__ import annotations

import re

from enrolment.catalogs import SECTION_KEYS, section_id
from enrolment.rules import STANDARD, STRICT, is_shown, required_fields
from enrolment.sections import (
    FILE_URL_FIELDS,
    AdditionalInfo,
    ApplicantDetails,
    EducationDetails,
    EnrolmentFormData,
    PrivacyTerms,
    SectionRecord,
    StagedFile,
    USIDetails,
)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_POSTCODE_RE = re.compile(r"^\d{4}$")
_USI_RE = re.compile(r"^[A-Za-z0-9]{10}$")

MIN_PASSWORD_LENGTH = 6

REQUIRED_MESSAGES: dict[str, dict[str, str]] = {
    "applicant": {
        "title": "Title is required",
        "surname": "Surname is required",
        "given_name": "Given name is required",
        "dob": "Date of birth is required",
        "gender": "Gender is required",
        "mobile": "Mobile phone is required",
        "email": "Email is required",
        "res_address": "Residential address is required",
        "res_suburb": "Suburb is required",
        "res_state": "State is required",
        "res_postcode": "Postcode is required",
        "post_address": "Postal address is required",
        "post_suburb": "Postal suburb is required",
        "post_state": "Postal state is required",
        "post_postcode": "Postal postcode is required",
        "doc_primary_id": "Please upload your primary ID",
        "emergency_name": "Emergency contact name is required",
        "emergency_relationship": "Relationship is required",
        "emergency_contact_number": "Contact number is required",
        "emergency_permission": "Please select Yes or No",
    },
    "usi": {
        "usi_apply": "Please select an option",
        "usi_authorise_name": "Name is required for USI application",
        "usi_consent": "Consent is required to apply through STA",
        "town_city_birth": "Town/City of birth is required",
        "overseas_city_birth": "Overseas city of birth is required",
        "usi_id_type": "Please select an ID type",
        "usi_id_upload": "Please upload the selected ID document",
        "dl_state": "Licence state is required",
        "dl_number": "Licence number is required",
        "medicare_number": "Medicare card number is required",
        "medicare_irn": "IRN is required",
        "medicare_colour": "Card colour is required",
        "medicare_expiry": "Expiry date is required",
        "birth_state": "State/Territory of birth registration is required",
        "immi_number": "ImmiCard number is required",
        "aus_passport_number": "Passport number is required",
        "non_aus_passport_number": "Passport number is required",
        "non_aus_passport_country": "Country of issue is required",
        "citizenship_stock": "Stock number is required",
        "citizenship_acq_date": "Acquisition date is required",
        "descent_acq_date": "Acquisition date is required",
    },
    "education": {
        "school_level": "Please select one school level",
        "school_complete_year": "Year completed is required",
        "school_state": "School state is required",
        "school_postcode": "School postcode is required",
        "school_country": "Country is required",
        "has_post_qual": "Please select Yes or No",
        "qual_evidence_upload": 'Qualification evidence is required when "Yes" is selected',
        "employment_status": "Employment status is required",
        "training_reason": "Training reason is required",
        "training_reason_other": "Please specify the reason",
    },
    "additional_info": {
        "country_of_birth": "Country of birth is required",
        "lang_other": "Please select an option",
        "home_language": "Please enter the language",
        "indigenous_status": "Indigenous status is required",
        "has_disability": "Please select an option",
    },
    "privacy_terms": {
        "accept_privacy": "You must accept the Privacy Notice",
        "accept_terms": "You must accept the Terms & Conditions",
        "declare_name": "Name is required",
        "declare_date": "Date is required",
        "signature_data": "Signature is required",
    },
}


def is_blank(record: SectionRecord, name: str) -> bool:
    """True when a field holds no usable value.

    A file field counts as filled when it has a staged file or the URL of an
    already uploaded copy.
    """
    if name in FILE_URL_FIELDS:
        staged = getattr(record, name, None)
        url = getattr(record, FILE_URL_FIELDS[name], "")
        return not isinstance(staged, StagedFile) and not str(url or "").strip()
    value = record.get(name)
    if isinstance(value, str):
        return not value.strip()
    return not value


def _required_errors(section: str, record: SectionRecord, variant: str) -> dict[str, str]:
    messages = REQUIRED_MESSAGES[section]
    errors: dict[str, str] = {}
    for name in required_fields(section, record, variant):
        if is_blank(record, name):
            errors[name] = messages.get(name, f"{name.replace('_', ' ').capitalize()} is required")
    return errors


def _check_postcode(
    errors: dict[str, str], section: str, record: SectionRecord, name: str,
) -> None:
    if name in errors or not is_shown(section, record, name):
        return
    value = str(record.get(name) or "").strip()
    if value and not _POSTCODE_RE.match(value):
        errors[name] = "Enter a valid 4-digit postcode"


# ---------------------------------------------------------------------------
# Per-section validators
# ---------------------------------------------------------------------------

def validate_applicant(data: ApplicantDetails, variant: str = STANDARD) -> dict[str, str]:
    errors = _required_errors("applicant", data, variant)
    if variant == STRICT:
        if "email" not in errors and not _EMAIL_RE.match(data.email.strip()):
            errors["email"] = "A valid email is required"
        _check_postcode(errors, "applicant", data, "res_postcode")
        _check_postcode(errors, "applicant", data, "post_postcode")
    return errors


def validate_usi(data: USIDetails, variant: str = STANDARD) -> dict[str, str]:
    errors = _required_errors("usi", data, variant)
    if variant == STRICT:
        usi = data.usi.strip()
        if usi and not _USI_RE.match(usi):
            errors["usi"] = "USI must be 10 letters or digits"
    return errors


def validate_education(data: EducationDetails, variant: str = STANDARD) -> dict[str, str]:
    errors = _required_errors("education", data, variant)
    if variant == STRICT:
        _check_postcode(errors, "education", data, "school_postcode")
    return errors


def validate_additional_info(data: AdditionalInfo, variant: str = STANDARD) -> dict[str, str]:
    return _required_errors("additional_info", data, variant)


def validate_privacy_terms(data: PrivacyTerms, variant: str = STANDARD) -> dict[str, str]:
    return _required_errors("privacy_terms", data, variant)


SECTION_VALIDATORS = {
    "applicant": validate_applicant,
    "usi": validate_usi,
    "education": validate_education,
    "additional_info": validate_additional_info,
    "privacy_terms": validate_privacy_terms,
}


def validate_section(key: str, data: SectionRecord, variant: str = STANDARD) -> dict[str, str]:
    """Validate one section by key."""
    validator = SECTION_VALIDATORS.get(key)
    if validator is None:
        raise KeyError(f"Unknown section: {key}")
    return validator(data, variant)


def validate_all(form: EnrolmentFormData, variant: str = STANDARD) -> dict[str, dict[str, str]]:
    """Validate every section, returning errors keyed by section (all keys present)."""
    return {key: validate_section(key, form.section(key), variant) for key in SECTION_KEYS}


def first_invalid_section(errors: dict[str, dict[str, str]]) -> int | None:
    """Return the 1-based number of the first section with errors, or None."""
    for key in SECTION_KEYS:
        if errors.get(key):
            return section_id(key)
    return None


# ---------------------------------------------------------------------------
# Public flow registration step
# ---------------------------------------------------------------------------

def validate_registration(
    full_name: str,
    email: str,
    phone: str,
    password: str,
    agreed_to_conditions: bool,
) -> dict[str, str]:
    """Validate the account details collected before the public wizard starts."""
    errors: dict[str, str] = {}
    if not full_name.strip():
        errors["full_name"] = "Full name is required"
    if not email.strip():
        errors["email"] = "Email is required"
    elif not _EMAIL_RE.match(email.strip()):
        errors["email"] = "Please enter a valid email address"
    if not phone.strip():
        errors["phone"] = "Phone number is required"
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if not agreed_to_conditions:
        errors["conditions"] = "Please agree to the conditions"
    return errors
