"""Mapping between the in-memory enrolment form and the enrolment API's wire format.

The API speaks flat camelCase JSON. Requests omit empty optional values and
every field hidden by an inactive gate; records coming back are mapped into
fresh section records, keeping only the date portion of timestamps.
"""

from __future__ import annotations

from typing import Any

from enrolment.rules import is_shown
from enrolment.sections import (
    AdditionalInfo,
    ApplicantDetails,
    EducationDetails,
    EnrolmentFormData,
    PrivacyTerms,
    USIDetails,
)

# Field kinds
VALUE = "value"          # always sent as-is
OPTIONAL = "optional"    # omitted when empty
FLAG = "flag"            # omitted when false
LIST = "list"            # omitted when empty
DATE = "date"            # always sent; date portion only on load
OPTIONAL_DATE = "optional_date"

SCHOOL_NAME_FALLBACK = "N/A"

# (section, attribute, wire key, kind)
WIRE_FIELDS: list[tuple[str, str, str, str]] = [
    # Applicant
    ("applicant", "title", "title", VALUE),
    ("applicant", "surname", "surname", VALUE),
    ("applicant", "given_name", "givenName", VALUE),
    ("applicant", "middle_name", "middleName", OPTIONAL),
    ("applicant", "preferred_name", "preferredName", OPTIONAL),
    ("applicant", "dob", "dateOfBirth", DATE),
    ("applicant", "gender", "gender", VALUE),
    ("applicant", "home_phone", "homePhone", OPTIONAL),
    ("applicant", "work_phone", "workPhone", OPTIONAL),
    ("applicant", "mobile", "mobile", VALUE),
    ("applicant", "email", "email", VALUE),
    ("applicant", "res_address", "residentialAddress", VALUE),
    ("applicant", "res_suburb", "residentialSuburb", VALUE),
    ("applicant", "res_state", "residentialState", VALUE),
    ("applicant", "res_postcode", "residentialPostcode", VALUE),
    ("applicant", "postal_different", "postalAddressDifferent", VALUE),
    ("applicant", "post_address", "postalAddress", OPTIONAL),
    ("applicant", "post_suburb", "postalSuburb", OPTIONAL),
    ("applicant", "post_state", "postalState", OPTIONAL),
    ("applicant", "post_postcode", "postalPostcode", OPTIONAL),
    ("applicant", "emergency_name", "emergencyContactName", VALUE),
    ("applicant", "emergency_relationship", "emergencyContactRelationship", VALUE),
    ("applicant", "emergency_contact_number", "emergencyContactNumber", VALUE),
    ("applicant", "emergency_permission", "emergencyPermission", VALUE),
    # USI
    ("usi", "usi", "usi", OPTIONAL),
    ("usi", "usi_access_permission", "usiAccessPermission", VALUE),
    ("usi", "usi_apply", "usiApplyThroughSTA", VALUE),
    ("usi", "usi_authorise_name", "usiAuthoriseName", OPTIONAL),
    ("usi", "usi_consent", "usiConsent", FLAG),
    ("usi", "town_city_birth", "townCityOfBirth", OPTIONAL),
    ("usi", "overseas_city_birth", "overseasCityOfBirth", OPTIONAL),
    ("usi", "usi_id_type", "usiIdType", OPTIONAL),
    ("usi", "dl_state", "driversLicenceState", OPTIONAL),
    ("usi", "dl_number", "driversLicenceNumber", OPTIONAL),
    ("usi", "medicare_number", "medicareNumber", OPTIONAL),
    ("usi", "medicare_irn", "medicareIRN", OPTIONAL),
    ("usi", "medicare_colour", "medicareCardColor", OPTIONAL),
    ("usi", "medicare_expiry", "medicareExpiry", OPTIONAL_DATE),
    ("usi", "birth_state", "birthCertificateState", OPTIONAL),
    ("usi", "immi_number", "immiCardNumber", OPTIONAL),
    ("usi", "aus_passport_number", "australianPassportNumber", OPTIONAL),
    ("usi", "non_aus_passport_number", "nonAustralianPassportNumber", OPTIONAL),
    ("usi", "non_aus_passport_country", "nonAustralianPassportCountry", OPTIONAL),
    ("usi", "citizenship_stock", "citizenshipStockNumber", OPTIONAL),
    ("usi", "citizenship_acq_date", "citizenshipAcquisitionDate", OPTIONAL_DATE),
    ("usi", "descent_acq_date", "descentAcquisitionDate", OPTIONAL_DATE),
    # Education & employment
    ("education", "school_level", "schoolLevel", VALUE),
    ("education", "school_complete_year", "schoolCompleteYear", VALUE),
    ("education", "school_name", "schoolName", VALUE),
    ("education", "school_in_aus", "schoolInAustralia", VALUE),
    ("education", "school_state", "schoolState", OPTIONAL),
    ("education", "school_postcode", "schoolPostcode", OPTIONAL),
    ("education", "school_country", "schoolCountry", OPTIONAL),
    ("education", "has_post_qual", "hasPostSecondaryQualification", VALUE),
    ("education", "qual_levels", "qualificationLevels", LIST),
    ("education", "qual_details", "qualificationDetails", OPTIONAL),
    ("education", "employment_status", "employmentStatus", VALUE),
    ("education", "employer_name", "employerName", OPTIONAL),
    ("education", "supervisor_name", "supervisorName", OPTIONAL),
    ("education", "employer_address", "employerAddress", OPTIONAL),
    ("education", "employer_email", "employerEmail", OPTIONAL),
    ("education", "employer_phone", "employerPhone", OPTIONAL),
    ("education", "training_reason", "trainingReason", VALUE),
    ("education", "training_reason_other", "trainingReasonOther", OPTIONAL),
    # Additional information
    ("additional_info", "country_of_birth", "countryOfBirth", VALUE),
    ("additional_info", "lang_other", "speaksOtherLanguage", VALUE),
    ("additional_info", "home_language", "homeLanguage", OPTIONAL),
    ("additional_info", "indigenous_status", "indigenousStatus", VALUE),
    ("additional_info", "has_disability", "hasDisability", VALUE),
    ("additional_info", "disability_types", "disabilityTypes", LIST),
    ("additional_info", "disability_notes", "disabilityNotes", OPTIONAL),
    # Privacy, terms & signature
    ("privacy_terms", "accept_privacy", "acceptedPrivacyNotice", VALUE),
    ("privacy_terms", "accept_terms", "acceptedTermsAndConditions", VALUE),
    ("privacy_terms", "declare_name", "declarationName", VALUE),
    ("privacy_terms", "declare_date", "declarationDate", DATE),
    ("privacy_terms", "signature_data", "signatureData", VALUE),
]

# Uploaded document URLs returned on records (never sent on requests)
DOCUMENT_URL_FIELDS: list[tuple[str, str, str]] = [
    ("applicant", "doc_primary_id_url", "primaryIdDocumentUrl"),
    ("applicant", "doc_secondary_id_url", "secondaryIdDocumentUrl"),
    ("usi", "usi_id_upload_url", "usiIdDocumentUrl"),
    ("education", "qual_evidence_upload_url", "qualificationEvidenceUrl"),
]

# Boolean fields and their value when absent from a record
_BOOL_DEFAULTS = {
    "postal_different": False,
    "usi_access_permission": False,
    "usi_consent": False,
    "school_in_aus": True,
    "accept_privacy": False,
    "accept_terms": False,
}


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return not value
    return False


def date_part(value: Any) -> str:
    """Return the YYYY-MM-DD portion of an ISO date or timestamp string."""
    if not value:
        return ""
    return str(value).split("T")[0]


# ---------------------------------------------------------------------------
# Form -> request
# ---------------------------------------------------------------------------

def to_wire_request(form: EnrolmentFormData) -> dict[str, Any]:
    """Build the flat camelCase request body for create/update calls."""
    request: dict[str, Any] = {}
    for section, attr, key, kind in WIRE_FIELDS:
        record = form.section(section)
        if not is_shown(section, record, attr):
            continue
        value = record.get(attr)

        if attr == "school_name":
            request[key] = value.strip() or SCHOOL_NAME_FALLBACK
        elif kind in (OPTIONAL, OPTIONAL_DATE, LIST):
            if not _is_empty(value):
                request[key] = list(value) if kind == LIST else value
        elif kind == FLAG:
            if value:
                request[key] = True
        else:
            request[key] = value
    return request


# ---------------------------------------------------------------------------
# Record -> form
# ---------------------------------------------------------------------------

def from_wire_record(record: dict[str, Any]) -> EnrolmentFormData:
    """Map a stored enrolment record back into section records.

    Absent values fall back to the section defaults; staged files are always
    empty, but the URLs of previously uploaded documents are kept.
    """
    flat: dict[str, dict[str, Any]] = {
        "applicant": {},
        "usi": {},
        "education": {},
        "additional_info": {},
        "privacy_terms": {},
    }
    for section, attr, key, kind in WIRE_FIELDS:
        value = record.get(key)
        if kind in (DATE, OPTIONAL_DATE):
            flat[section][attr] = date_part(value)
        elif kind == LIST:
            flat[section][attr] = list(value or [])
        elif attr in _BOOL_DEFAULTS:
            flat[section][attr] = _BOOL_DEFAULTS[attr] if value is None else bool(value)
        else:
            flat[section][attr] = "" if value is None else str(value)

    for section, attr, key in DOCUMENT_URL_FIELDS:
        flat[section][attr] = record.get(key) or ""

    return EnrolmentFormData(
        applicant=ApplicantDetails.from_dict(flat["applicant"]),
        usi=USIDetails.from_dict(flat["usi"]),
        education=EducationDetails.from_dict(flat["education"]),
        additional_info=AdditionalInfo.from_dict(flat["additional_info"]),
        privacy_terms=PrivacyTerms.from_dict(flat["privacy_terms"]),
    )
