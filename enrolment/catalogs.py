"""Option catalogs for the enrolment form.

Static enumerations offered by the select, radio and multi-select fields of
the five enrolment sections, plus the section layout itself.

Part of the Safety Training Academy student tools.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Section layout
# ---------------------------------------------------------------------------

SECTIONS: list[dict] = [
    {"id": 1, "key": "applicant", "title": "Applicant Information", "short_title": "Applicant"},
    {"id": 2, "key": "usi", "title": "Unique Student Identifier (USI)", "short_title": "USI"},
    {"id": 3, "key": "education", "title": "Education & Employment", "short_title": "Education"},
    {"id": 4, "key": "additional_info", "title": "Additional Information", "short_title": "Additional"},
    {"id": 5, "key": "privacy_terms", "title": "Privacy, Terms & Signature", "short_title": "Privacy"},
]

SECTION_KEYS: list[str] = [s["key"] for s in SECTIONS]

FIRST_SECTION = 1
LAST_SECTION = len(SECTIONS)


def section_key(section_id: int) -> str:
    """Return the section key for a 1-based section number."""
    if not FIRST_SECTION <= section_id <= LAST_SECTION:
        raise ValueError(f"Unknown section: {section_id}")
    return SECTION_KEYS[section_id - 1]


def section_id(key: str) -> int:
    """Return the 1-based section number for a section key."""
    if key not in SECTION_KEYS:
        raise KeyError(f"Unknown section: {key}")
    return SECTION_KEYS.index(key) + 1


# ---------------------------------------------------------------------------
# Applicant
# ---------------------------------------------------------------------------

YES_NO_OPTIONS = ["Yes", "No"]

TITLE_OPTIONS = ["Mr", "Mrs", "Miss", "Ms", "Dr", "Other"]

GENDER_OPTIONS = ["Male", "Female"]

STATE_OPTIONS = ["NSW", "VIC", "QLD", "WA", "SA", "TAS", "ACT", "NT"]

# ---------------------------------------------------------------------------
# USI identity documents
# ---------------------------------------------------------------------------

USI_ID_TYPE_OPTIONS: list[dict[str, str]] = [
    {"value": "1", "label": "1. Australian Driver's Licence"},
    {"value": "2", "label": "2. Medicare Card"},
    {"value": "3", "label": "3. Australian Birth Certificate"},
    {"value": "4", "label": "4. ImmiCard"},
    {"value": "5", "label": "5. Australian Passport"},
    {"value": "6", "label": "6. Non-Australian Passport (with Australian Visa)"},
    {"value": "7", "label": "7. Citizenship Certificate"},
    {"value": "8", "label": "8. Certificate of Registration by Descent"},
]

MEDICARE_COLOUR_OPTIONS = ["Green", "Yellow", "Blue"]

# ---------------------------------------------------------------------------
# Education & employment
# ---------------------------------------------------------------------------

SCHOOL_LEVEL_OPTIONS: list[dict[str, str]] = [
    {"value": "12 Year 12 or equivalent", "label": "12 - Year 12 or equivalent"},
    {"value": "11 Year 11 or equivalent", "label": "11 - Year 11 or equivalent"},
    {"value": "10 Year 10 or equivalent", "label": "10 - Year 10 or equivalent"},
    {"value": "09 Year 9 or equivalent", "label": "09 - Year 9 or equivalent"},
    {"value": "08 Year 8 or below", "label": "08 - Year 8 or below"},
    {"value": "02 Never attended school", "label": "02 - Never attended school"},
]

QUALIFICATION_LEVELS = [
    "Bachelor or Higher",
    "Advanced Diploma",
    "Diploma",
    "Certificate IV",
    "Certificate III",
    "Certificate II",
    "Certificate I",
    "Other",
]

EMPLOYMENT_STATUS_OPTIONS: list[dict[str, str]] = [
    {"value": "Full-time", "label": "Full-time employee"},
    {"value": "Part-time", "label": "Part-time employee"},
    {"value": "Self-employed", "label": "Self-employed"},
    {"value": "Unemployed seeking", "label": "Unemployed - seeking work"},
    {"value": "Not seeking", "label": "Not employed - not seeking"},
]

TRAINING_REASON_OPTIONS: list[dict[str, str]] = [
    {"value": "Job", "label": "To get a job"},
    {"value": "Promotion", "label": "Promotion"},
    {"value": "Skills", "label": "Extra skills"},
    {"value": "Course entry", "label": "Entry to another course"},
    {"value": "Personal", "label": "Personal development"},
    {"value": "Other", "label": "Other"},
]

# ---------------------------------------------------------------------------
# Additional information
# ---------------------------------------------------------------------------

INDIGENOUS_STATUS_OPTIONS = [
    "Aboriginal",
    "Torres Strait Islander",
    "Both Aboriginal and Torres Strait Islander",
    "Neither",
    "Prefer not to say",
]

DISABILITY_TYPES = [
    "Hearing/deafness",
    "Physical",
    "Intellectual",
    "Learning",
    "Mental illness",
    "Acquired brain impairment",
    "Vision",
    "Medical condition",
]


def all_catalogs() -> dict[str, list]:
    """Return every option catalog keyed by name, for presentation layers."""
    return {
        "sections": SECTIONS,
        "yes_no": YES_NO_OPTIONS,
        "titles": TITLE_OPTIONS,
        "genders": GENDER_OPTIONS,
        "states": STATE_OPTIONS,
        "usi_id_types": USI_ID_TYPE_OPTIONS,
        "medicare_colours": MEDICARE_COLOUR_OPTIONS,
        "school_levels": SCHOOL_LEVEL_OPTIONS,
        "qualification_levels": QUALIFICATION_LEVELS,
        "employment_statuses": EMPLOYMENT_STATUS_OPTIONS,
        "training_reasons": TRAINING_REASON_OPTIONS,
        "indigenous_statuses": INDIGENOUS_STATUS_OPTIONS,
        "disability_types": DISABILITY_TYPES,
    }
