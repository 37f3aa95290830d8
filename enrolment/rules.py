"""Declarative gate table for conditional enrolment fields.

A gate is a field whose value decides whether other fields in the same
section are shown and required. The table below is the single source for the
validators, the wire mapping and the presentation layer (via the API).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from enrolment.sections import FILE_URL_FIELDS, ID_DOCUMENT_TYPES, SectionRecord, document_fields

STANDARD = "standard"
STRICT = "strict"
VARIANTS = (STANDARD, STRICT)


@dataclass(frozen=True)
class Gate:
    """Fields shown/required in *section* while ``field == value``."""

    section: str
    field: str
    value: Any
    shows: tuple[str, ...] = ()
    requires: tuple[str, ...] = ()
    strict_requires: tuple[str, ...] = ()
    parent: tuple[str, Any] | None = None   # (field, value) that must also hold


# ---------------------------------------------------------------------------
# Always-required fields
# ---------------------------------------------------------------------------

BASE_REQUIRED: dict[str, tuple[str, ...]] = {
    "applicant": (
        "title",
        "surname",
        "given_name",
        "dob",
        "gender",
        "mobile",
        "email",
        "res_address",
        "res_suburb",
        "res_state",
        "res_postcode",
        "emergency_name",
        "emergency_relationship",
        "emergency_contact_number",
        "emergency_permission",
    ),
    "usi": ("usi_apply",),
    "education": (
        "school_level",
        "school_complete_year",
        "has_post_qual",
        "employment_status",
        "training_reason",
    ),
    "additional_info": (
        "country_of_birth",
        "lang_other",
        "indigenous_status",
        "has_disability",
    ),
    "privacy_terms": (
        "accept_privacy",
        "accept_terms",
        "declare_name",
        "declare_date",
        "signature_data",
    ),
}

STRICT_BASE_REQUIRED: dict[str, tuple[str, ...]] = {
    "applicant": ("doc_primary_id",),
}

# ---------------------------------------------------------------------------
# Gates
# ---------------------------------------------------------------------------

_POSTAL = ("post_address", "post_suburb", "post_state", "post_postcode")
_USI_APPLICATION = (
    "usi_authorise_name",
    "usi_consent",
    "town_city_birth",
    "overseas_city_birth",
    "usi_id_type",
)

GATES: list[Gate] = [
    Gate("applicant", "postal_different", True, shows=_POSTAL, requires=_POSTAL),
    Gate(
        "usi", "usi_apply", "Yes",
        shows=_USI_APPLICATION + ("usi_id_upload",),
        requires=_USI_APPLICATION,
        strict_requires=("usi_id_upload",),
    ),
    *[
        Gate(
            "usi", "usi_id_type", id_type,
            shows=tuple(document_fields(id_type)),
            requires=tuple(document_fields(id_type)),
            parent=("usi_apply", "Yes"),
        )
        for id_type in ID_DOCUMENT_TYPES
    ],
    Gate("education", "school_in_aus", True,
         shows=("school_state", "school_postcode"), requires=("school_state", "school_postcode")),
    Gate("education", "school_in_aus", False, shows=("school_country",), requires=("school_country",)),
    Gate(
        "education", "has_post_qual", "Yes",
        shows=("qual_levels", "qual_details", "qual_evidence_upload"),
        strict_requires=("qual_evidence_upload",),
    ),
    Gate("education", "training_reason", "Other",
         shows=("training_reason_other",), requires=("training_reason_other",)),
    Gate("additional_info", "lang_other", "Yes", shows=("home_language",), requires=("home_language",)),
    Gate("additional_info", "has_disability", "Yes", shows=("disability_types", "disability_notes")),
]

GATE_FIELDS: list[str] = list(dict.fromkeys(g.field for g in GATES))

# Fields that stay hidden unless an active gate shows them
GATED_FIELDS: dict[str, set[str]] = {}
for _gate in GATES:
    GATED_FIELDS.setdefault(_gate.section, set()).update(_gate.shows)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def gate_is_active(gate: Gate, record: SectionRecord) -> bool:
    if gate.parent is not None:
        parent_field, parent_value = gate.parent
        if record.get(parent_field) != parent_value:
            return False
    return record.get(gate.field) == gate.value


def active_gates(section: str, record: SectionRecord) -> list[Gate]:
    return [g for g in GATES if g.section == section and gate_is_active(g, record)]


def required_fields(section: str, record: SectionRecord, variant: str = STANDARD) -> list[str]:
    """Return the currently required field names for a section, in order.

    Args:
        section: Section key (e.g. "usi").
        record: The section's current data.
        variant: ``"standard"`` or ``"strict"``.
    """
    if variant not in VARIANTS:
        raise ValueError(f"Unknown validation variant: {variant}")
    names = list(BASE_REQUIRED.get(section, ()))
    if variant == STRICT:
        names.extend(STRICT_BASE_REQUIRED.get(section, ()))
    for gate in active_gates(section, record):
        names.extend(gate.requires)
        if variant == STRICT:
            names.extend(gate.strict_requires)
    return list(dict.fromkeys(names))


def shown_fields(section: str, record: SectionRecord) -> set[str]:
    """Gated fields that the current gate values reveal."""
    shown: set[str] = set()
    for gate in active_gates(section, record):
        shown.update(gate.shows)
    return shown


def is_shown(section: str, record: SectionRecord, name: str) -> bool:
    if name in GATED_FIELDS.get(section, set()):
        return name in shown_fields(section, record)
    return True


def visible_fields(section: str, record: SectionRecord) -> list[str]:
    """Return the fields a presentation layer should render right now."""
    url_fields = set(FILE_URL_FIELDS.values())
    shown = shown_fields(section, record)
    gated = GATED_FIELDS.get(section, set())
    visible = [
        name for name in record.field_names()
        if name not in url_fields and (name not in gated or name in shown)
    ]
    # Document sub-fields live on the variant; make sure shown ones are listed
    for name in sorted(shown - set(visible)):
        visible.append(name)
    return visible
