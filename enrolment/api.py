"""FastAPI validation service for the enrolment wizard.

Exposes the option catalogs, the conditional field rules and the section
validators to presentation layers, so a browser form can show the same
fields and errors the submission pipeline enforces.

Part of the Safety Training Academy student tools.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from enrolment.catalogs import SECTION_KEYS, SECTIONS, all_catalogs
from enrolment.config import get_validation_variant
from enrolment.rules import VARIANTS, required_fields, visible_fields
from enrolment.sections import FILE_URL_FIELDS, SECTION_TYPES, EnrolmentFormData, SectionRecord, StagedFile
from enrolment.validators import first_invalid_section, validate_all, validate_registration, validate_section
from enrolment.wire import to_wire_request

app = FastAPI(title="Enrolment Wizard API")


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class SectionRequest(BaseModel):
    """One section's current values.

    File fields may carry a filename (or ``{"filename": ...}``) to mark a
    staged upload; ``*_url`` fields mark an already uploaded document.
    """

    data: dict[str, Any] = {}
    variant: str | None = None


class EnrolmentRequest(BaseModel):
    """All sections, keyed by section key."""

    sections: dict[str, dict[str, Any]] = {}
    variant: str | None = None


class RegistrationRequest(BaseModel):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    password: str = ""
    agreed_to_conditions: bool = False


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _resolve_variant(variant: str | None) -> str:
    if variant is None:
        return get_validation_variant()
    if variant not in VARIANTS:
        raise HTTPException(status_code=400, detail=f"Unknown validation variant: {variant}")
    return variant


def _check_section(section: str) -> None:
    if section not in SECTION_TYPES:
        raise HTTPException(status_code=404, detail=f"Unknown section: {section}")


def _build_record(section: str, data: dict[str, Any]) -> SectionRecord:
    values = dict(data)
    for name in FILE_URL_FIELDS:
        marker = values.get(name)
        if not marker:
            values.pop(name, None)
        elif isinstance(marker, dict):
            values[name] = StagedFile(filename=str(marker.get("filename", name)))
        else:
            values[name] = StagedFile(filename=str(marker) if isinstance(marker, str) else name)
    return SECTION_TYPES[section].from_dict(values)


def _build_form(sections: dict[str, dict[str, Any]]) -> EnrolmentFormData:
    unknown = [key for key in sections if key not in SECTION_TYPES]
    if unknown:
        raise HTTPException(status_code=404, detail=f"Unknown section: {unknown[0]}")
    return EnrolmentFormData(**{
        key: _build_record(key, sections.get(key) or {}) for key in SECTION_KEYS
    })


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/api/catalogs")
def get_catalogs() -> dict[str, Any]:
    """All option lists used by the form's selects, radios and checkboxes."""
    return all_catalogs()


@app.get("/api/sections")
def list_sections() -> list[dict[str, Any]]:
    """The five sections in order, with the fields an empty form shows."""
    return [
        {**meta, "fields": visible_fields(meta["key"], SECTION_TYPES[meta["key"]]())}
        for meta in SECTIONS
    ]


@app.post("/api/sections/{section}/required-fields")
def get_required_fields(section: str, request: SectionRequest) -> dict[str, Any]:
    """Fields shown and required for the given values of a section's gates."""
    _check_section(section)
    variant = _resolve_variant(request.variant)
    record = _build_record(section, request.data)
    return {
        "section": section,
        "variant": variant,
        "required": required_fields(section, record, variant),
        "visible": visible_fields(section, record),
    }


@app.post("/api/sections/{section}/validate")
def validate_one_section(section: str, request: SectionRequest) -> dict[str, Any]:
    _check_section(section)
    variant = _resolve_variant(request.variant)
    errors = validate_section(section, _build_record(section, request.data), variant)
    return {"section": section, "valid": not errors, "errors": errors}


@app.post("/api/enrolment/validate")
def validate_enrolment(request: EnrolmentRequest) -> dict[str, Any]:
    """Validate every section, as the submission pipeline does before uploading."""
    variant = _resolve_variant(request.variant)
    errors = validate_all(_build_form(request.sections), variant)
    first = first_invalid_section(errors)
    return {"valid": first is None, "first_invalid_section": first, "errors": errors}


@app.post("/api/enrolment/wire-request")
def build_wire_request(request: EnrolmentRequest) -> dict[str, Any]:
    """Preview the request body the pipeline would send for these values."""
    variant = _resolve_variant(request.variant)
    form = _build_form(request.sections)
    errors = validate_all(form, variant)
    return {
        "valid": first_invalid_section(errors) is None,
        "request": to_wire_request(form),
    }


@app.post("/api/registration/validate")
def validate_registration_step(request: RegistrationRequest) -> dict[str, Any]:
    errors = validate_registration(
        request.full_name,
        request.email,
        request.phone,
        request.password,
        request.agreed_to_conditions,
    )
    return {"valid": not errors, "errors": errors}
