"""Data models for the five enrolment form sections.

Each section is a dataclass with flat, snake_case fields. Sections share a
small record API (``get``, ``merge``, ``to_dict``, ``from_dict``) so the form
state container, the validators and the wire mapping can treat them
uniformly.

The USI section's identity document is a tagged union: one dataclass per
document type, each carrying only its own sub-fields.
"""

from __future__ import annotations

import mimetypes
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, ClassVar, Union


@dataclass
class StagedFile:
    """A file chosen by the applicant but not yet uploaded."""

    filename: str
    content: bytes = b""
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str | Path) -> StagedFile:
        p = Path(path)
        content_type = mimetypes.guess_type(p.name)[0] or "application/octet-stream"
        return cls(filename=p.name, content=p.read_bytes(), content_type=content_type)

    def describe(self) -> dict:
        return {"filename": self.filename, "content_type": self.content_type, "size": len(self.content)}


# Staged file field -> field holding the URL of an already uploaded copy
FILE_URL_FIELDS: dict[str, str] = {
    "doc_primary_id": "doc_primary_id_url",
    "doc_secondary_id": "doc_secondary_id_url",
    "usi_id_upload": "usi_id_upload_url",
    "qual_evidence_upload": "qual_evidence_upload_url",
}


class SectionRecord:
    """Shared record behaviour for the section dataclasses."""

    def field_names(self) -> list[str]:
        return [f.name for f in fields(self)]

    def get(self, name: str) -> Any:
        if name not in self.field_names():
            raise ValueError(f"Unknown field for {type(self).__name__}: {name}")
        return getattr(self, name)

    def merge(self, partial: dict[str, Any]) -> None:
        """Shallow-merge *partial* into this record, keeping untouched fields."""
        unknown = [k for k in partial if k not in self.field_names()]
        if unknown:
            raise ValueError(f"Unknown field(s) for {type(self).__name__}: {', '.join(unknown)}")
        for key, value in partial.items():
            setattr(self, key, value)

    def to_dict(self) -> dict:
        d: dict = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, StagedFile):
                value = value.describe()
            elif isinstance(value, list):
                value = list(value)
            d[f.name] = value
        return d

    @classmethod
    def from_dict(cls, d: dict):
        kwargs = {}
        for k, v in d.items():
            if k not in cls.__dataclass_fields__:
                continue
            if k in FILE_URL_FIELDS and not isinstance(v, StagedFile):
                # Only real staged files survive; JSON payloads cannot carry them
                continue
            kwargs[k] = v
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Section 1: Applicant
# ---------------------------------------------------------------------------

@dataclass
class ApplicantDetails(SectionRecord):
    """Identity, contact, address, ID documents and emergency contact."""

    title: str = ""                 # Mr | Mrs | Miss | Ms | Dr | Other
    surname: str = ""
    given_name: str = ""
    middle_name: str = ""
    preferred_name: str = ""
    dob: str = ""                   # YYYY-MM-DD
    gender: str = ""                # Male | Female

    home_phone: str = ""
    work_phone: str = ""
    mobile: str = ""
    email: str = ""

    res_address: str = ""
    res_suburb: str = ""
    res_state: str = ""
    res_postcode: str = ""

    postal_different: bool = False
    post_address: str = ""
    post_suburb: str = ""
    post_state: str = ""
    post_postcode: str = ""

    doc_primary_id: StagedFile | None = None
    doc_primary_id_url: str = ""
    doc_secondary_id: StagedFile | None = None
    doc_secondary_id_url: str = ""

    emergency_name: str = ""
    emergency_relationship: str = ""
    emergency_contact_number: str = ""
    emergency_permission: str = ""  # Yes | No


# ---------------------------------------------------------------------------
# Section 2: USI and identity documents
# ---------------------------------------------------------------------------

@dataclass
class DriversLicence:
    ID_TYPE: ClassVar[str] = "1"
    dl_state: str = ""
    dl_number: str = ""


@dataclass
class MedicareCard:
    ID_TYPE: ClassVar[str] = "2"
    medicare_number: str = ""
    medicare_irn: str = ""
    medicare_colour: str = ""       # Green | Yellow | Blue
    medicare_expiry: str = ""


@dataclass
class BirthCertificate:
    ID_TYPE: ClassVar[str] = "3"
    birth_state: str = ""


@dataclass
class ImmiCard:
    ID_TYPE: ClassVar[str] = "4"
    immi_number: str = ""


@dataclass
class AustralianPassport:
    ID_TYPE: ClassVar[str] = "5"
    aus_passport_number: str = ""


@dataclass
class NonAustralianPassport:
    ID_TYPE: ClassVar[str] = "6"
    non_aus_passport_number: str = ""
    non_aus_passport_country: str = ""


@dataclass
class CitizenshipCertificate:
    ID_TYPE: ClassVar[str] = "7"
    citizenship_stock: str = ""
    citizenship_acq_date: str = ""


@dataclass
class DescentRegistration:
    ID_TYPE: ClassVar[str] = "8"
    descent_acq_date: str = ""


IdentityDocument = Union[
    DriversLicence,
    MedicareCard,
    BirthCertificate,
    ImmiCard,
    AustralianPassport,
    NonAustralianPassport,
    CitizenshipCertificate,
    DescentRegistration,
]

ID_DOCUMENT_TYPES: dict[str, type] = {
    cls.ID_TYPE: cls
    for cls in (
        DriversLicence,
        MedicareCard,
        BirthCertificate,
        ImmiCard,
        AustralianPassport,
        NonAustralianPassport,
        CitizenshipCertificate,
        DescentRegistration,
    )
}


def document_fields(id_type: str) -> list[str]:
    """Return the sub-field names of the document variant for *id_type*."""
    cls = ID_DOCUMENT_TYPES.get(id_type)
    if cls is None:
        return []
    return [f.name for f in fields(cls)]


ALL_DOCUMENT_FIELDS: list[str] = [
    name for id_type in ID_DOCUMENT_TYPES for name in document_fields(id_type)
]


def empty_document(id_type: str) -> IdentityDocument | None:
    """Return a blank document of the given type, or None for no/unknown type."""
    cls = ID_DOCUMENT_TYPES.get(id_type)
    return cls() if cls else None


@dataclass
class USIDetails(SectionRecord):
    """USI number, access permission and the optional apply-on-my-behalf request."""

    usi: str = ""
    usi_access_permission: bool = False
    usi_apply: str = ""             # Yes | No

    usi_authorise_name: str = ""
    usi_consent: bool = False
    town_city_birth: str = ""
    overseas_city_birth: str = ""

    usi_id_type: str = ""           # "1".."8", see ID_DOCUMENT_TYPES
    usi_id_upload: StagedFile | None = None
    usi_id_upload_url: str = ""
    id_document: IdentityDocument | None = None

    def field_names(self) -> list[str]:
        names = [f.name for f in fields(self) if f.name != "id_document"]
        if self.id_document is not None:
            names.extend(f.name for f in fields(self.id_document))
        return names

    def get(self, name: str) -> Any:
        if self.id_document is not None and name in self.id_document.__dataclass_fields__:
            return getattr(self.id_document, name)
        if name in ALL_DOCUMENT_FIELDS:
            # Sub-field of a document type that is not selected
            return ""
        return super().get(name)

    def merge(self, partial: dict[str, Any]) -> None:
        """Merge a flat partial update.

        A new ``usi_id_type`` swaps ``id_document`` to a blank variant of that
        type before any document sub-fields in the same update are applied.
        """
        partial = dict(partial)
        if "usi_id_type" in partial:
            new_type = partial.pop("usi_id_type")
            if new_type != self.usi_id_type or self.id_document is None:
                self.id_document = empty_document(new_type)
            self.usi_id_type = new_type

        doc_updates = {}
        if self.id_document is not None:
            doc_fields = self.id_document.__dataclass_fields__
            doc_updates = {k: partial.pop(k) for k in list(partial) if k in doc_fields}

        super().merge(partial)
        if doc_updates:
            self.id_document = replace(self.id_document, **doc_updates)

    def to_dict(self) -> dict:
        d = super().to_dict()
        doc = d.pop("id_document")
        if doc is not None:
            d.update(asdict(self.id_document))
        return d

    @classmethod
    def from_dict(cls, d: dict) -> USIDetails:
        base = {k: v for k, v in d.items() if k not in ALL_DOCUMENT_FIELDS and k != "id_document"}
        record = super().from_dict(base)
        doc = empty_document(record.usi_id_type)
        if doc is not None:
            doc_values = {k: v for k, v in d.items() if k in doc.__dataclass_fields__}
            doc = replace(doc, **doc_values)
        record.id_document = doc
        return record


# ---------------------------------------------------------------------------
# Section 3: Education & employment
# ---------------------------------------------------------------------------

@dataclass
class EducationDetails(SectionRecord):
    """Prior schooling, post-secondary qualifications, employment, reason for training."""

    school_level: str = ""
    school_complete_year: str = ""
    school_name: str = ""
    school_in_aus: bool = True
    school_state: str = ""
    school_postcode: str = ""
    school_country: str = ""

    has_post_qual: str = ""         # Yes | No
    qual_levels: list[str] = field(default_factory=list)
    qual_details: str = ""
    qual_evidence_upload: StagedFile | None = None
    qual_evidence_upload_url: str = ""

    employment_status: str = ""
    employer_name: str = ""
    supervisor_name: str = ""
    employer_address: str = ""
    employer_email: str = ""
    employer_phone: str = ""

    training_reason: str = ""
    training_reason_other: str = ""


# ---------------------------------------------------------------------------
# Section 4: Additional information
# ---------------------------------------------------------------------------

@dataclass
class AdditionalInfo(SectionRecord):
    country_of_birth: str = ""
    lang_other: str = ""            # Yes | No
    home_language: str = ""
    indigenous_status: str = ""
    has_disability: str = ""        # Yes | No
    disability_types: list[str] = field(default_factory=list)
    disability_notes: str = ""


# ---------------------------------------------------------------------------
# Section 5: Privacy, terms and signature
# ---------------------------------------------------------------------------

@dataclass
class PrivacyTerms(SectionRecord):
    accept_privacy: bool = False
    accept_terms: bool = False
    declare_name: str = ""
    declare_date: str = ""
    signature_data: str = ""        # PNG data URL, "" until signed


SECTION_TYPES: dict[str, type] = {
    "applicant": ApplicantDetails,
    "usi": USIDetails,
    "education": EducationDetails,
    "additional_info": AdditionalInfo,
    "privacy_terms": PrivacyTerms,
}


@dataclass
class EnrolmentFormData:
    """All five sections of one enrolment."""

    applicant: ApplicantDetails = field(default_factory=ApplicantDetails)
    usi: USIDetails = field(default_factory=USIDetails)
    education: EducationDetails = field(default_factory=EducationDetails)
    additional_info: AdditionalInfo = field(default_factory=AdditionalInfo)
    privacy_terms: PrivacyTerms = field(default_factory=PrivacyTerms)

    def section(self, key: str) -> SectionRecord:
        if key not in SECTION_TYPES:
            raise KeyError(f"Unknown section: {key}")
        return getattr(self, key)

    def staged_files(self) -> list[tuple[str, str, StagedFile]]:
        """Return (section_key, field_name, file) for every staged file."""
        result = []
        for key in SECTION_TYPES:
            record = self.section(key)
            for name in FILE_URL_FIELDS:
                value = getattr(record, name, None)
                if isinstance(value, StagedFile):
                    result.append((key, name, value))
        return result

    def to_dict(self) -> dict:
        return {key: self.section(key).to_dict() for key in SECTION_TYPES}

    @classmethod
    def from_dict(cls, d: dict) -> EnrolmentFormData:
        return cls(**{
            key: section_cls.from_dict(d.get(key) or {})
            for key, section_cls in SECTION_TYPES.items()
        })
