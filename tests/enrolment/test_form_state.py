"""Tests for enrolment/form_state.py - the in-memory form container."""

from __future__ import annotations

import pytest

from enrolment.form_state import FormState
from enrolment.validators import validate_all
from enrolment.wire import to_wire_request


class TestUpdateSection:
    def test_partial_update_preserves_fields(self):
        state = FormState()
        state.update_section("applicant", {"surname": "Nguyen"})
        state.update_section("applicant", {"given_name": "An"})
        assert state.applicant.surname == "Nguyen"
        assert state.applicant.given_name == "An"

    def test_prunes_only_edited_field_errors(self):
        state = FormState()
        state.set_section_errors("applicant", {"surname": "Surname is required", "email": "Email is required"})
        state.update_section("applicant", {"surname": "Nguyen"})
        assert state.errors["applicant"] == {"email": "Email is required"}

    def test_update_does_not_validate(self):
        state = FormState()
        state.update_section("privacy_terms", {"declare_name": ""})
        assert not state.has_errors()

    def test_unknown_field_raises(self):
        with pytest.raises(ValueError):
            FormState().update_section("education", {"favourite_subject": "Maths"})

    def test_unknown_section_raises(self):
        with pytest.raises(KeyError):
            FormState().update_section("payment", {})

    def test_usi_document_swap(self):
        state = FormState()
        state.update_section("usi", {"usi_apply": "Yes", "usi_id_type": "4", "immi_number": "AB1234567"})
        assert state.usi.get("immi_number") == "AB1234567"
        state.update_section("usi", {"usi_id_type": "5"})
        assert state.usi.get("immi_number") == ""


class TestLoadAndPrefill:
    def test_round_trip_validates_the_same(self, valid_form):
        record = to_wire_request(valid_form)
        record["dateOfBirth"] = "1995-04-12T00:00:00"
        state = FormState.from_record(record)
        assert state.applicant.dob == "1995-04-12"
        assert validate_all(state.form) == validate_all(valid_form)
        assert state.existing_record == record

    def test_round_trip_keeps_gated_sections(self, valid_state):
        valid_state.update_section("applicant", {
            "postal_different": True,
            "post_address": "PO Box 12",
            "post_suburb": "Parramatta",
            "post_state": "NSW",
            "post_postcode": "2150",
        })
        valid_state.update_section("usi", {
            "usi_apply": "Yes",
            "usi_authorise_name": "An Nguyen",
            "usi_consent": True,
            "town_city_birth": "Hanoi",
            "overseas_city_birth": "Hanoi",
            "usi_id_type": "7",
            "citizenship_stock": "ACC123456",
            "citizenship_acq_date": "2010-06-01",
        })
        valid_state.update_section("education", {
            "school_name": "Parramatta High",
            "has_post_qual": "Yes",
            "qual_levels": ["Certificate III"],
            "qual_details": "Cert III in Civil Construction",
        })
        valid_state.update_section("additional_info", {"lang_other": "Yes", "home_language": "Vietnamese"})

        record = to_wire_request(valid_state.form)
        record["citizenshipAcquisitionDate"] = "2010-06-01T00:00:00"
        loaded = FormState.from_record(record)

        for key in ("applicant", "usi", "education", "additional_info", "privacy_terms"):
            assert loaded.section(key).to_dict() == valid_state.section(key).to_dict()
        assert loaded.usi.get("citizenship_acq_date") == "2010-06-01"
        assert validate_all(loaded.form) == validate_all(valid_state.form)

    def test_mark_completed_switches_to_update(self):
        state = FormState()
        assert not state.is_update
        state.mark_completed()
        assert state.is_update

    def test_is_update_follows_completed_flag(self, valid_form):
        record = to_wire_request(valid_form)
        assert not FormState.from_record(record).is_update
        record["enrollmentFormCompleted"] = True
        assert FormState.from_record(record).is_update

    def test_prefill_fills_only_empty_fields(self):
        state = FormState()
        state.update_section("applicant", {"email": "typed@example.com"})
        state.prefill_from_profile(email="profile@example.com", given_name="An")
        assert state.applicant.email == "typed@example.com"
        assert state.applicant.given_name == "An"

    def test_prefill_from_registration_splits_name(self):
        state = FormState()
        state.prefill_from_registration("An Van Nguyen", "an@example.com", "0412345678")
        assert state.applicant.given_name == "An"
        assert state.applicant.surname == "Van Nguyen"
        assert state.applicant.mobile == "0412345678"

    def test_reset(self, valid_state):
        valid_state.current_section = 4
        valid_state.set_section_errors("usi", {"usi_apply": "Please select an option"})
        valid_state.reset()
        assert valid_state.current_section == 1
        assert valid_state.applicant.surname == ""
        assert not valid_state.has_errors()

    def test_go_to_bounds(self):
        state = FormState()
        with pytest.raises(ValueError):
            state.go_to(0)
        state.go_to(5)
        assert state.current_section == 5
