"""Tests for shared/enrolment_client.py - REST calls with a mocked session."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
import requests

import shared.enrolment_client as client_mod
from enrolment.config import get_settings
from shared.enrolment_client import EnrolmentApiError, EnrolmentClient


def _response(status: int, body=None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.url = "http://api.test/StudentEnrollmentForm"
    resp._content = b"" if body is None else json.dumps(body).encode()
    return resp


@pytest.fixture()
def session():
    s = MagicMock()
    s.headers = {}
    s.request.return_value = _response(200, {"success": True, "message": "", "data": {}})
    return s


@pytest.fixture()
def client(session):
    return EnrolmentClient(base_url="http://api.test/api/", timeout=5, token="", session=session)


# ── Student endpoints ────────────────────────────────────────────────────


class TestStudentEndpoints:
    def test_get_by_student_id(self, client, session):
        client.get_by_student_id("S-1")
        session.request.assert_called_once_with(
            "GET", "http://api.test/api/StudentEnrollmentForm/student/S-1", timeout=5,
        )

    def test_create_posts_json(self, client, session):
        client.create({"surname": "Nguyen"}, "S-1")
        args, kwargs = session.request.call_args
        assert args == ("POST", "http://api.test/api/StudentEnrollmentForm/submit/S-1")
        assert kwargs["json"] == {"surname": "Nguyen"}

    def test_update_uses_put(self, client, session):
        client.update({}, "S-1")
        assert session.request.call_args[0][0] == "PUT"
        assert session.request.call_args[0][1].endswith("/update/S-1")

    def test_upload_document_multipart(self, client, session):
        session.request.return_value = _response(200, {"success": True, "data": {"documentUrl": "u"}})
        result = client.upload_document("id.png", b"png", "primaryId", "S-1", "image/png")
        _, kwargs = session.request.call_args
        assert kwargs["params"] == {"documentType": "primaryId"}
        assert kwargs["files"] == {"file": ("id.png", b"png", "image/png")}
        assert result["data"]["documentUrl"] == "u"

    def test_upload_unknown_type(self, client):
        with pytest.raises(ValueError):
            client.upload_document("x", b"", "passport", "S-1")

    def test_public_submit(self, client, session):
        client.submit_public({"password": "secret1"})
        assert session.request.call_args[0][1].endswith("/public/submit")


# ── Admin endpoints ──────────────────────────────────────────────────────


class TestAdminEndpoints:
    def test_list_filters_to_query(self, client, session):
        client.admin_list(search_query="nguyen", status="Pending", sort_descending=True, page=2, to_date=None)
        _, kwargs = session.request.call_args
        assert kwargs["params"] == {
            "searchQuery": "nguyen",
            "status": "Pending",
            "sortDescending": "true",
            "page": "2",
        }

    def test_list_unknown_filter(self, client):
        with pytest.raises(ValueError):
            client.admin_list(colour="blue")

    def test_review_body(self, client, session):
        client.admin_review("S-1", approve=False, review_notes="USI mismatch")
        args, kwargs = session.request.call_args
        assert args[1].endswith("/admin/S-1/review")
        assert kwargs["json"] == {"approve": False, "reviewNotes": "USI mismatch"}

    def test_stats(self, client, session):
        client.admin_stats()
        assert session.request.call_args[0][1].endswith("/admin/stats")


# ── Errors and configuration ─────────────────────────────────────────────


class TestErrors:
    def test_http_error_carries_server_message(self, client, session):
        session.request.return_value = _response(400, {"success": False, "message": "Invalid USI"})
        with pytest.raises(EnrolmentApiError) as exc_info:
            client.create({}, "S-1")
        assert exc_info.value.message == "Invalid USI"
        assert exc_info.value.status_code == 400

    def test_http_error_without_body(self, client, session):
        session.request.return_value = _response(500)
        with pytest.raises(EnrolmentApiError, match="status 500"):
            client.admin_stats()

    def test_empty_success_body(self, client, session):
        session.request.return_value = _response(204)
        assert client.admin_review("S-1", approve=True) == {}

    @pytest.mark.parametrize("body", [[], "ok", 3])
    def test_non_object_body_rejected(self, client, session, body):
        session.request.return_value = _response(200, body)
        with pytest.raises(EnrolmentApiError, match="Invalid response"):
            client.get_by_student_id("S-1")

    def test_null_body_rejected(self, client, session):
        resp = _response(200)
        resp._content = b"null"
        session.request.return_value = resp
        with pytest.raises(EnrolmentApiError):
            client.create({}, "S-1")

    def test_token_sets_header(self, session):
        EnrolmentClient(base_url="http://api.test", token="abc", session=session)
        assert session.headers["Authorization"] == "Bearer abc"

    def test_defaults_come_from_settings(self, monkeypatch, session):
        monkeypatch.setenv("ENROLMENT_API_BASE_URL", "https://enrol.example/api")
        monkeypatch.setenv("ENROLMENT_API_TIMEOUT", "12")
        monkeypatch.setenv("ENROLMENT_API_TOKEN", "env-token")
        get_settings.cache_clear()
        c = EnrolmentClient(session=session)
        assert c.base_url == "https://enrol.example/api"
        assert c.timeout == 12.0
        assert session.headers["Authorization"] == "Bearer env-token"

    def test_get_client_cached(self, monkeypatch):
        monkeypatch.setattr(client_mod, "_client", None)
        assert client_mod.get_client() is client_mod.get_client()
        client_mod.reset_client()
        assert client_mod._client is None
