"""REST client for the academy's student enrolment form API.

Thin wrapper over ``requests`` for the /StudentEnrollmentForm endpoints used
by the enrolment wizard and the admin review screens. Every endpoint answers
with a ``{success, message, data}`` envelope; non-2xx responses raise
EnrolmentApiError carrying the server's message when it sent one.

Unset constructor arguments come from the tool settings (enrolment/config.py),
so ENROLMENT_API_BASE_URL, ENROLMENT_API_TIMEOUT and ENROLMENT_API_TOKEN can be
set in the environment or the root .env.
"""

from __future__ import annotations

from typing import Any

import requests

from enrolment.config import get_settings

RESOURCE = "/StudentEnrollmentForm"

# Document kinds accepted by the upload endpoint
DOCUMENT_TYPES = ("primaryId", "secondaryId", "usiId", "qualification")

# Admin list filter: python name -> query parameter
_FILTER_PARAMS = {
    "search_query": "searchQuery",
    "status": "status",
    "from_date": "fromDate",
    "to_date": "toDate",
    "sort_by": "sortBy",
    "sort_descending": "sortDescending",
    "page": "page",
    "page_size": "pageSize",
}


class EnrolmentApiError(Exception):
    """The enrolment API rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _server_message(resp: requests.Response, fallback: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


class EnrolmentClient:
    """Client for one enrolment API deployment."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        token: str | None = None,
        session: requests.Session | None = None,
    ):
        s = get_settings()
        self.base_url = (base_url or s.enrolment_api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else s.enrolment_api_timeout
        self.session = session or requests.Session()
        token = token if token is not None else s.enrolment_api_token
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _url(self, path: str) -> str:
        return f"{self.base_url}{RESOURCE}{path}"

    def _request(self, method: str, path: str, **kwargs: Any) -> dict:
        resp = self.session.request(method, self._url(path), timeout=self.timeout, **kwargs)
        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            message = _server_message(resp, f"Request failed with status {resp.status_code}")
            raise EnrolmentApiError(message, resp.status_code) from exc
        if not resp.content:
            return {}
        try:
            body = resp.json()
        except ValueError as exc:
            raise EnrolmentApiError("Invalid JSON in response", resp.status_code) from exc
        if not isinstance(body, dict):
            raise EnrolmentApiError("Invalid response", resp.status_code)
        return body

    # ------------------------------------------------------------------
    # Student endpoints
    # ------------------------------------------------------------------

    def get_by_student_id(self, student_id: str) -> dict:
        return self._request("GET", f"/student/{student_id}")

    def create(self, request: dict, student_id: str) -> dict:
        return self._request("POST", f"/submit/{student_id}", json=request)

    def update(self, request: dict, student_id: str) -> dict:
        return self._request("PUT", f"/update/{student_id}", json=request)

    def upload_document(
        self,
        filename: str,
        content: bytes,
        document_type: str,
        student_id: str,
        content_type: str = "application/octet-stream",
    ) -> dict:
        """Upload one document as multipart ``file``.

        Returns the envelope; ``data.documentUrl`` is the stored copy's URL.
        """
        if document_type not in DOCUMENT_TYPES:
            raise ValueError(f"Unknown document type: {document_type}")
        return self._request(
            "POST",
            f"/upload-document/{student_id}",
            params={"documentType": document_type},
            files={"file": (filename, content, content_type)},
        )

    def submit_public(self, request: dict) -> dict:
        """Create the account, student and enrolment form in one call."""
        return self._request("POST", "/public/submit", json=request)

    # ------------------------------------------------------------------
    # Admin endpoints
    # ------------------------------------------------------------------

    def admin_list(self, **filters: Any) -> dict:
        """List submitted forms. Filters: search_query, status, from_date,
        to_date, sort_by, sort_descending, page, page_size."""
        params: dict[str, str] = {}
        for name, value in filters.items():
            if name not in _FILTER_PARAMS:
                raise ValueError(f"Unknown filter: {name}")
            if value is None or value == "":
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[_FILTER_PARAMS[name]] = str(value)
        return self._request("GET", "/admin/list", params=params)

    def admin_get(self, student_id: str) -> dict:
        return self._request("GET", f"/admin/{student_id}")

    def admin_review(self, student_id: str, approve: bool, review_notes: str = "") -> dict:
        body: dict[str, Any] = {"approve": approve}
        if review_notes:
            body["reviewNotes"] = review_notes
        return self._request("POST", f"/admin/{student_id}/review", json=body)

    def admin_update(self, student_id: str, request: dict) -> dict:
        return self._request("PUT", f"/admin/{student_id}", json=request)

    def admin_stats(self) -> dict:
        return self._request("GET", "/admin/stats")


# Cache the client so the session is reused between calls
_client: EnrolmentClient | None = None


def get_client() -> EnrolmentClient:
    global _client
    if _client is None:
        _client = EnrolmentClient()
    return _client


def reset_client() -> None:
    """Force a fresh client on next call (e.g. after changing the token)."""
    global _client
    _client = None
