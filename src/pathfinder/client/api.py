from __future__ import annotations

import logging
from typing import Any, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from pathfinder.config import Settings, get_settings
from pathfinder.errors import ApiError, NotFoundError, TransportError
from pathfinder.types import (
    AppSettings,
    CalendarEvent,
    CalendarEventFields,
    ContactFields,
    CrmContact,
    Job,
    JobFields,
    Resume,
    ResumeFields,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ApiClient:
    """Thin synchronous client for the /api resource endpoints.

    ``session`` is anything with a requests-style ``request`` method, which
    lets tests pass a FastAPI TestClient in place of ``requests.Session``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        session: Any | None = None,
        timeout: float | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.api_timeout_sec

    def _request(self, method: str, path: str, payload: Any | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        if response.status_code == 204:
            return None
        if response.status_code >= 400:
            detail = _error_detail(response)
            if response.status_code == 404:
                raise NotFoundError(detail, status_code=404)
            raise ApiError(detail, status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                f"{method} {path} returned a non-JSON body", status_code=response.status_code
            ) from exc

    # Jobs

    def list_jobs(self) -> list[Job]:
        return _validate_rows(Job, self._request("GET", "/jobs"))

    def get_job(self, job_id: int) -> Job:
        return Job.model_validate(self._request("GET", f"/jobs/{job_id}"))

    def create_job(self, job: JobFields) -> Job:
        return Job.model_validate(self._request("POST", "/jobs", _body(job)))

    def update_job(self, job: Job) -> Job:
        return Job.model_validate(self._request("PUT", f"/jobs/{job.id}", job.to_wire()))

    def delete_job(self, job_id: int) -> None:
        self._request("DELETE", f"/jobs/{job_id}")

    # Resumes

    def list_resumes(self) -> list[Resume]:
        return _validate_rows(Resume, self._request("GET", "/resumes"))

    def get_resume(self, resume_id: int) -> Resume:
        return Resume.model_validate(self._request("GET", f"/resumes/{resume_id}"))

    def create_resume(self, resume: ResumeFields) -> Resume:
        return Resume.model_validate(self._request("POST", "/resumes", _body(resume)))

    def update_resume(self, resume: Resume) -> Resume:
        return Resume.model_validate(self._request("PUT", f"/resumes/{resume.id}", resume.to_wire()))

    def delete_resume(self, resume_id: int) -> None:
        self._request("DELETE", f"/resumes/{resume_id}")

    # Contacts

    def list_contacts(self) -> list[CrmContact]:
        return _validate_rows(CrmContact, self._request("GET", "/contacts"))

    def get_contact(self, contact_id: int) -> CrmContact:
        return CrmContact.model_validate(self._request("GET", f"/contacts/{contact_id}"))

    def create_contact(self, contact: ContactFields) -> CrmContact:
        return CrmContact.model_validate(self._request("POST", "/contacts", _body(contact)))

    def update_contact(self, contact: CrmContact) -> CrmContact:
        return CrmContact.model_validate(self._request("PUT", f"/contacts/{contact.id}", contact.to_wire()))

    def delete_contact(self, contact_id: int) -> None:
        self._request("DELETE", f"/contacts/{contact_id}")

    # Calendar events

    def list_events(self) -> list[CalendarEvent]:
        return _validate_rows(CalendarEvent, self._request("GET", "/events"))

    def get_event(self, event_id: int) -> CalendarEvent:
        return CalendarEvent.model_validate(self._request("GET", f"/events/{event_id}"))

    def create_event(self, event: CalendarEventFields) -> CalendarEvent:
        return CalendarEvent.model_validate(self._request("POST", "/events", _body(event)))

    def update_event(self, event: CalendarEvent) -> CalendarEvent:
        return CalendarEvent.model_validate(self._request("PUT", f"/events/{event.id}", event.to_wire()))

    def delete_event(self, event_id: int) -> None:
        self._request("DELETE", f"/events/{event_id}")

    # Settings and maintenance

    def get_settings(self) -> AppSettings:
        return AppSettings.model_validate(self._request("GET", "/settings"))

    def update_settings(self, app_settings: AppSettings) -> AppSettings:
        return AppSettings.model_validate(self._request("PUT", "/settings", app_settings.to_wire()))

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/health")

    def backup(self) -> dict[str, Any]:
        return self._request("GET", "/backup")

    def delete_all_data(self) -> None:
        self._request("DELETE", "/delete-all-data")


def _validate_rows(model: type[ModelT], rows: Any) -> list[ModelT]:
    """Validate a collection row by row; malformed rows are logged and skipped."""
    if not isinstance(rows, list):
        raise ApiError(f"Expected a list of {model.__name__} rows, got {type(rows).__name__}")
    items: list[ModelT] = []
    for row in rows:
        try:
            items.append(model.model_validate(row))
        except ValidationError as exc:
            row_id = row.get("id") if isinstance(row, dict) else None
            logger.warning("Skipping malformed %s id=%s: %s", model.__name__, row_id, exc)
    return items


def _body(model: Any) -> dict[str, Any]:
    payload = model.to_wire()
    payload.pop("id", None)
    return payload


def _error_detail(response: Any) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return str(body)
