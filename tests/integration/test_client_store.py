from __future__ import annotations

import pytest
import requests

from pathfinder.client.api import ApiClient
from pathfinder.client.editors import new_contact, new_job, new_resume
from pathfinder.client.store import DataStore
from pathfinder.db.models import JobRecord
from pathfinder.db.session import SessionLocal
from pathfinder.errors import ApiError, NotFoundError, TransportError
from pathfinder.types import AppSettings, CalendarEventFields, Job, ProfileSettings


class FlakyApi:
    """Delegates to a real client but fails the named calls."""

    def __init__(self, api: ApiClient, *failing: str) -> None:
        self._api = api
        self._failing = set(failing)

    def __getattr__(self, name: str):
        if name in self._failing:
            def _fail(*args, **kwargs):
                raise ApiError(f"{name} failed", status_code=500)

            return _fail
        return getattr(self._api, name)


def test_api_client_maps_errors(api: ApiClient) -> None:
    with pytest.raises(NotFoundError, match="Job not found"):
        api.get_job(404)
    with pytest.raises(ApiError) as excinfo:
        api._request("POST", "/jobs", {"title": "A", "company": "B", "status": "Nope"})
    assert excinfo.value.status_code == 422
    assert api.delete_job(404) is None


def test_api_client_transport_error() -> None:
    with pytest.raises(TransportError):
        ApiClient("http://127.0.0.1:9/api", timeout=1).health()


def test_load_fetches_every_collection(api: ApiClient) -> None:
    api.create_job(new_job("Engineer", "Acme"))
    api.create_resume(new_resume())
    api.create_contact(new_contact())
    api.create_event(CalendarEventFields(title="Call", date="2026-01-02"))

    store = DataStore(api)
    assert store.ready is False
    store.load()

    assert store.ready is True
    assert [job.title for job in store.jobs] == ["Engineer"]
    assert store.resumes[0].name == "Untitled Resume"
    assert store.contacts[0].name == "New Contact"
    assert store.events[0].title == "Call"
    assert store.app_settings.profile.name == "Alex Doe"


def test_failed_collection_loads_as_empty(api: ApiClient) -> None:
    api.create_job(new_job("Engineer", "Acme"))
    api.create_contact(new_contact())

    store = DataStore(FlakyApi(api, "list_jobs", "get_settings"))
    store.load()

    assert store.ready is True
    assert store.jobs == []
    assert len(store.contacts) == 1
    assert store.app_settings.agents["coach"].name == "Coach Agent"


def test_mutations_apply_server_copy(api: ApiClient) -> None:
    store = DataStore(api)
    store.load()

    first = store.add_job(new_job("First", "Acme"))
    second = store.add_job(new_job("Second", "Globex"))
    assert [job.id for job in store.jobs] == [second.id, first.id]

    saved = store.update_job(first.model_copy(update={"status": "Applied", "date_added": 1}))
    assert saved.status == "Applied"
    assert saved.date_added == first.date_added
    assert store.jobs[1] == saved

    assert store.delete_job(second.id) is True
    assert [job.id for job in store.jobs] == [first.id]


def test_failed_mutations_leave_state_untouched(api: ApiClient) -> None:
    store = DataStore(api)
    store.load()
    job = store.add_job(new_job("Keep", "Acme"))

    flaky = DataStore(FlakyApi(api, "update_job", "delete_job", "create_job"))
    flaky.jobs = list(store.jobs)

    assert flaky.update_job(job.model_copy(update={"title": "Changed"})) is None
    assert flaky.delete_job(job.id) is False
    assert flaky.add_job(new_job("New", "Acme")) is None
    assert flaky.jobs == [job]

    gone = Job(id=9999, title="Ghost", company="Nowhere")
    assert store.update_job(gone) is None


def test_contact_update_stamps_last_interaction(api: ApiClient) -> None:
    store = DataStore(api)
    store.load()
    contact = store.add_contact(new_contact())

    saved = store.update_contact(contact.model_copy(update={"notes": "Followed up", "last_interaction": 1}))

    assert saved.notes == "Followed up"
    assert saved.last_interaction >= contact.last_interaction
    assert store.contacts == [saved]


def test_save_event_creates_then_updates(api: ApiClient) -> None:
    store = DataStore(api)
    store.load()

    created = store.save_event(CalendarEventFields(title="Prep", date="2026-02-01"))
    updated = store.save_event(created.model_copy(update={"time": "10:00"}))

    assert updated.id == created.id
    assert [event.time for event in store.events] == ["10:00"]
    assert store.delete_event(created.id) is True
    assert store.events == []


def test_update_settings_round_trip(api: ApiClient) -> None:
    store = DataStore(api)
    store.load()

    changed = store.app_settings.model_copy(update={"profile": ProfileSettings(name="Dana", weekly_goal=2)})
    saved = store.update_settings(changed)

    assert saved.profile.name == "Dana"
    assert DataStore(api).api.get_settings().profile.weekly_goal == 2
    assert isinstance(store.app_settings, AppSettings)


def test_reference_helpers_skip_dangling_ids(api: ApiClient) -> None:
    store = DataStore(api)
    store.load()
    contact = store.add_contact(new_contact())
    resume = store.add_resume(new_resume())
    job = store.add_job(new_job("Engineer", "Acme"))
    job = store.update_job(job.model_copy(update={"contact_ids": [contact.id, 777], "selected_resume_id": resume.id}))
    event = store.save_event(CalendarEventFields(title="Chat", date="2026-02-01", job_id=job.id, contact_id=555))

    assert store.contacts_for_job(job) == [contact]
    assert store.jobs_for_contact(contact.id) == [job]
    assert store.resume_for_job(job) == resume

    store.delete_contact(contact.id)
    assert store.contacts_for_job(job) == []
    assert store.job_for_event(event) == job
    assert store.contact_for_event(event) is None


class HtmlSession:
    """Answers every request like a dev server serving its index page."""

    def request(self, method: str, url: str, json=None, timeout=None) -> requests.Response:
        response = requests.Response()
        response.status_code = 200
        response._content = b"<!doctype html><html><body>app</body></html>"
        response.headers["Content-Type"] = "text/html"
        return response


def test_non_json_success_body_is_an_api_error() -> None:
    api = ApiClient("http://localhost:5173/api", session=HtmlSession())

    with pytest.raises(ApiError) as excinfo:
        api.list_jobs()
    assert excinfo.value.status_code == 200

    store = DataStore(api)
    store.load()

    assert store.ready is True
    assert store.jobs == []
    assert store.app_settings.profile.name == "Alex Doe"
    assert store.add_job(new_job("Engineer", "Acme")) is None


def test_row_with_raw_text_in_list_column_is_skipped(api: ApiClient) -> None:
    good = api.create_job(new_job("Engineer", "Acme"))
    bad = api.create_job(new_job("Analyst", "Globex"))
    with SessionLocal() as db:
        db.get(JobRecord, bad.id).tags = "remote, senior"
        db.commit()

    store = DataStore(api)
    store.load()

    assert [job.id for job in store.jobs] == [good.id]
    assert len(api.list_jobs()) == 1
