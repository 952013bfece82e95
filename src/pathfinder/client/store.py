from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

from pydantic import ValidationError

from pathfinder.client.api import ApiClient
from pathfinder.config import Settings, get_settings
from pathfinder.core.defaults import default_settings
from pathfinder.errors import ApiError
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

EntityT = TypeVar("EntityT", Job, Resume, CrmContact, CalendarEvent)


def _merge(items: list[EntityT], saved: EntityT) -> list[EntityT]:
    """Replace the item with the same id, or append when it is new."""
    for index, item in enumerate(items):
        if item.id == saved.id:
            return [*items[:index], saved, *items[index + 1 :]]
    return [*items, saved]


class DataStore:
    """In-memory mirror of every collection the API serves.

    Mutations go to the server first; local state only changes once the
    server has answered, and always to the server's copy of the entity.
    Failures are logged and leave local state untouched.
    """

    def __init__(self, api: ApiClient, settings: Settings | None = None):
        self.api = api
        self.settings = settings or get_settings()
        self.jobs: list[Job] = []
        self.resumes: list[Resume] = []
        self.contacts: list[CrmContact] = []
        self.events: list[CalendarEvent] = []
        self.app_settings: AppSettings = default_settings()
        self.ready = False
        self._lock = threading.RLock()

    def load(self) -> None:
        loaders: dict[str, tuple[Callable[[], Any], Callable[[], Any]]] = {
            "jobs": (self.api.list_jobs, list),
            "resumes": (self.api.list_resumes, list),
            "contacts": (self.api.list_contacts, list),
            "events": (self.api.list_events, list),
            "app_settings": (self.api.get_settings, default_settings),
        }
        with ThreadPoolExecutor(max_workers=self.settings.initial_load_workers) as pool:
            futures = {name: pool.submit(fetch) for name, (fetch, _) in loaders.items()}

        results: dict[str, Any] = {}
        for name, future in futures.items():
            try:
                results[name] = future.result()
            except (ApiError, ValidationError) as exc:
                logger.warning("Initial load of %s failed, using empty data: %s", name, exc)
                results[name] = loaders[name][1]()

        with self._lock:
            for name, value in results.items():
                setattr(self, name, value)
            self.ready = True
        logger.info(
            "Loaded %d jobs, %d resumes, %d contacts, %d events",
            len(self.jobs),
            len(self.resumes),
            len(self.contacts),
            len(self.events),
        )

    # Jobs

    def add_job(self, job: JobFields) -> Job | None:
        try:
            saved = self.api.create_job(job)
        except (ApiError, ValidationError) as exc:
            logger.warning("Failed to add job: %s", exc)
            return None
        with self._lock:
            self.jobs = [saved, *self.jobs]
        return saved

    def update_job(self, job: Job) -> Job | None:
        try:
            saved = self.api.update_job(job)
        except (ApiError, ValidationError) as exc:
            logger.warning("Failed to update job id=%s: %s", job.id, exc)
            return None
        with self._lock:
            self.jobs = _merge(self.jobs, saved)
        return saved

    def delete_job(self, job_id: int) -> bool:
        try:
            self.api.delete_job(job_id)
        except ApiError as exc:
            logger.warning("Failed to delete job id=%s: %s", job_id, exc)
            return False
        with self._lock:
            self.jobs = [job for job in self.jobs if job.id != job_id]
        return True

    # Resumes

    def add_resume(self, resume: ResumeFields) -> Resume | None:
        try:
            saved = self.api.create_resume(resume)
        except (ApiError, ValidationError) as exc:
            logger.warning("Failed to add resume: %s", exc)
            return None
        with self._lock:
            self.resumes = [saved, *self.resumes]
        return saved

    def update_resume(self, resume: Resume) -> Resume | None:
        try:
            saved = self.api.update_resume(resume)
        except (ApiError, ValidationError) as exc:
            logger.warning("Failed to update resume id=%s: %s", resume.id, exc)
            return None
        with self._lock:
            self.resumes = _merge(self.resumes, saved)
        return saved

    def delete_resume(self, resume_id: int) -> bool:
        try:
            self.api.delete_resume(resume_id)
        except ApiError as exc:
            logger.warning("Failed to delete resume id=%s: %s", resume_id, exc)
            return False
        with self._lock:
            self.resumes = [resume for resume in self.resumes if resume.id != resume_id]
        return True

    # Contacts

    def add_contact(self, contact: ContactFields) -> CrmContact | None:
        try:
            saved = self.api.create_contact(contact)
        except (ApiError, ValidationError) as exc:
            logger.warning("Failed to add contact: %s", exc)
            return None
        with self._lock:
            self.contacts = [saved, *self.contacts]
        return saved

    def update_contact(self, contact: CrmContact) -> CrmContact | None:
        stamped = contact.model_copy(update={"last_interaction": int(time.time() * 1000)})
        try:
            saved = self.api.update_contact(stamped)
        except (ApiError, ValidationError) as exc:
            logger.warning("Failed to update contact id=%s: %s", contact.id, exc)
            return None
        with self._lock:
            self.contacts = _merge(self.contacts, saved)
        return saved

    def delete_contact(self, contact_id: int) -> bool:
        try:
            self.api.delete_contact(contact_id)
        except ApiError as exc:
            logger.warning("Failed to delete contact id=%s: %s", contact_id, exc)
            return False
        with self._lock:
            self.contacts = [contact for contact in self.contacts if contact.id != contact_id]
        return True

    # Calendar events

    def save_event(self, event: CalendarEventFields) -> CalendarEvent | None:
        event_id = getattr(event, "id", None)
        with self._lock:
            known = event_id is not None and any(item.id == event_id for item in self.events)
        try:
            if known:
                saved = self.api.update_event(event)  # type: ignore[arg-type]
            else:
                saved = self.api.create_event(event)
        except (ApiError, ValidationError) as exc:
            logger.warning("Failed to save event id=%s: %s", event_id, exc)
            return None
        with self._lock:
            self.events = _merge(self.events, saved)
        return saved

    def delete_event(self, event_id: int) -> bool:
        try:
            self.api.delete_event(event_id)
        except ApiError as exc:
            logger.warning("Failed to delete event id=%s: %s", event_id, exc)
            return False
        with self._lock:
            self.events = [event for event in self.events if event.id != event_id]
        return True

    # Settings

    def update_settings(self, app_settings: AppSettings) -> AppSettings | None:
        try:
            saved = self.api.update_settings(app_settings)
        except (ApiError, ValidationError) as exc:
            logger.warning("Failed to update settings: %s", exc)
            return None
        with self._lock:
            self.app_settings = saved
        return saved

    # References between collections; ids that no longer resolve are skipped.

    def contacts_for_job(self, job: Job) -> list[CrmContact]:
        by_id = {contact.id: contact for contact in self.contacts}
        return [by_id[contact_id] for contact_id in job.contact_ids if contact_id in by_id]

    def jobs_for_contact(self, contact_id: int) -> list[Job]:
        return [job for job in self.jobs if contact_id in job.contact_ids]

    def resume_for_job(self, job: Job) -> Resume | None:
        if job.selected_resume_id is None:
            return None
        return next((resume for resume in self.resumes if resume.id == job.selected_resume_id), None)

    def job_for_event(self, event: CalendarEvent) -> Job | None:
        if event.job_id is None:
            return None
        return next((job for job in self.jobs if job.id == event.job_id), None)

    def contact_for_event(self, event: CalendarEvent) -> CrmContact | None:
        if event.contact_id is None:
            return None
        return next((contact for contact in self.contacts if contact.id == event.contact_id), None)
