"""Draft-holding editors for the client.

Resumes, contacts and settings are edited in place: every change updates
the draft at once and a debounced save sends the latest draft after a quiet
period. Jobs and calendar events are edited in modal forms that only save
when asked to.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from pathfinder.client.debounce import Debouncer, Scheduler
from pathfinder.config import Settings, get_settings
from pathfinder.types import (
    AppSettings,
    CalendarEvent,
    CalendarEventFields,
    ContactFields,
    CrmContact,
    CustomSection,
    Education,
    Job,
    JobFields,
    LogEntry,
    Resume,
    ResumeContact,
    ResumeFields,
    SalaryInfo,
    ToolToggle,
    WorkExperience,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

TITLE_REQUIRED = "Title is required."


def now_ms() -> int:
    return int(time.time() * 1000)


def unique_time_id(existing: Iterable[int]) -> int:
    """A millisecond timestamp, bumped until it collides with nothing in ``existing``."""
    taken = set(existing)
    candidate = now_ms()
    while candidate in taken:
        candidate += 1
    return candidate


def _replace_item(items: Sequence[ModelT], item_id: int, changes: dict[str, Any]) -> list[ModelT]:
    return [item.model_copy(update=changes) if item.id == item_id else item for item in items]  # type: ignore[attr-defined]


class DebouncedEditor(Generic[ModelT]):
    def __init__(
        self,
        save: Callable[[ModelT], Any],
        window_ms: int,
        scheduler: Scheduler | None = None,
    ):
        self.save = save
        self.draft: ModelT | None = None
        self._debouncer: Debouncer[ModelT] = Debouncer(window_ms, self._commit, scheduler)

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def select(self, entity: ModelT | None) -> None:
        """Start editing another entity; an unsent save for the previous one is dropped."""
        self._debouncer.cancel()
        self.draft = entity.model_copy(deep=True) if entity is not None else None

    def save_now(self) -> None:
        """Send a pending save immediately instead of waiting out the window."""
        self._debouncer.flush()

    def close(self) -> None:
        self._debouncer.cancel()

    def _require_draft(self) -> ModelT:
        if self.draft is None:
            raise RuntimeError("No entity selected")
        return self.draft

    def _update(self, **changes: Any) -> None:
        self.draft = self._require_draft().model_copy(update=changes)
        self._debouncer.trigger(self.draft.model_copy(deep=True))

    def _commit(self, draft: ModelT) -> None:
        self.save(draft)


class ResumeEditor(DebouncedEditor[Resume]):
    def __init__(
        self,
        save: Callable[[Resume], Any],
        scheduler: Scheduler | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        super().__init__(save, settings.resume_debounce_ms, scheduler)

    def set_field(self, name: str, value: Any) -> None:
        if name not in {"name", "summary", "skills"}:
            raise ValueError(f"Unknown resume field: {name}")
        self._update(**{name: value})

    def set_contact_field(self, key: str, value: str) -> None:
        draft = self._require_draft()
        contact: ResumeContact = draft.contact.model_copy(update={key: value})
        self._update(contact=contact)

    def _all_entry_ids(self) -> list[int]:
        draft = self._require_draft()
        sections = draft.custom_sections or []
        return [item.id for item in [*draft.experience, *draft.education, *sections]]

    def add_experience(self) -> int:
        draft = self._require_draft()
        entry = WorkExperience(id=unique_time_id(self._all_entry_ids()))
        self._update(experience=[*draft.experience, entry])
        return entry.id

    def update_experience(self, entry_id: int, **changes: Any) -> None:
        draft = self._require_draft()
        self._update(experience=_replace_item(draft.experience, entry_id, changes))

    def remove_experience(self, entry_id: int) -> None:
        draft = self._require_draft()
        self._update(experience=[item for item in draft.experience if item.id != entry_id])

    def add_education(self) -> int:
        draft = self._require_draft()
        entry = Education(id=unique_time_id(self._all_entry_ids()))
        self._update(education=[*draft.education, entry])
        return entry.id

    def update_education(self, entry_id: int, **changes: Any) -> None:
        draft = self._require_draft()
        self._update(education=_replace_item(draft.education, entry_id, changes))

    def remove_education(self, entry_id: int) -> None:
        draft = self._require_draft()
        self._update(education=[item for item in draft.education if item.id != entry_id])

    def add_custom_section(self, title: str = "New Section") -> int:
        draft = self._require_draft()
        entry = CustomSection(id=unique_time_id(self._all_entry_ids()), title=title)
        self._update(custom_sections=[*(draft.custom_sections or []), entry])
        return entry.id

    def update_custom_section(self, entry_id: int, **changes: Any) -> None:
        draft = self._require_draft()
        self._update(custom_sections=_replace_item(draft.custom_sections or [], entry_id, changes))

    def remove_custom_section(self, entry_id: int) -> None:
        draft = self._require_draft()
        sections = [item for item in draft.custom_sections or [] if item.id != entry_id]
        self._update(custom_sections=sections)


class ContactEditor(DebouncedEditor[CrmContact]):
    def __init__(
        self,
        save: Callable[[CrmContact], Any],
        scheduler: Scheduler | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        super().__init__(save, settings.contact_debounce_ms, scheduler)

    def set_field(self, name: str, value: Any) -> None:
        if name in {"id", "date_added", "last_interaction", "tags"}:
            raise ValueError(f"Field cannot be edited directly: {name}")
        self._update(**{name: value})

    def add_tag(self, tag: str) -> bool:
        draft = self._require_draft()
        tag = tag.strip()
        if not tag or tag in draft.tags:
            return False
        self._update(tags=[*draft.tags, tag])
        return True

    def remove_tag(self, tag: str) -> None:
        draft = self._require_draft()
        self._update(tags=[item for item in draft.tags if item != tag])

    def linked_jobs(self, jobs: Iterable[Job]) -> list[Job]:
        if self.draft is None:
            return []
        return [job for job in jobs if self.draft.id in job.contact_ids]


class SettingsEditor(DebouncedEditor[AppSettings]):
    def __init__(
        self,
        save: Callable[[AppSettings], Any],
        scheduler: Scheduler | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        super().__init__(save, settings.settings_debounce_ms, scheduler)

    def set_section_field(self, section: str, key: str, value: Any) -> None:
        draft = self._require_draft()
        if section not in {"profile", "subscription", "privacy", "prompts"}:
            raise ValueError(f"Unknown settings section: {section}")
        current: BaseModel = getattr(draft, section)
        self._update(**{section: current.model_copy(update={key: value})})

    def set_prompt(self, key: str, value: str) -> None:
        self.set_section_field("prompts", key, value)

    def toggle_agent_tool(self, agent_key: str, tool_id: str) -> bool:
        draft = self._require_draft()
        agent = draft.agents[agent_key]
        current = agent.tools.get(tool_id, ToolToggle())
        toggled = current.model_copy(update={"enabled": not current.enabled})
        updated = agent.model_copy(update={"tools": {**agent.tools, tool_id: toggled}})
        self._update(agents={**draft.agents, agent_key: updated})
        return toggled.enabled

    def set_agent_field(self, agent_key: str, key: str, value: str) -> None:
        draft = self._require_draft()
        if key not in {"name", "prompt"}:
            raise ValueError(f"Unknown agent field: {key}")
        agent = draft.agents[agent_key].model_copy(update={key: value})
        self._update(agents={**draft.agents, agent_key: agent})


class ModalForm(Generic[ModelT]):
    """Explicit-save form: nothing reaches the server until ``save``."""

    def __init__(
        self,
        draft: ModelT,
        on_save: Callable[[ModelT], Any],
        on_delete: Callable[[int], Any] | None = None,
    ):
        self.draft = draft
        self.on_save = on_save
        self.on_delete = on_delete
        self.closed = False

    def set_field(self, name: str, value: Any) -> None:
        self.draft = self.draft.model_copy(update={name: value})

    def save(self) -> Any:
        if self.closed:
            return None
        result = self.on_save(self.draft)
        self.closed = True
        return result

    def cancel(self) -> None:
        self.closed = True

    def handle_key(self, key: str) -> None:
        if key == "Escape":
            self.cancel()

    def delete(self) -> None:
        if self.closed:
            return
        entity_id = getattr(self.draft, "id", None)
        self.closed = True
        if entity_id is not None and self.on_delete is not None:
            self.on_delete(entity_id)


class JobForm(ModalForm[Job]):
    def __init__(
        self,
        job: Job,
        on_save: Callable[[Job], Any],
        on_delete: Callable[[int], Any] | None = None,
    ):
        super().__init__(job.model_copy(deep=True), on_save, on_delete)

    def set_salary_field(self, key: str, value: str) -> None:
        salary = self.draft.salary_info or SalaryInfo()
        self.draft = self.draft.model_copy(update={"salary_info": salary.model_copy(update={key: value})})

    def add_tag(self, tag: str) -> bool:
        tag = tag.strip()
        if not tag or tag in self.draft.tags:
            return False
        self.set_field("tags", [*self.draft.tags, tag])
        return True

    def remove_tag(self, tag: str) -> None:
        self.set_field("tags", [item for item in self.draft.tags if item != tag])

    def add_contact(self, contact_id: int) -> None:
        if contact_id not in self.draft.contact_ids:
            self.set_field("contact_ids", [*self.draft.contact_ids, contact_id])

    def remove_contact(self, contact_id: int) -> None:
        self.set_field("contact_ids", [item for item in self.draft.contact_ids if item != contact_id])

    def add_log(self, *, log_type: str = "Message", summary: str = "", day: date | None = None) -> int:
        entry = LogEntry(
            id=unique_time_id(item.id for item in self.draft.communication_log),
            date=(day or date.today()).isoformat(),
            type=log_type,
            summary=summary,
        )
        self.set_field("communication_log", [*self.draft.communication_log, entry])
        return entry.id

    def update_log(self, entry_id: int, **changes: Any) -> None:
        self.set_field("communication_log", _replace_item(self.draft.communication_log, entry_id, changes))

    def remove_log(self, entry_id: int) -> None:
        self.set_field("communication_log", [item for item in self.draft.communication_log if item.id != entry_id])

    def generate_cover_letter(self, service: Any, resumes: Sequence[Resume], contacts: Sequence[CrmContact]) -> str:
        """Fill the cover letter from the AI tools; failures land in the field as text."""
        resume = next((item for item in resumes if item.id == self.draft.selected_resume_id), None)
        text = service.generate_cover_letter(self.draft, resume, contacts)
        self.set_field("cover_letter", text)
        return text


class EventForm(ModalForm[CalendarEventFields]):
    def __init__(
        self,
        on_save: Callable[[CalendarEventFields], Any],
        on_delete: Callable[[int], Any] | None = None,
        *,
        event: CalendarEvent | None = None,
        day: date | str | None = None,
    ):
        if event is not None:
            draft: CalendarEventFields = event.model_copy(deep=True)
        else:
            day = day or date.today()
            draft = CalendarEventFields(date=day.isoformat() if isinstance(day, date) else day, type="Task")
        super().__init__(draft, on_save, on_delete)
        self.error: str | None = None

    @property
    def is_new(self) -> bool:
        return not isinstance(self.draft, CalendarEvent)

    def save(self) -> Any:
        if self.closed:
            return None
        if not self.draft.title.strip():
            self.error = TITLE_REQUIRED
            return TITLE_REQUIRED
        self.error = None
        return super().save()


def new_job(title: str, company: str) -> JobFields | None:
    """Payload for the quick add-job form; new jobs always start on the wishlist."""
    title, company = title.strip(), company.strip()
    if not title or not company:
        return None
    return JobFields(
        title=title,
        company=company,
        status="Wishlist",
        description="",
        notes="",
        cover_letter="",
        date_added=now_ms(),
        location="",
        source_url="",
        source="Other",
        application_date="",
        portfolio_url="",
        questions_for_interviewer="",
        salary_info=SalaryInfo(),
        priority="Medium",
        interest_level=0,
        next_step="",
        next_step_date="",
    )


def new_resume() -> ResumeFields:
    return ResumeFields(name="Untitled Resume", custom_sections=[])


def duplicate_resume(resume: Resume) -> ResumeFields:
    data = resume.model_dump(exclude={"id"})
    data["name"] = f"{resume.name} (Copy)"
    return ResumeFields.model_validate(data)


def new_contact() -> ContactFields:
    stamp = now_ms()
    return ContactFields(name="New Contact", date_added=stamp, last_interaction=stamp)
