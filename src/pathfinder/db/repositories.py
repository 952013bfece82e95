from __future__ import annotations

import logging
import time
from typing import Any, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from pathfinder.db.base import Base
from pathfinder.db.codec import encode_values, record_to_dict
from pathfinder.db.models import (
    CalendarEventRecord,
    ContactRecord,
    JobRecord,
    ResumeRecord,
    SettingsRecord,
)

logger = logging.getLogger(__name__)

SETTINGS_ID = 1

RecordT = TypeVar("RecordT", bound=Base)


def now_ms() -> int:
    return int(time.time() * 1000)


class Repository:
    def __init__(self, session: Session):
        self.session = session

    # Jobs

    def list_jobs(self) -> list[JobRecord]:
        statement = select(JobRecord).order_by(JobRecord.date_added.desc(), JobRecord.id.desc())
        return list(self.session.scalars(statement).all())

    def get_job(self, job_id: int) -> JobRecord | None:
        return self.session.get(JobRecord, job_id)

    def create_job(self, values: dict[str, Any]) -> JobRecord:
        values = dict(values)
        if values.get("date_added") is None:
            values["date_added"] = now_ms()
        return self._create(JobRecord, values)

    def update_job(self, job_id: int, values: dict[str, Any]) -> JobRecord | None:
        return self._replace(JobRecord, job_id, values)

    def delete_job(self, job_id: int) -> None:
        self._delete(JobRecord, job_id)

    # Resumes

    def list_resumes(self) -> list[ResumeRecord]:
        return list(self.session.scalars(select(ResumeRecord).order_by(ResumeRecord.id.desc())).all())

    def get_resume(self, resume_id: int) -> ResumeRecord | None:
        return self.session.get(ResumeRecord, resume_id)

    def create_resume(self, values: dict[str, Any]) -> ResumeRecord:
        return self._create(ResumeRecord, values)

    def update_resume(self, resume_id: int, values: dict[str, Any]) -> ResumeRecord | None:
        return self._replace(ResumeRecord, resume_id, values)

    def delete_resume(self, resume_id: int) -> None:
        self._delete(ResumeRecord, resume_id)

    # Contacts

    def list_contacts(self) -> list[ContactRecord]:
        statement = select(ContactRecord).order_by(
            ContactRecord.last_interaction.desc(), ContactRecord.id.desc()
        )
        return list(self.session.scalars(statement).all())

    def get_contact(self, contact_id: int) -> ContactRecord | None:
        return self.session.get(ContactRecord, contact_id)

    def create_contact(self, values: dict[str, Any]) -> ContactRecord:
        values = dict(values)
        if values.get("date_added") is None:
            values["date_added"] = now_ms()
        if values.get("last_interaction") is None:
            values["last_interaction"] = values["date_added"]
        return self._create(ContactRecord, values)

    def update_contact(self, contact_id: int, values: dict[str, Any]) -> ContactRecord | None:
        values = dict(values)
        if values.get("last_interaction") is None:
            values["last_interaction"] = now_ms()
        return self._replace(ContactRecord, contact_id, values)

    def delete_contact(self, contact_id: int) -> None:
        self._delete(ContactRecord, contact_id)

    # Calendar events

    def list_events(self) -> list[CalendarEventRecord]:
        statement = select(CalendarEventRecord).order_by(
            CalendarEventRecord.date.asc(), CalendarEventRecord.id.asc()
        )
        return list(self.session.scalars(statement).all())

    def get_event(self, event_id: int) -> CalendarEventRecord | None:
        return self.session.get(CalendarEventRecord, event_id)

    def create_event(self, values: dict[str, Any]) -> CalendarEventRecord:
        return self._create(CalendarEventRecord, values)

    def update_event(self, event_id: int, values: dict[str, Any]) -> CalendarEventRecord | None:
        return self._replace(CalendarEventRecord, event_id, values)

    def delete_event(self, event_id: int) -> None:
        self._delete(CalendarEventRecord, event_id)

    # Settings

    def get_settings(self) -> SettingsRecord | None:
        return self.session.get(SettingsRecord, SETTINGS_ID)

    def replace_settings(self, values: dict[str, Any]) -> SettingsRecord:
        """Upsert the singleton row with exactly the given sections; nothing is merged."""
        encoded = encode_values(SettingsRecord, values)
        record = self.session.get(SettingsRecord, SETTINGS_ID)
        if record is None:
            record = SettingsRecord(id=SETTINGS_ID)
            self.session.add(record)
        for column in SettingsRecord.__json_columns__:
            setattr(record, column, encoded.get(column))

        self.session.commit()
        self.session.refresh(record)
        return record

    # Whole-database operations

    def export_all(self) -> dict[str, Any]:
        settings = self.get_settings()
        settings_payload = record_to_dict(settings, skip_null=True) if settings else None
        if settings_payload is not None:
            settings_payload.pop("id", None)
        return {
            "jobs": [record_to_dict(row) for row in self.list_jobs()],
            "resumes": [record_to_dict(row) for row in self.list_resumes()],
            "contacts": [record_to_dict(row) for row in self.list_contacts()],
            "events": [record_to_dict(row) for row in self.list_events()],
            "settings": settings_payload,
        }

    def delete_all(self) -> None:
        for model in (JobRecord, ResumeRecord, ContactRecord, CalendarEventRecord, SettingsRecord):
            self.session.execute(delete(model))
        self.session.commit()
        logger.info("Deleted all stored data")

    # Shared helpers

    def _create(self, model: type[RecordT], values: dict[str, Any]) -> RecordT:
        encoded = encode_values(model, values)
        encoded.pop("id", None)
        record = model(**encoded)
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    def _replace(self, model: type[RecordT], record_id: int, values: dict[str, Any]) -> RecordT | None:
        record = self.session.get(model, record_id)
        if record is None:
            return None

        encoded = encode_values(model, values)
        immutable = set(getattr(model, "__immutable_columns__", ()))
        for column in model.__table__.columns:
            if column.primary_key or column.key in immutable:
                continue
            setattr(record, column.key, encoded.get(column.key))

        self.session.commit()
        self.session.refresh(record)
        return record

    def _delete(self, model: type[Base], record_id: int) -> None:
        self.session.execute(delete(model).where(model.id == record_id))
        self.session.commit()
