from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from pathfinder.api.deps import get_db
from pathfinder.api.schemas import (
    ContactPayload,
    EventPayload,
    HealthResponse,
    JobPayload,
    ResumePayload,
    SettingsPayload,
)
from pathfinder.core.defaults import default_settings
from pathfinder.db.codec import record_to_dict
from pathfinder.db.models import SettingsRecord
from pathfinder.db.repositories import Repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


def _settings_to_dict(record: SettingsRecord | None) -> dict[str, Any]:
    if record is None:
        return default_settings().to_wire()
    payload = record_to_dict(record, skip_null=True)
    payload.pop("id", None)
    return payload


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# Jobs


@router.get("/jobs")
def list_jobs(db: Session = Depends(get_db)) -> list[dict[str, Any]]:
    return [record_to_dict(row) for row in Repository(db).list_jobs()]


@router.get("/jobs/{job_id}")
def get_job(job_id: int, db: Session = Depends(get_db)) -> dict[str, Any]:
    job = Repository(db).get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return record_to_dict(job)


@router.post("/jobs", status_code=status.HTTP_201_CREATED)
def create_job(payload: JobPayload, db: Session = Depends(get_db)) -> dict[str, Any]:
    job = Repository(db).create_job(payload.to_record())
    logger.info("Created job id=%s title=%r", job.id, job.title)
    return record_to_dict(job)


@router.put("/jobs/{job_id}")
def update_job(job_id: int, payload: JobPayload, db: Session = Depends(get_db)) -> dict[str, Any]:
    job = Repository(db).update_job(job_id, payload.to_record())
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return record_to_dict(job)


@router.delete("/jobs/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job(job_id: int, db: Session = Depends(get_db)) -> Response:
    Repository(db).delete_job(job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Resumes


@router.get("/resumes")
def list_resumes(db: Session = Depends(get_db)) -> list[dict[str, Any]]:
    return [record_to_dict(row) for row in Repository(db).list_resumes()]


@router.get("/resumes/{resume_id}")
def get_resume(resume_id: int, db: Session = Depends(get_db)) -> dict[str, Any]:
    resume = Repository(db).get_resume(resume_id)
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")
    return record_to_dict(resume)


@router.post("/resumes", status_code=status.HTTP_201_CREATED)
def create_resume(payload: ResumePayload, db: Session = Depends(get_db)) -> dict[str, Any]:
    resume = Repository(db).create_resume(payload.to_record())
    logger.info("Created resume id=%s name=%r", resume.id, resume.name)
    return record_to_dict(resume)


@router.put("/resumes/{resume_id}")
def update_resume(resume_id: int, payload: ResumePayload, db: Session = Depends(get_db)) -> dict[str, Any]:
    resume = Repository(db).update_resume(resume_id, payload.to_record())
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")
    return record_to_dict(resume)


@router.delete("/resumes/{resume_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resume(resume_id: int, db: Session = Depends(get_db)) -> Response:
    Repository(db).delete_resume(resume_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Contacts


@router.get("/contacts")
def list_contacts(db: Session = Depends(get_db)) -> list[dict[str, Any]]:
    return [record_to_dict(row) for row in Repository(db).list_contacts()]


@router.get("/contacts/{contact_id}")
def get_contact(contact_id: int, db: Session = Depends(get_db)) -> dict[str, Any]:
    contact = Repository(db).get_contact(contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return record_to_dict(contact)


@router.post("/contacts", status_code=status.HTTP_201_CREATED)
def create_contact(payload: ContactPayload, db: Session = Depends(get_db)) -> dict[str, Any]:
    contact = Repository(db).create_contact(payload.to_record())
    logger.info("Created contact id=%s name=%r", contact.id, contact.name)
    return record_to_dict(contact)


@router.put("/contacts/{contact_id}")
def update_contact(contact_id: int, payload: ContactPayload, db: Session = Depends(get_db)) -> dict[str, Any]:
    contact = Repository(db).update_contact(contact_id, payload.to_record())
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return record_to_dict(contact)


@router.delete("/contacts/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contact(contact_id: int, db: Session = Depends(get_db)) -> Response:
    Repository(db).delete_contact(contact_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Calendar events


@router.get("/events")
def list_events(db: Session = Depends(get_db)) -> list[dict[str, Any]]:
    return [record_to_dict(row) for row in Repository(db).list_events()]


@router.get("/events/{event_id}")
def get_event(event_id: int, db: Session = Depends(get_db)) -> dict[str, Any]:
    event = Repository(db).get_event(event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return record_to_dict(event)


@router.post("/events", status_code=status.HTTP_201_CREATED)
def create_event(payload: EventPayload, db: Session = Depends(get_db)) -> dict[str, Any]:
    event = Repository(db).create_event(payload.to_record())
    logger.info("Created event id=%s date=%s", event.id, event.date)
    return record_to_dict(event)


@router.put("/events/{event_id}")
def update_event(event_id: int, payload: EventPayload, db: Session = Depends(get_db)) -> dict[str, Any]:
    event = Repository(db).update_event(event_id, payload.to_record())
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return record_to_dict(event)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, db: Session = Depends(get_db)) -> Response:
    Repository(db).delete_event(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Settings


@router.get("/settings")
def get_settings(db: Session = Depends(get_db)) -> dict[str, Any]:
    return _settings_to_dict(Repository(db).get_settings())


@router.put("/settings")
def update_settings(payload: SettingsPayload, db: Session = Depends(get_db)) -> dict[str, Any]:
    record = Repository(db).replace_settings(payload.to_record())
    return _settings_to_dict(record)


# Maintenance


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="OK", timestamp=_utc_now_iso())


@router.get("/backup")
def backup(db: Session = Depends(get_db)) -> dict[str, Any]:
    payload = Repository(db).export_all()
    payload["exportedAt"] = _utc_now_iso()
    return payload


@router.delete("/delete-all-data", status_code=status.HTTP_204_NO_CONTENT)
def delete_all_data(db: Session = Depends(get_db)) -> Response:
    Repository(db).delete_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
