from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from pathfinder.types import CalendarEventFields, CamelModel, ContactFields, JobFields, ResumeFields

# Request bodies reuse the entity field models; any "id" in the body is dropped.
JobPayload = JobFields
ResumePayload = ResumeFields
ContactPayload = ContactFields
EventPayload = CalendarEventFields


class SettingsPayload(CamelModel):
    """Whole-settings replacement; sections are stored exactly as sent."""

    profile: dict[str, Any] | None = None
    subscription: dict[str, Any] | None = None
    privacy: dict[str, Any] | None = None
    prompts: dict[str, Any] | None = None
    agents: dict[str, Any] | None = None


class HealthResponse(BaseModel):
    status: str
    timestamp: str
