from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

JobStatus = Literal["Wishlist", "Applied", "Screening", "Interviewing", "Test Task", "Offer", "Rejection"]
Priority = Literal["Low", "Medium", "High"]
LogType = Literal["Email", "Call", "Message", "Meeting"]
EventType = Literal["Interview", "Deadline", "Task", "Networking", "Personal"]
ActionType = Literal["PREPARE", "FOLLOW_UP", "APPLY", "REVIEW", "GOAL", "ERROR"]

JOB_STATUSES: tuple[str, ...] = (
    "Wishlist",
    "Applied",
    "Screening",
    "Interviewing",
    "Test Task",
    "Offer",
    "Rejection",
)
APPLIED_STATUSES: frozenset[str] = frozenset(JOB_STATUSES) - {"Wishlist"}
INTERVIEW_STATUSES: frozenset[str] = frozenset({"Interviewing", "Test Task", "Offer"})


class CamelModel(BaseModel):
    """Wire models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    def to_record(self) -> dict[str, Any]:
        """Top-level keys as column names, nested values as they travel on the wire."""
        wire = self.to_wire()
        return {name: wire.get(field.alias or name) for name, field in type(self).model_fields.items()}


class NestedModel(CamelModel):
    # Nested blobs are opaque to the store, so unknown keys survive a round trip.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class LogEntry(NestedModel):
    id: int
    date: str = ""
    type: LogType = "Message"
    summary: str = ""


class SalaryInfo(NestedModel):
    range: str = ""
    expectations: str = ""
    discussed: str = ""


class JobFields(CamelModel):
    title: str = ""
    company: str = ""
    status: JobStatus = "Wishlist"
    description: str = ""
    selected_resume_id: int | None = None
    cover_letter: str | None = None
    location: str | None = None
    source_url: str | None = None
    source: str | None = None
    date_added: int | None = None
    application_date: str | None = None
    contact_ids: list[int] = Field(default_factory=list)
    portfolio_url: str | None = None
    communication_log: list[LogEntry] = Field(default_factory=list)
    questions_for_interviewer: str | None = None
    salary_info: SalaryInfo | None = None
    notes: str | None = None
    priority: Priority = "Medium"
    interest_level: int = 0
    tags: list[str] = Field(default_factory=list)
    next_step: str | None = None
    next_step_date: str | None = None


class Job(JobFields):
    id: int


class ResumeContact(NestedModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    website: str = ""


class WorkExperience(NestedModel):
    id: int
    role: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class Education(NestedModel):
    id: int
    institution: str = ""
    degree: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""


class CustomSection(NestedModel):
    id: int
    title: str = ""
    content: str = ""


class ResumeFields(CamelModel):
    name: str = ""
    contact: ResumeContact = Field(default_factory=ResumeContact)
    summary: str = ""
    experience: list[WorkExperience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: str = ""
    custom_sections: list[CustomSection] | None = None


class Resume(ResumeFields):
    id: int


class ContactFields(CamelModel):
    name: str = ""
    role: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    linkedin_url: str = ""
    source: str = ""
    notes: str = ""
    date_added: int | None = None
    tags: list[str] = Field(default_factory=list)
    last_interaction: int | None = None


class CrmContact(ContactFields):
    id: int


class CalendarEventFields(CamelModel):
    title: str = ""
    date: str = ""
    time: str | None = None
    type: EventType = "Task"
    notes: str | None = None
    job_id: int | None = None
    contact_id: int | None = None


class CalendarEvent(CalendarEventFields):
    id: int


class ProfileSettings(NestedModel):
    name: str = ""
    weekly_goal: int = 0
    master_skills: str = ""


class SubscriptionSettings(NestedModel):
    plan: Literal["Free", "Premium"] = "Free"
    status: Literal["Active", "Cancelled"] = "Active"
    next_billing_date: int | None = None


class PrivacySettings(NestedModel):
    share_anonymized_data: bool = False


class PromptSettings(NestedModel):
    cover_letter: str = ""
    mix_agents: str = ""
    resume_checker: str = ""
    interview_questions: str = ""


class ToolToggle(NestedModel):
    enabled: bool = False


class AgentSettings(NestedModel):
    name: str = ""
    prompt: str = ""
    tools: dict[str, ToolToggle] = Field(default_factory=dict)


class AppSettings(CamelModel):
    profile: ProfileSettings = Field(default_factory=ProfileSettings)
    subscription: SubscriptionSettings = Field(default_factory=SubscriptionSettings)
    privacy: PrivacySettings = Field(default_factory=PrivacySettings)
    prompts: PromptSettings = Field(default_factory=PromptSettings)
    agents: dict[str, AgentSettings] = Field(default_factory=dict)


class NextAction(BaseModel):
    suggestion_text: str
    action_type: ActionType
    job_id: int | None = None


class ResumeCheckResult(BaseModel):
    score: float = 0
    report: str = ""


class Attachment(BaseModel):
    """A file sent inline to the oracle."""

    filename: str = "attachment"
    mime_type: str
    data: str  # base64, no data-URL prefix


class ModelResponse(BaseModel):
    content: str
    raw: dict[str, Any] = Field(default_factory=dict)


class ChatMessage(BaseModel):
    sender: Literal["user", "ai", "error"]
    text: str
    file_name: str | None = None


class TranscriptMessage(BaseModel):
    id: int
    speaker: Literal["ai", "user", "system"]
    text: str
