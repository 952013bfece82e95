from __future__ import annotations

from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pathfinder.db.base import Base


class JobRecord(Base):
    __tablename__ = "jobs"
    __json_columns__ = ("contact_ids", "communication_log", "salary_info", "tags")
    __immutable_columns__ = ("date_added",)
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    company: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(40), default="Wishlist", nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    selected_resume_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cover_letter: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    source: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_added: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    application_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    contact_ids: Mapped[str | None] = mapped_column(Text, nullable=True)
    portfolio_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    communication_log: Mapped[str | None] = mapped_column(Text, nullable=True)
    questions_for_interviewer: Mapped[str | None] = mapped_column(Text, nullable=True)
    salary_info: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str | None] = mapped_column(String(20), default="Medium", nullable=True)
    interest_level: Mapped[int | None] = mapped_column(Integer, default=0, nullable=True)
    tags: Mapped[str | None] = mapped_column(Text, nullable=True)
    next_step: Mapped[str | None] = mapped_column(Text, nullable=True)
    next_step_date: Mapped[str | None] = mapped_column(String(10), nullable=True)


class ResumeRecord(Base):
    __tablename__ = "resumes"
    __json_columns__ = ("contact", "experience", "education", "custom_sections")
    __immutable_columns__ = ()
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    contact: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    experience: Mapped[str] = mapped_column(Text, nullable=False)
    education: Mapped[str] = mapped_column(Text, nullable=False)
    skills: Mapped[str | None] = mapped_column(Text, nullable=True)
    custom_sections: Mapped[str | None] = mapped_column(Text, nullable=True)


class ContactRecord(Base):
    __tablename__ = "contacts"
    __json_columns__ = ("tags",)
    __immutable_columns__ = ("date_added",)
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str | None] = mapped_column(Text, nullable=True)
    company: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    linkedin_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    source: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_added: Mapped[int] = mapped_column(BigInteger, nullable=False)
    tags: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_interaction: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)


class CalendarEventRecord(Base):
    __tablename__ = "calendar_events"
    __json_columns__ = ()
    __immutable_columns__ = ()
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    type: Mapped[str] = mapped_column(String(40), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    job_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    contact_id: Mapped[int | None] = mapped_column(Integer, nullable=True)


class SettingsRecord(Base):
    __tablename__ = "settings"
    __json_columns__ = ("profile", "subscription", "privacy", "prompts", "agents")
    __immutable_columns__ = ()

    # Singleton row; the id never changes.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    profile: Mapped[str | None] = mapped_column(Text, nullable=True)
    subscription: Mapped[str | None] = mapped_column(Text, nullable=True)
    privacy: Mapped[str | None] = mapped_column(Text, nullable=True)
    prompts: Mapped[str | None] = mapped_column(Text, nullable=True)
    agents: Mapped[str | None] = mapped_column(Text, nullable=True)
