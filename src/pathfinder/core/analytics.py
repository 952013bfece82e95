from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Literal

from pathfinder.types import APPLIED_STATUSES, INTERVIEW_STATUSES, CalendarEvent, Job, Resume

WEEKS_OF_ACTIVITY = 8


@dataclass(slots=True)
class GoalProgress:
    recent_applications: int
    weekly_goal: int
    percent: float


@dataclass(slots=True)
class PipelineStats:
    applied_count: int
    interviewing_count: int
    offer_count: int
    applied_to_interview_rate: float
    interview_to_offer_rate: float


@dataclass(slots=True)
class WeeklyCount:
    week_start: date
    label: str
    count: int


@dataclass(slots=True)
class ResumePerformance:
    resume_id: int
    name: str
    applied: int
    interviews: int
    rate: float


@dataclass(slots=True)
class SourceEffectiveness:
    source: str
    applied: int
    interviews: int
    rate: float


@dataclass(slots=True)
class AgendaEntry:
    kind: Literal["job-application", "job-next-step", "event"]
    title: str
    time: str | None
    job: Job | None = None
    event: CalendarEvent | None = None


def parse_day(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def recent_applications(jobs: Iterable[Job], today: date) -> int:
    """Jobs applied to in the last seven days, today included."""
    week_ago = today - timedelta(days=7)
    count = 0
    for job in jobs:
        applied = parse_day(job.application_date)
        if applied is not None and applied >= week_ago:
            count += 1
    return count


def goal_progress(jobs: Sequence[Job], weekly_goal: int, today: date) -> GoalProgress:
    recent = recent_applications(jobs, today)
    percent = (recent / weekly_goal) * 100 if weekly_goal > 0 else 0.0
    return GoalProgress(recent_applications=recent, weekly_goal=weekly_goal, percent=percent)


def upcoming_next_steps(jobs: Iterable[Job], today: date, limit: int = 3) -> list[Job]:
    dated = [(parse_day(job.next_step_date), job) for job in jobs]
    upcoming = [(day, job) for day, job in dated if day is not None and day >= today]
    upcoming.sort(key=lambda item: item[0])
    return [job for _, job in upcoming[:limit]]


def pipeline_stats(jobs: Sequence[Job]) -> PipelineStats:
    applied = sum(1 for job in jobs if job.status in APPLIED_STATUSES)
    interviewing = sum(1 for job in jobs if job.status in INTERVIEW_STATUSES)
    offers = sum(1 for job in jobs if job.status == "Offer")
    return PipelineStats(
        applied_count=applied,
        interviewing_count=interviewing,
        offer_count=offers,
        applied_to_interview_rate=interviewing / applied if applied else 0.0,
        interview_to_offer_rate=offers / interviewing if interviewing else 0.0,
    )


def weekly_activity(jobs: Sequence[Job], today: date, weeks: int = WEEKS_OF_ACTIVITY) -> list[WeeklyCount]:
    """Applications per rolling seven-day window, oldest window first."""
    applied_days = [day for day in (parse_day(job.application_date) for job in jobs) if day is not None]
    windows: list[WeeklyCount] = []
    for offset in range(weeks):
        end = today - timedelta(days=offset * 7)
        start = end - timedelta(days=6)
        count = sum(1 for day in applied_days if start <= day <= end)
        windows.append(WeeklyCount(week_start=start, label=f"{start:%b} {start.day}", count=count))
    windows.reverse()
    return windows


def resume_performance(jobs: Iterable[Job], resumes: Iterable[Resume]) -> list[ResumePerformance]:
    names = {resume.id: resume.name for resume in resumes}
    stats: dict[int, ResumePerformance] = {}
    for job in jobs:
        if not job.selected_resume_id:
            continue
        entry = stats.get(job.selected_resume_id)
        if entry is None:
            entry = ResumePerformance(
                resume_id=job.selected_resume_id,
                name=names.get(job.selected_resume_id) or f"Resume ID {job.selected_resume_id}",
                applied=0,
                interviews=0,
                rate=0.0,
            )
            stats[job.selected_resume_id] = entry
        entry.applied += 1
        if job.status in INTERVIEW_STATUSES:
            entry.interviews += 1

    for entry in stats.values():
        entry.rate = entry.interviews / entry.applied if entry.applied else 0.0
    return sorted(stats.values(), key=lambda entry: entry.rate, reverse=True)


def source_effectiveness(jobs: Iterable[Job]) -> list[SourceEffectiveness]:
    stats: dict[str, SourceEffectiveness] = {}
    for job in jobs:
        if not job.source:
            continue
        entry = stats.setdefault(job.source, SourceEffectiveness(job.source, 0, 0, 0.0))
        entry.applied += 1
        if job.status in INTERVIEW_STATUSES:
            entry.interviews += 1

    for entry in stats.values():
        entry.rate = entry.interviews / entry.applied if entry.applied else 0.0
    return sorted(stats.values(), key=lambda entry: entry.rate, reverse=True)


def day_agenda(day: date | str, jobs: Iterable[Job], events: Iterable[CalendarEvent]) -> list[AgendaEntry]:
    """Everything happening on one day; timed events first, in time order."""
    key = day.isoformat() if isinstance(day, date) else day
    entries: list[AgendaEntry] = []
    for job in jobs:
        label = f"{job.title} at {job.company}"
        if job.application_date == key:
            entries.append(AgendaEntry(kind="job-application", title=f"Applied: {label}", time=None, job=job))
        if job.next_step_date == key:
            step = job.next_step or "Next step"
            entries.append(AgendaEntry(kind="job-next-step", title=f"{step}: {label}", time=None, job=job))
    for event in events:
        if event.date == key:
            entries.append(AgendaEntry(kind="event", title=event.title, time=event.time or None, event=event))

    # Stable sort keeps insertion order among untimed entries.
    entries.sort(key=lambda entry: (entry.time is None, entry.time or ""))
    return entries


def today_local() -> date:
    return datetime.now().date()
