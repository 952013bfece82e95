from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from datetime import date

from pydantic import ValidationError

from pathfinder.config import Settings, get_settings
from pathfinder.core.analytics import recent_applications, today_local
from pathfinder.core.defaults import default_settings
from pathfinder.core.match_report import normalize_match, render_match_report
from pathfinder.errors import OracleError
from pathfinder.llm.oracle import Oracle, extract_json
from pathfinder.llm.prompts import (
    COMPANY_RESEARCH_PROMPT,
    NEXT_ACTIONS_PROMPT,
    NEXT_ACTIONS_SCHEMA,
    SKILL_GAP_PROMPT,
)
from pathfinder.llm.templates import render_template, resume_as_text
from pathfinder.types import AppSettings, CrmContact, Job, NextAction, Resume, ResumeCheckResult

logger = logging.getLogger(__name__)

MISSING_RESUME = "Error: Please select an associated resume first."
DESCRIPTION_TOO_SHORT = (
    "Error: Job description is too short or missing. Please add a detailed job description first."
)
MISSING_SUMMARY = "Error: Resume summary is missing. Please add a summary to your resume first."
MISSING_EXPERIENCE = "Error: Resume has no work experience. Please add work experience to your resume first."
EMPTY_COVER_LETTER = "Error: Generated cover letter is empty. Please try again."
COVER_LETTER_FAILED = "Error: Could not generate cover letter. Please try again."

RESUME_CHECK_NEEDS_INPUT = "Please select a job (with a description) and a resume."
ANALYSIS_FAILED = "Error: Could not perform analysis. Please try again."

SKILL_GAP_NEEDS_INPUT = "Please select a job with a description and ensure your skills are listed in Settings."

NEXT_ACTIONS_FAILED = "Could not generate suggestions. Try refreshing."

RESEARCH_NEEDS_JOB = "Please select a job to research."
RESEARCH_FAILED = (
    "Error: Could not generate the research report. The topic may be restricted or another error "
    "occurred. Please try again."
)


def format_long_date(day: date) -> str:
    return f"{day:%B} {day.day}, {day.year}"


class CareerTools:
    """AI-backed helpers for the job search.

    Every method validates its inputs before calling the oracle and turns
    oracle failures into placeholder text, so callers never see an exception.
    """

    def __init__(
        self,
        oracle: Oracle,
        app_settings: AppSettings | None = None,
        settings: Settings | None = None,
    ):
        self.oracle = oracle
        self.app_settings = app_settings or default_settings()
        self.settings = settings or get_settings()

    def generate_cover_letter(
        self,
        job: Job,
        resume: Resume | None,
        contacts: Sequence[CrmContact] = (),
        *,
        today: date | None = None,
    ) -> str:
        if resume is None:
            return MISSING_RESUME
        if len((job.description or "").strip()) < self.settings.cover_letter_min_description:
            return DESCRIPTION_TOO_SHORT
        if not (resume.summary or "").strip():
            return MISSING_SUMMARY
        if not resume.experience:
            return MISSING_EXPERIENCE

        recipient = None
        if job.contact_ids:
            recipient = next((c for c in contacts if c.id == job.contact_ids[0]), None)

        data = {
            "candidate": {
                "name": resume.contact.name,
                "email": resume.contact.email,
                "phone": resume.contact.phone,
                "linkedin": resume.contact.linkedin,
                "website": resume.contact.website,
                "qualificationAndExperience": resume.summary,
                "fullResumeContent": resume_as_text(resume),
            },
            "job": {
                "position": job.title,
                "company": job.company,
                "source": job.source_url or job.source or "N/A",
                "fullDescription": job.description or "No description provided.",
                "recipientName": recipient.name if recipient else "Hiring Manager",
                "recipientRole": recipient.role if recipient else "",
                "companyAddress": job.location or "",
            },
            "currentDate": format_long_date(today or today_local()),
        }
        prompt = render_template(
            self.app_settings.prompts.cover_letter,
            {"JSON_DATA": json.dumps(data, indent=2, ensure_ascii=False)},
        )

        try:
            text = self.oracle.generate(prompt)
        except OracleError:
            logger.exception("Cover letter generation failed for job id=%s", getattr(job, "id", None))
            return COVER_LETTER_FAILED

        if not text or not text.strip():
            return EMPTY_COVER_LETTER
        return text

    def check_resume(self, job: Job | None, resume: Resume | None) -> ResumeCheckResult:
        if job is None or resume is None or not job.description:
            return ResumeCheckResult(score=0, report=RESUME_CHECK_NEEDS_INPUT)

        prompt = render_template(
            self.app_settings.prompts.resume_checker,
            {"JOB_DESCRIPTION": job.description, "RESUME_CONTENT": resume_as_text(resume)},
        )
        try:
            data = extract_json(self.oracle.generate(prompt))
        except OracleError:
            logger.exception("Resume check failed for job id=%s resume id=%s", job.id, resume.id)
            return ResumeCheckResult(score=0, report=ANALYSIS_FAILED)

        if not isinstance(data, dict):
            logger.warning("Resume check returned %s instead of an object", type(data).__name__)
            return ResumeCheckResult(score=0, report=ANALYSIS_FAILED)

        try:
            report = normalize_match(data)
            rendered = render_match_report(report)
        except (ValidationError, ValueError):
            logger.exception("Resume check returned an unusable report for job id=%s", job.id)
            return ResumeCheckResult(score=0, report=ANALYSIS_FAILED)
        return ResumeCheckResult(score=report.score, report=rendered)

    def analyze_skill_gap(self, job: Job | None, app_settings: AppSettings | None = None) -> str:
        app_settings = app_settings or self.app_settings
        master_skills = app_settings.profile.master_skills
        if job is None or not job.description or not master_skills:
            return SKILL_GAP_NEEDS_INPUT

        prompt = SKILL_GAP_PROMPT.format(master_skills=master_skills, description=job.description)
        try:
            return self.oracle.generate(prompt)
        except OracleError:
            logger.exception("Skill gap analysis failed for job id=%s", job.id)
            return ANALYSIS_FAILED

    def suggest_next_actions(
        self,
        jobs: Sequence[Job],
        app_settings: AppSettings | None = None,
        today: date | None = None,
    ) -> list[NextAction]:
        app_settings = app_settings or self.app_settings
        today = today or today_local()

        jobs_summary = "\n".join(
            f"- (ID: {job.id}) {job.title} at {job.company} (Status: {job.status}, "
            f"Applied: {job.application_date or 'N/A'}, Next Step Date: {job.next_step_date or 'N/A'})"
            for job in jobs
        )
        prompt = NEXT_ACTIONS_PROMPT.format(
            today=today.isoformat(),
            weekly_goal=app_settings.profile.weekly_goal,
            recent_applications=recent_applications(jobs, today),
            jobs_summary=jobs_summary or "No jobs yet.",
        )

        try:
            data = self.oracle.generate_structured(prompt, NEXT_ACTIONS_SCHEMA)
            items = data.get("actions", []) if isinstance(data, dict) else data
            if not isinstance(items, list):
                raise OracleError(f"Expected a list of actions, got {type(items).__name__}")
            return [NextAction.model_validate(item) for item in items]
        except (OracleError, ValidationError):
            logger.exception("Failed to generate next actions")
            return [NextAction(suggestion_text=NEXT_ACTIONS_FAILED, action_type="ERROR")]

    def research_company(self, job: Job | None) -> str:
        if job is None:
            return RESEARCH_NEEDS_JOB

        prompt = COMPANY_RESEARCH_PROMPT.format(
            title=job.title,
            company=job.company,
            description=job.description or "No detailed description provided.",
        )
        try:
            return self.oracle.generate(prompt)
        except OracleError:
            logger.exception("Company research failed for job id=%s", job.id)
            return RESEARCH_FAILED
