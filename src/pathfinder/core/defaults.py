from __future__ import annotations

from datetime import datetime, timezone

from pathfinder.llm.prompts import (
    COVER_LETTER_PROMPT,
    INTERVIEW_PROMPT,
    MIX_AGENTS_PROMPT,
    RESUME_CHECKER_PROMPT,
)
from pathfinder.types import (
    AgentSettings,
    AppSettings,
    PrivacySettings,
    ProfileSettings,
    PromptSettings,
    SubscriptionSettings,
    ToolToggle,
)

KNOWN_TOOLS: dict[str, str] = {
    "google_search": "Google Search",
    "linkedin_analysis": "LinkedIn Analysis",
}

DEFAULT_MASTER_SKILLS = (
    "JavaScript, HTML, CSS, React, Project Management, Agile Methodologies, "
    "UI/UX Design Principles, Figma, Public Speaking"
)

DEFAULT_NEXT_BILLING_DATE = int(datetime(2024, 8, 15, tzinfo=timezone.utc).timestamp() * 1000)


def _agent(name: str, prompt: str, *, google_search: bool, linkedin_analysis: bool) -> AgentSettings:
    return AgentSettings(
        name=name,
        prompt=prompt,
        tools={
            "google_search": ToolToggle(enabled=google_search),
            "linkedin_analysis": ToolToggle(enabled=linkedin_analysis),
        },
    )


def default_settings() -> AppSettings:
    """Settings served before the user has saved any of their own."""
    return AppSettings(
        profile=ProfileSettings(name="Alex Doe", weekly_goal=5, master_skills=DEFAULT_MASTER_SKILLS),
        subscription=SubscriptionSettings(
            plan="Premium",
            status="Active",
            next_billing_date=DEFAULT_NEXT_BILLING_DATE,
        ),
        privacy=PrivacySettings(share_anonymized_data=True),
        prompts=PromptSettings(
            cover_letter=COVER_LETTER_PROMPT,
            mix_agents=MIX_AGENTS_PROMPT,
            resume_checker=RESUME_CHECKER_PROMPT,
            interview_questions=INTERVIEW_PROMPT,
        ),
        agents={
            "recruiter": _agent(
                "Recruiter Agent",
                "Specializes in HR processes, resume optimization, and negotiation strategies.",
                google_search=False,
                linkedin_analysis=True,
            ),
            "research": _agent(
                "Research Agent",
                "Conducts deep analysis of companies, industries, and interviewers.",
                google_search=True,
                linkedin_analysis=True,
            ),
            "coach": _agent(
                "Coach Agent",
                "Acts as a personal career coach, helping with interview practice, "
                "salary negotiation, and long-term career planning.",
                google_search=False,
                linkedin_analysis=False,
            ),
        },
    )
