"""Resume/job match reports.

The resume checker has returned several JSON shapes over time: a flat
``score`` or ``overall_match_percentage``, detail sections nested under
``transparent_analysis`` or at the top level, and recommendations as objects
or as bare ``missing_keywords`` strings. ``normalize_match`` folds all of them
into one ``MatchReport`` in which every optional section is either a
recognised variant or ``None``; ``render_match_report`` turns it into
markdown and marks absent sections as "Not provided by AI".
"""

from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, Field

NOT_PROVIDED = "Not provided by AI"


class JobRequirements(BaseModel):
    source: Literal["analysis", "skills"] = "analysis"
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    years_experience: Any = None
    education_required: str | None = None


class ResumeSummary(BaseModel):
    source: Literal["analysis", "skills"] = "analysis"
    total_experience_years: Any = None
    education_level: str | None = None
    current_job_title: str | None = None
    key_achievements: list[str] = Field(default_factory=list)
    matched_required: list[str] = Field(default_factory=list)
    unmatched_required: list[str] = Field(default_factory=list)


class Keyword(BaseModel):
    keyword: str = ""
    category: str = ""
    score: float = 0


class KeywordMatch(BaseModel):
    job_keyword: str = ""
    resume_keyword: str = ""
    match_score: float = 0


class KeywordAnalysis(BaseModel):
    total_job_keywords: Any = 0
    matched_keywords: Any = 0
    match_percentage: Any = 0
    job_keywords: list[Keyword] = Field(default_factory=list)
    resume_keywords: list[Keyword] = Field(default_factory=list)
    keyword_matches: list[KeywordMatch] = Field(default_factory=list)
    unmatched_job_keywords: list[str] = Field(default_factory=list)


class SkillsAnalysis(BaseModel):
    required_skills: list[str] = Field(default_factory=list)
    matched_required: list[str] = Field(default_factory=list)
    unmatched_required: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    matched_preferred: list[str] = Field(default_factory=list)
    unmatched_preferred: list[str] = Field(default_factory=list)


class Recommendation(BaseModel):
    priority: int | None = None
    action: str | None = None
    keyword_to_add: str | None = None
    reason: str | None = None


class MatchReport(BaseModel):
    score: float = 0
    breakdown: dict[str, float] = Field(default_factory=dict)
    job_requirements: JobRequirements | None = None
    resume_summary: ResumeSummary | None = None
    keyword_analysis: KeywordAnalysis | None = None
    skills_analysis: SkillsAnalysis | None = None
    recommendations: list[Recommendation] | None = None
    missing_keywords: list[str] | None = None


BREAKDOWN_LABELS = {
    "skills": "Skills Match",
    "experience": "Experience Match",
    "keywords": "Keywords Match",
    "education": "Education Match",
}


def _dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _text(value: Any) -> str | None:
    """Scalar or list as display text; empty values become None."""
    if isinstance(value, list):
        value = ", ".join(str(item) for item in value if item is not None)
    if value is None or isinstance(value, (dict, bool)):
        return None
    text = str(value).strip()
    return text or None


def normalize_match(data: dict[str, Any]) -> MatchReport:
    data = _dict(data)
    transparent = _dict(data.get("transparent_analysis"))
    top_skills = _dict(data.get("skills_analysis"))

    score = _number(data.get("overall_match_percentage") or data.get("score") or 0)

    breakdown: dict[str, float] = {}
    raw_breakdown = _dict(data.get("breakdown"))
    for key in BREAKDOWN_LABELS:
        value = raw_breakdown.get(f"{key}_score")
        if value is not None:
            breakdown[key] = _number(value)

    job_requirements: JobRequirements | None = None
    raw_requirements = _dict(transparent.get("job_requirements") or data.get("job_requirements"))
    if raw_requirements:
        job_requirements = JobRequirements(
            required_skills=_strings(raw_requirements.get("required_skills")),
            preferred_skills=_strings(raw_requirements.get("preferred_skills")),
            years_experience=raw_requirements.get("years_experience") or None,
            education_required=_text(raw_requirements.get("education_required")),
        )
    elif top_skills.get("required_skills") or top_skills.get("preferred_skills"):
        job_requirements = JobRequirements(
            source="skills",
            required_skills=_strings(top_skills.get("required_skills")),
            preferred_skills=_strings(top_skills.get("preferred_skills")),
        )

    resume_summary: ResumeSummary | None = None
    raw_summary = _dict(transparent.get("resume_summary") or data.get("resume_summary"))
    if raw_summary:
        resume_summary = ResumeSummary(
            total_experience_years=raw_summary.get("total_experience_years") or None,
            education_level=_text(raw_summary.get("education_level")),
            current_job_title=_text(raw_summary.get("current_job_title")),
            key_achievements=_strings(raw_summary.get("key_achievements")),
        )
    elif top_skills.get("matched_required") or top_skills.get("unmatched_required"):
        resume_summary = ResumeSummary(
            source="skills",
            matched_required=_strings(top_skills.get("matched_required")),
            unmatched_required=_strings(top_skills.get("unmatched_required")),
        )

    keyword_analysis: KeywordAnalysis | None = None
    raw_keywords = _dict(transparent.get("keyword_analysis") or data.get("keyword_analysis"))
    if raw_keywords:
        keyword_analysis = KeywordAnalysis(
            total_job_keywords=raw_keywords.get("total_job_keywords") or 0,
            matched_keywords=raw_keywords.get("matched_keywords") or 0,
            match_percentage=raw_keywords.get("match_percentage") or 0,
            job_keywords=[
                Keyword(
                    keyword=str(item.get("keyword", "")),
                    category=str(item.get("category", "")),
                    score=_number(item.get("importance_score")),
                )
                for item in raw_keywords.get("job_keywords") or []
                if isinstance(item, dict)
            ],
            resume_keywords=[
                Keyword(
                    keyword=str(item.get("keyword", "")),
                    category=str(item.get("category", "")),
                    score=_number(item.get("relevance_score")),
                )
                for item in raw_keywords.get("resume_keywords") or []
                if isinstance(item, dict)
            ],
            keyword_matches=[
                KeywordMatch(
                    job_keyword=str(item.get("job_keyword", "")),
                    resume_keyword=str(item.get("resume_keyword", "")),
                    match_score=_number(item.get("match_score")),
                )
                for item in raw_keywords.get("keyword_matches") or []
                if isinstance(item, dict)
            ],
            unmatched_job_keywords=_strings(raw_keywords.get("unmatched_job_keywords")),
        )

    skills_analysis: SkillsAnalysis | None = None
    raw_skills = _dict(transparent.get("skills_analysis")) or top_skills
    if raw_skills:
        skills_analysis = SkillsAnalysis(
            **{name: _strings(raw_skills.get(name)) for name in SkillsAnalysis.model_fields}
        )

    recommendations: list[Recommendation] | None = None
    missing_keywords: list[str] | None = None
    raw_recommendations = data.get("recommendations")
    if isinstance(raw_recommendations, list) and raw_recommendations:
        if isinstance(raw_recommendations[0], dict):
            recommendations = [
                Recommendation(
                    priority=int(_number(item.get("priority"))) or None,
                    action=_text(item.get("action")),
                    keyword_to_add=_text(item.get("keyword_to_add")),
                    reason=_text(item.get("reason")),
                )
                for item in raw_recommendations
                if isinstance(item, dict)
            ]
        else:
            missing_keywords = _strings(raw_recommendations)
    elif _strings(data.get("missing_keywords")):
        missing_keywords = _strings(data.get("missing_keywords"))

    return MatchReport(
        score=score,
        breakdown=breakdown,
        job_requirements=job_requirements,
        resume_summary=resume_summary,
        keyword_analysis=keyword_analysis,
        skills_analysis=skills_analysis,
        recommendations=recommendations,
        missing_keywords=missing_keywords,
    )


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _tier(score: float, high: float, mid: float) -> str:
    if score >= high:
        return "●"
    if score >= mid:
        return "○"
    return "·"


def _joined(items: list[str], empty: str) -> str:
    return ", ".join(items) if items else empty


def _render_summary(score: float) -> str:
    if score >= 80:
        return "**Excellent Match!** Your resume strongly aligns with this position."
    if score >= 60:
        return "**Good Match** Your resume has solid alignment with some room for improvement."
    if score >= 40:
        return "**Moderate Match** Your resume needs some adjustments to better align with this role."
    return "**Poor Match** Your resume requires significant updates to align with this position."


def _render_requirements(section: JobRequirements | None) -> list[str]:
    if section is None:
        return [f"**Job Requirements:** {NOT_PROVIDED}", ""]
    lines = [
        "**Job Requirements:**",
        f"Required: {_joined(section.required_skills, 'No required skills specified')}",
        f"Preferred: {_joined(section.preferred_skills, 'No preferred skills specified')}",
    ]
    if section.source == "analysis":
        experience = f"{section.years_experience} years" if section.years_experience else "Not specified"
        lines.append(f"Experience: {experience}")
        lines.append(f"Education: {section.education_required or 'Not specified'}")
    lines.append("")
    return lines


def _render_resume_summary(section: ResumeSummary | None) -> list[str]:
    if section is None:
        return [f"**Resume Summary:** {NOT_PROVIDED}", ""]
    lines = ["**Resume Summary:**"]
    if section.source == "skills":
        if section.matched_required:
            lines.append(f"Matched Required Skills: {', '.join(section.matched_required)}")
        if section.unmatched_required:
            lines.append(f"Missing Required Skills: {', '.join(section.unmatched_required)}")
    else:
        years = section.total_experience_years
        lines.append(f"Experience: {f'{years} years' if years else 'Not specified'}")
        lines.append(f"Education: {section.education_level or 'Not specified'}")
        lines.append(f"Current Role: {section.current_job_title or 'Not specified'}")
        lines.append(f"Key Achievements: {_joined(section.key_achievements, 'Not specified')}")
    lines.append("")
    return lines


def _render_keywords(section: KeywordAnalysis | None) -> list[str]:
    if section is None:
        return [f"**Keyword Analysis:** {NOT_PROVIDED}", ""]
    lines = [
        "**Keyword Analysis:**",
        f"Job Keywords: {section.total_job_keywords}",
        f"Matched Keywords: {section.matched_keywords}",
        f"Match Percentage: {section.match_percentage}%",
        "",
    ]

    lines.append("## Most Important Job Requirements")
    if section.job_keywords:
        lines.append("")
        for kw in section.job_keywords[:10]:
            lines.append(f"{_tier(kw.score, 7, 5)} **{kw.keyword}** ({kw.category})")
    else:
        lines.append(f"*{NOT_PROVIDED}*")
    lines.append("")

    lines.append("## Your Resume Highlights")
    if section.resume_keywords:
        lines.append("")
        for kw in section.resume_keywords[:10]:
            lines.append(f"{_tier(kw.score, 12, 8)} **{kw.keyword}** ({kw.category})")
    else:
        lines.append(f"*{NOT_PROVIDED}*")
    lines.append("")

    lines.append("## Strong Matches")
    if section.keyword_matches:
        lines.append("")
        for match in section.keyword_matches[:10]:
            lines.append(
                f"{_tier(match.match_score, 0.8, 0.6)} **{match.job_keyword}** <-> **{match.resume_keyword}**"
            )
    else:
        lines.append(f"*{NOT_PROVIDED}*")
    lines.append("")

    lines.append("## Missing Skills")
    if section.unmatched_job_keywords:
        lines.append("")
        lines.append("These skills are important for this role but missing from your resume:")
        lines.append("")
        lines.extend(f"● **{keyword}**" for keyword in section.unmatched_job_keywords)
    else:
        lines.append(f"*{NOT_PROVIDED}*")
    lines.append("")
    return lines


def _render_skills(section: SkillsAnalysis | None) -> list[str]:
    if section is None:
        return [f"**Skills Analysis:** {NOT_PROVIDED}", ""]
    lines = ["**Skills Analysis:**"]
    if section.required_skills:
        lines.append(f"Required Skills: {', '.join(section.required_skills)}")
        lines.append(f"Matched: {_joined(section.matched_required, 'None')}")
        lines.append(f"Missing: {_joined(section.unmatched_required, 'None')}")
    else:
        lines.append("Required Skills: Not specified")
    if section.preferred_skills:
        lines.append(f"Preferred Skills: {', '.join(section.preferred_skills)}")
        lines.append(f"Matched: {_joined(section.matched_preferred, 'None')}")
        lines.append(f"Missing: {_joined(section.unmatched_preferred, 'None')}")
    else:
        lines.append("Preferred Skills: Not specified")
    lines.append("")
    return lines


def _render_action_plan(report: MatchReport) -> list[str]:
    if report.recommendations:
        lines = ["## Action Plan", ""]
        for index, rec in enumerate(report.recommendations, start=1):
            marker = {1: "●", 2: "○"}.get(rec.priority or 0, "·")
            lines.append(f"### {marker} Priority {rec.priority or index}")
            lines.append(f"**{rec.action or 'No action specified'}**")
            lines.append("")
            if rec.keyword_to_add:
                lines.append(f"**Add to resume:** {rec.keyword_to_add}")
            if rec.reason:
                lines.append(f"**Why:** {rec.reason}")
            lines.append("")
        return lines

    if report.missing_keywords:
        lines = ["## Action Plan", "", "### Top Priorities", ""]
        for index, keyword in enumerate(report.missing_keywords[:5], start=1):
            lines.append(f'**{index}. Add "{keyword}" to your resume**')
            lines.append("This skill is highly valued for this position.")
            lines.append("")
        return lines

    return ["## Action Plan", "*No specific recommendations provided*", ""]


def render_match_report(report: MatchReport) -> str:
    lines = ["# Resume Analysis Report", "", f"## Overall Match: {_fmt(report.score)}%", ""]
    for key, label in BREAKDOWN_LABELS.items():
        if key in report.breakdown:
            lines.append(f"### {label}: {_fmt(report.breakdown[key])}%")
    lines.append("")
    lines.append(_render_summary(report.score))
    lines.append("")

    lines.extend(_render_requirements(report.job_requirements))
    lines.extend(_render_resume_summary(report.resume_summary))
    lines.extend(_render_keywords(report.keyword_analysis))
    lines.extend(_render_skills(report.skills_analysis))
    lines.extend(_render_action_plan(report))
    return "\n".join(lines).rstrip() + "\n"
