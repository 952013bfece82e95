from __future__ import annotations

import json
from datetime import date

from pathfinder.core.defaults import default_settings
from pathfinder.core.tools import (
    ANALYSIS_FAILED,
    COVER_LETTER_FAILED,
    DESCRIPTION_TOO_SHORT,
    EMPTY_COVER_LETTER,
    MISSING_EXPERIENCE,
    MISSING_RESUME,
    MISSING_SUMMARY,
    NEXT_ACTIONS_FAILED,
    RESEARCH_FAILED,
    RESEARCH_NEEDS_JOB,
    RESUME_CHECK_NEEDS_INPUT,
    SKILL_GAP_NEEDS_INPUT,
    CareerTools,
    format_long_date,
)
from pathfinder.errors import OracleError
from pathfinder.llm.prompts import NEXT_ACTIONS_SCHEMA
from pathfinder.types import CrmContact, Job, Resume, ResumeContact, WorkExperience

LONG_DESCRIPTION = "We are hiring a backend engineer to build payment APIs in Python and Postgres."


def _job(**overrides) -> Job:
    data = {
        "id": 5,
        "title": "Backend Engineer",
        "company": "Acme",
        "description": LONG_DESCRIPTION,
        "selected_resume_id": 2,
    }
    data.update(overrides)
    return Job(**data)


def _resume(**overrides) -> Resume:
    data = {
        "id": 2,
        "name": "Main",
        "contact": ResumeContact(name="Dana Doe", email="dana@example.com"),
        "summary": "Backend engineer with 6 years of experience.",
        "skills": "Python, SQL",
        "experience": [WorkExperience(id=1, role="Engineer", company="Globex")],
    }
    data.update(overrides)
    return Resume(**data)


def test_cover_letter_validation_messages(make_oracle) -> None:
    oracle = make_oracle()
    tools = CareerTools(oracle)

    assert tools.generate_cover_letter(_job(), None) == MISSING_RESUME
    assert tools.generate_cover_letter(_job(description="Short"), _resume()) == DESCRIPTION_TOO_SHORT
    assert tools.generate_cover_letter(_job(), _resume(summary="  ")) == MISSING_SUMMARY
    assert tools.generate_cover_letter(_job(), _resume(experience=[])) == MISSING_EXPERIENCE
    assert oracle.prompts == []


def test_cover_letter_prompt_carries_candidate_and_recipient(make_oracle) -> None:
    oracle = make_oracle("Dear Sam,\nI am excited...")
    tools = CareerTools(oracle)
    contacts = [CrmContact(id=9, name="Sam Lee", role="Hiring Manager")]

    text = tools.generate_cover_letter(
        _job(contact_ids=[9], source_url="https://jobs.example.com/1"),
        _resume(),
        contacts,
        today=date(2026, 3, 4),
    )

    assert text.startswith("Dear Sam")
    prompt = oracle.prompts[0]
    assert "{{JSON_DATA}}" not in prompt
    payload = json.loads(prompt[prompt.index("{") : prompt.rindex("}") + 1])
    assert payload["candidate"]["name"] == "Dana Doe"
    assert "Engineer at Globex" in payload["candidate"]["fullResumeContent"]
    assert payload["job"]["recipientName"] == "Sam Lee"
    assert payload["job"]["source"] == "https://jobs.example.com/1"
    assert payload["currentDate"] == "March 4, 2026"


def test_cover_letter_defaults_recipient_to_hiring_manager(make_oracle) -> None:
    oracle = make_oracle("Letter")
    CareerTools(oracle).generate_cover_letter(_job(contact_ids=[404]), _resume(), [], today=date(2026, 1, 1))

    assert '"recipientName": "Hiring Manager"' in oracle.prompts[0]
    assert '"source": "N/A"' in oracle.prompts[0]


def test_cover_letter_failures_become_text(make_oracle) -> None:
    tools = CareerTools(make_oracle("   ", OracleError("boom")))

    assert tools.generate_cover_letter(_job(), _resume()) == EMPTY_COVER_LETTER
    assert tools.generate_cover_letter(_job(), _resume()) == COVER_LETTER_FAILED


def test_check_resume_renders_report(make_oracle) -> None:
    reply = '```json\n{"score": 64, "recommendations": ["Docker"]}\n```'
    oracle = make_oracle(reply)

    result = CareerTools(oracle).check_resume(_job(), _resume())

    assert result.score == 64
    assert "## Overall Match: 64%" in result.report
    assert '"Docker"' in result.report
    assert LONG_DESCRIPTION in oracle.prompts[0]
    assert "SUMMARY:\nBackend engineer" in oracle.prompts[0]


def test_check_resume_needs_input_and_handles_bad_output(make_oracle) -> None:
    tools = CareerTools(make_oracle("not json", "[1, 2]"))

    assert tools.check_resume(None, _resume()).report == RESUME_CHECK_NEEDS_INPUT
    assert tools.check_resume(_job(description=""), _resume()).score == 0
    assert tools.check_resume(_job(), _resume()).report == ANALYSIS_FAILED
    assert tools.check_resume(_job(), _resume()).report == ANALYSIS_FAILED


def test_skill_gap_uses_master_skills(make_oracle) -> None:
    oracle = make_oracle("### Matching Skills\n- Python")
    tools = CareerTools(oracle)

    assert tools.analyze_skill_gap(_job()).startswith("### Matching Skills")
    assert "Project Management" in oracle.prompts[0]

    empty = default_settings()
    empty.profile.master_skills = ""
    assert tools.analyze_skill_gap(_job(), empty) == SKILL_GAP_NEEDS_INPUT
    assert tools.analyze_skill_gap(None) == SKILL_GAP_NEEDS_INPUT


def test_skill_gap_failure(make_oracle) -> None:
    assert CareerTools(make_oracle(OracleError("down"))).analyze_skill_gap(_job()) == ANALYSIS_FAILED


def test_next_actions_parses_structured_reply(make_oracle) -> None:
    oracle = make_oracle(
        {
            "actions": [
                {"suggestion_text": "Follow up with Acme", "action_type": "FOLLOW_UP", "job_id": 5},
                {"suggestion_text": "Apply to two roles", "action_type": "GOAL", "job_id": None},
            ]
        }
    )
    jobs = [_job(status="Applied", application_date="2026-03-01")]

    actions = CareerTools(oracle).suggest_next_actions(jobs, today=date(2026, 3, 4))

    assert [action.action_type for action in actions] == ["FOLLOW_UP", "GOAL"]
    assert actions[0].job_id == 5
    assert oracle.schemas == [NEXT_ACTIONS_SCHEMA]
    assert "2026-03-04" in oracle.prompts[0]
    assert "(ID: 5) Backend Engineer at Acme (Status: Applied, Applied: 2026-03-01" in oracle.prompts[0]
    assert "Applications This Week: 1" in oracle.prompts[0]


def test_next_actions_accepts_bare_list(make_oracle) -> None:
    oracle = make_oracle([{"suggestion_text": "Review resume", "action_type": "REVIEW"}])
    actions = CareerTools(oracle).suggest_next_actions([], today=date(2026, 3, 4))

    assert actions[0].job_id is None
    assert "No jobs yet." in oracle.prompts[0]


def test_next_actions_failure_yields_single_error_item(make_oracle) -> None:
    tools = CareerTools(make_oracle(OracleError("down"), {"actions": [{"action_type": "BOGUS"}]}))

    for _ in range(2):
        actions = tools.suggest_next_actions([], today=date(2026, 3, 4))
        assert len(actions) == 1
        assert actions[0].action_type == "ERROR"
        assert actions[0].suggestion_text == NEXT_ACTIONS_FAILED


def test_research_company(make_oracle) -> None:
    oracle = make_oracle("## Company Overview", OracleError("blocked"))
    tools = CareerTools(oracle)

    assert tools.research_company(None) == RESEARCH_NEEDS_JOB
    assert tools.research_company(_job(description="")) == "## Company Overview"
    assert "No detailed description provided." in oracle.prompts[0]
    assert tools.research_company(_job()) == RESEARCH_FAILED


def test_format_long_date() -> None:
    assert format_long_date(date(2026, 10, 9)) == "October 9, 2026"


def test_check_resume_survives_off_shape_json(make_oracle) -> None:
    tools = CareerTools(
        make_oracle(
            '{"overall_match_percentage": 70, "job_requirements": {"education_required": ["BS", "MS"]}}',
            '{"score": 50, "recommendations": [{"priority": NaN, "action": "x"}]}',
        )
    )

    first = tools.check_resume(_job(), _resume())
    second = tools.check_resume(_job(), _resume())

    assert first.score == 70
    assert "Education: BS, MS" in first.report
    assert second.score == 50
    assert "**x**" in second.report
