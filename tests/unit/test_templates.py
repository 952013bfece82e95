from __future__ import annotations

import logging

import pytest

from pathfinder.errors import OracleOutputError
from pathfinder.llm.oracle import extract_json
from pathfinder.llm.templates import render_template, resume_as_text
from pathfinder.types import CustomSection, Education, Resume, ResumeContact, WorkExperience


def test_render_template_replaces_every_occurrence() -> None:
    rendered = render_template(
        "{{JOB_DESCRIPTION}} / {{ RESUME_CONTENT }} / {{JOB_DESCRIPTION}}",
        {"JOB_DESCRIPTION": "Backend role", "RESUME_CONTENT": "CV"},
    )
    assert rendered == "Backend role / CV / Backend role"


def test_unknown_tokens_become_empty_and_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        rendered = render_template("Hello {{NAME}}{{UNKNOWN}}!", {"NAME": "Dana"})

    assert rendered == "Hello Dana!"
    assert "UNKNOWN" in caplog.text


def test_text_without_tokens_is_untouched() -> None:
    assert render_template("{not a token} {{lower}}", {}) == "{not a token} {{lower}}"


def test_resume_as_text_layout() -> None:
    resume = Resume(
        id=1,
        name="CV",
        contact=ResumeContact(name="Dana", email="dana@example.com"),
        summary="Builds things",
        skills="Python",
        experience=[WorkExperience(id=1, role="Engineer", company="Acme", start_date="2020", end_date="2024")],
        education=[Education(id=2, degree="BSc", institution="MIT", start_date="2016", end_date="2020")],
        custom_sections=[CustomSection(id=3, title="Talks", content="PyCon")],
    )

    text = resume_as_text(resume)

    assert text.startswith("Name: Dana\nEmail: dana@example.com\nPhone: \n")
    assert "SUMMARY:\nBuilds things\n\n" in text
    assert "Engineer at Acme (2020 - 2024)\n" in text
    assert "BSc from MIT (2016 - 2020)\n" in text
    assert text.endswith("TALKS:\nPyCon\n\n")


@pytest.mark.parametrize(
    "content",
    [
        '{"score": 1}',
        '```json\n{"score": 1}\n```',
        'Here you go:\n```\n{"score": 1}\n```\nThanks',
    ],
)
def test_extract_json_accepts_fenced_output(content: str) -> None:
    assert extract_json(content) == {"score": 1}


def test_extract_json_rejects_prose() -> None:
    with pytest.raises(OracleOutputError):
        extract_json("I could not analyse this resume.")
