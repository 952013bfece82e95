from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from pathfinder.types import Resume, ResumeFields

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\{\{\s*([A-Z0-9_]+)\s*\}\}")


def render_template(template: str, values: Mapping[str, str]) -> str:
    """Replace every {{TOKEN}} occurrence; tokens with no value become empty."""
    missing: set[str] = set()

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in values or values[name] is None:
            missing.add(name)
            return ""
        return str(values[name])

    rendered = TOKEN_PATTERN.sub(_substitute, template)
    if missing:
        logger.warning("Template tokens without a value: %s", ", ".join(sorted(missing)))
    return rendered


def resume_as_text(resume: Resume | ResumeFields) -> str:
    contact = resume.contact
    text = (
        f"Name: {contact.name}\nEmail: {contact.email}\nPhone: {contact.phone}\n"
        f"LinkedIn: {contact.linkedin}\nWebsite: {contact.website}\n\n"
    )
    text += f"SUMMARY:\n{resume.summary}\n\n"
    text += f"SKILLS:\n{resume.skills}\n\n"
    text += "EXPERIENCE:\n"
    for exp in resume.experience:
        text += f"{exp.role} at {exp.company} ({exp.start_date} - {exp.end_date})\n{exp.description}\n\n"
    text += "EDUCATION:\n"
    for edu in resume.education:
        text += f"{edu.degree} from {edu.institution} ({edu.start_date} - {edu.end_date})\n\n"
    for section in resume.custom_sections or []:
        text += f"{section.title.upper()}:\n{section.content}\n\n"
    return text
