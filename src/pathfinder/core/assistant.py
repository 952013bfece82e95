from __future__ import annotations

import logging
from collections.abc import Sequence

from pathfinder.core.defaults import KNOWN_TOOLS, default_settings
from pathfinder.errors import OracleError
from pathfinder.llm.oracle import Oracle
from pathfinder.llm.prompts import SIMPLE_ASSISTANT_PROMPT
from pathfinder.types import AppSettings, Attachment, ChatMessage, Job, Resume

logger = logging.getLogger(__name__)

GREETING = "Hello! Use the tools above for specific tasks, or ask me a general question here."
FAILURE_MESSAGE = "Sorry, I encountered an error. Please try again."


def data_context(jobs: Sequence[Job], resumes: Sequence[Resume]) -> str:
    job_list = ", ".join(f"{job.title} at {job.company} (Status: {job.status})" for job in jobs)
    resume_list = ", ".join(resume.name for resume in resumes)
    return (
        "\n\n**USER'S DATA CONTEXT:**\n"
        f"- **Tracked Jobs**: {job_list or 'None'}.\n"
        f"- **Available Resumes**: {resume_list or 'None'}."
    )


def agent_descriptions(app_settings: AppSettings) -> str:
    lines = []
    for agent in app_settings.agents.values():
        tools = [KNOWN_TOOLS[tool_id] for tool_id, tool in agent.tools.items() if tool.enabled and tool_id in KNOWN_TOOLS]
        suffix = f"(Enabled Tools: {', '.join(tools)})" if tools else ""
        lines.append(f"\n- **{agent.name}**: {agent.prompt} {suffix}")
    return "".join(lines)


def build_system_instruction(
    app_settings: AppSettings,
    jobs: Sequence[Job],
    resumes: Sequence[Resume],
    *,
    mix_agents: bool,
) -> str:
    context = data_context(jobs, resumes)
    if mix_agents:
        return f"{app_settings.prompts.mix_agents}\n{agent_descriptions(app_settings)}{context}"
    return f"{SIMPLE_ASSISTANT_PROMPT}{context}"


class AssistantChat:
    """Free-form assistant; each message is a single request with fresh context."""

    def __init__(self, oracle: Oracle, app_settings: AppSettings | None = None, *, mix_agents: bool = False):
        self.oracle = oracle
        self.app_settings = app_settings or default_settings()
        self.mix_agents = mix_agents
        self.messages: list[ChatMessage] = [ChatMessage(sender="ai", text=GREETING)]

    def send(
        self,
        text: str,
        attachment: Attachment | None = None,
        *,
        jobs: Sequence[Job] = (),
        resumes: Sequence[Resume] = (),
    ) -> ChatMessage | None:
        if not text.strip() and attachment is None:
            return None

        self.messages.append(
            ChatMessage(sender="user", text=text, file_name=attachment.filename if attachment else None)
        )
        system = build_system_instruction(self.app_settings, jobs, resumes, mix_agents=self.mix_agents)
        try:
            reply = ChatMessage(sender="ai", text=self.oracle.generate(text, system=system, attachment=attachment))
        except OracleError:
            logger.exception("Assistant request failed")
            reply = ChatMessage(sender="error", text=FAILURE_MESSAGE)

        self.messages.append(reply)
        return reply
