from __future__ import annotations

import itertools
import logging
from collections.abc import Callable

from pathfinder.core.defaults import default_settings
from pathfinder.errors import OracleError
from pathfinder.llm.oracle import ChatSession, Oracle
from pathfinder.llm.templates import render_template, resume_as_text
from pathfinder.types import AppSettings, Job, Resume, TranscriptMessage

logger = logging.getLogger(__name__)

OPENING_MESSAGE = "Start the interview."
NEEDS_INPUT = "Please select a job (with a description) and a resume."
FAILURE_MESSAGE = "Sorry, I encountered an error. The interview will now end."

Speaker = Callable[[str], None]


class InterviewSession:
    """Voice mock interview over one chat session.

    Speech is injected: ``speak`` receives every interviewer line. The
    transcript lives only as long as this object.
    """

    def __init__(
        self,
        oracle: Oracle,
        app_settings: AppSettings | None = None,
        speak: Speaker | None = None,
    ):
        self.oracle = oracle
        self.app_settings = app_settings or default_settings()
        self.speak = speak or (lambda text: None)
        self.transcript: list[TranscriptMessage] = []
        self.error: str | None = None
        self._chat: ChatSession | None = None
        self._ids = itertools.count(1)

    @property
    def active(self) -> bool:
        return self._chat is not None

    def start(self, job: Job | None, resume: Resume | None) -> bool:
        if job is None or resume is None or not job.description:
            self.error = NEEDS_INPUT
            return False

        self.error = None
        self.transcript = []
        self._record("system", f"Starting interview for {job.title} at {job.company}...")

        system_prompt = render_template(
            self.app_settings.prompts.interview_questions,
            {
                "JOB_TITLE": job.title,
                "COMPANY": job.company,
                "JOB_DESCRIPTION": job.description,
                "RESUME_CONTENT": resume_as_text(resume),
            },
        )
        chat = self.oracle.chat(system_prompt)
        self._chat = chat
        logger.info("Mock interview started for job id=%s", job.id)
        self._send(chat, OPENING_MESSAGE)
        return self.active

    def respond(self, text: str) -> str | None:
        """Record the candidate's answer and return the interviewer's reply."""
        chat = self._chat
        if chat is None or not text.strip():
            return None
        self._record("user", text)
        return self._send(chat, text)

    def end(self) -> None:
        if self._chat is not None:
            logger.info("Mock interview ended after %d messages", len(self.transcript))
        self._chat = None

    def _send(self, chat: ChatSession, message: str) -> str | None:
        try:
            reply = chat.send(message)
        except OracleError:
            logger.exception("Interview turn failed")
            self._record("system", FAILURE_MESSAGE)
            self.speak(FAILURE_MESSAGE)
            self.end()
            return None

        self._record("ai", reply)
        self.speak(reply)
        return reply

    def _record(self, speaker: str, text: str) -> None:
        self.transcript.append(TranscriptMessage(id=next(self._ids), speaker=speaker, text=text))
