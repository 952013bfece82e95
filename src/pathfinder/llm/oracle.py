from __future__ import annotations

import logging
from typing import Any

from pathfinder.config import Settings, get_settings
from pathfinder.errors import OracleError
from pathfinder.llm.providers import ChatTurn, LLMProvider, ProviderPool, extract_json
from pathfinder.types import Attachment

logger = logging.getLogger(__name__)

__all__ = ["ChatSession", "Oracle", "extract_json"]


class Oracle:
    """Request/response boundary to the generative-AI backend.

    Every failure of the underlying client surfaces as OracleError; callers
    turn it into user-facing placeholder text.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        provider: LLMProvider | None = None,
        model: str | None = None,
    ):
        self.settings = settings or get_settings()
        self._provider = provider
        self.model = model or self.settings.openai_model

    @property
    def provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = ProviderPool(self.settings).openai()
        return self._provider

    def generate(self, prompt: str, *, system: str | None = None, attachment: Attachment | None = None) -> str:
        attachments = [attachment] if attachment else []
        try:
            response = self.provider.complete_text(
                model=self.model,
                prompt=prompt,
                system=system,
                attachments=attachments,
            )
        except Exception as exc:
            logger.warning("Oracle call failed: %s", exc)
            raise OracleError(str(exc)) from exc
        return response.content

    def generate_structured(self, prompt: str, schema: dict[str, Any]) -> Any:
        try:
            return self.provider.complete_json(model=self.model, prompt=prompt, json_schema=schema)
        except OracleError:
            raise
        except Exception as exc:
            logger.warning("Structured oracle call failed: %s", exc)
            raise OracleError(str(exc)) from exc

    def chat(self, system_prompt: str) -> ChatSession:
        return ChatSession(self, system_prompt)


class ChatSession:
    """A conversation with a fixed system instruction; history lives here."""

    def __init__(self, oracle: Oracle, system_prompt: str):
        self.oracle = oracle
        self.system_prompt = system_prompt
        self.turns: list[ChatTurn] = []

    def send(self, message: str, attachment: Attachment | None = None) -> str:
        turn = ChatTurn(role="user", text=message, attachments=[attachment] if attachment else [])
        try:
            response = self.oracle.provider.complete_text(
                model=self.oracle.model,
                turns=[*self.turns, turn],
                system=self.system_prompt,
            )
        except Exception as exc:
            logger.warning("Chat turn failed: %s", exc)
            raise OracleError(str(exc)) from exc

        # Only completed exchanges enter the history.
        self.turns.append(turn)
        self.turns.append(ChatTurn(role="assistant", text=response.content))
        return response.content
