from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from openai import OpenAI

from pathfinder.config import Settings
from pathfinder.errors import OracleOutputError
from pathfinder.types import Attachment, ModelResponse

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProviderConfig:
    name: str
    base_url: str
    api_key: str
    timeout_sec: int


@dataclass(slots=True)
class ChatTurn:
    role: Literal["user", "assistant"]
    text: str
    attachments: list[Attachment] = field(default_factory=list)


class LLMProvider:
    def __init__(self, config: ProviderConfig):
        self.config = config
        self.client = OpenAI(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=float(config.timeout_sec),
        )

    def complete_text(
        self,
        *,
        model: str,
        prompt: str | None = None,
        turns: list[ChatTurn] | None = None,
        system: str | None = None,
        attachments: list[Attachment] | None = None,
        json_schema: dict[str, Any] | None = None,
    ) -> ModelResponse:
        """Run one completion over a single prompt or a whole conversation.

        The Responses API is tried first; providers that do not expose it
        (404) are served through chat.completions with the same inputs.
        """
        if turns is None:
            turns = [ChatTurn(role="user", text=prompt or "", attachments=list(attachments or []))]

        try:
            return self._complete_via_responses(model=model, turns=turns, system=system, json_schema=json_schema)
        except Exception as exc:
            if not self._is_unsupported_responses_endpoint(exc):
                raise

            logger.warning(
                "Responses API unavailable for provider=%s base_url=%s; "
                "falling back to chat.completions (%s)",
                self.config.name,
                self.config.base_url,
                exc,
            )
            return self._complete_via_chat_completions(
                model=model, turns=turns, system=system, json_schema=json_schema
            )

    def complete_json(
        self,
        *,
        model: str,
        prompt: str,
        json_schema: dict[str, Any] | None = None,
    ) -> Any:
        text_response = self.complete_text(model=model, prompt=prompt, json_schema=json_schema)
        return extract_json(text_response.content)

    def _complete_via_responses(
        self,
        *,
        model: str,
        turns: list[ChatTurn],
        system: str | None,
        json_schema: dict[str, Any] | None,
    ) -> ModelResponse:
        kwargs: dict[str, Any] = {"model": model, "input": [_responses_message(turn) for turn in turns]}
        if system:
            kwargs["instructions"] = system
        if json_schema is not None:
            kwargs["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": "structured_output",
                    "schema": json_schema,
                    "strict": True,
                }
            }

        response = self.client.responses.create(**kwargs)
        text = getattr(response, "output_text", "") or ""
        raw = response.model_dump() if hasattr(response, "model_dump") else {}
        if not isinstance(raw, dict):
            raw = {"raw": raw}
        raw["api_path"] = "responses"
        return ModelResponse(content=text, raw=raw)

    def _complete_via_chat_completions(
        self,
        *,
        model: str,
        turns: list[ChatTurn],
        system: str | None,
        json_schema: dict[str, Any] | None,
    ) -> ModelResponse:
        messages: list[dict[str, Any]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.extend(_chat_message(turn) for turn in turns)

        kwargs: dict[str, Any] = {"model": model, "messages": messages}
        if json_schema is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": "structured_output", "schema": json_schema, "strict": True},
            }

        response = self.client.chat.completions.create(**kwargs)

        text = self._extract_chat_text(response)
        raw = response.model_dump() if hasattr(response, "model_dump") else {}
        if not isinstance(raw, dict):
            raw = {"raw": raw}
        raw["api_path"] = "chat_completions"
        return ModelResponse(content=text, raw=raw)

    @staticmethod
    def _extract_chat_text(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""

        message = getattr(choices[0], "message", None)
        if message is None:
            return ""

        content = getattr(message, "content", "")
        if isinstance(content, str):
            return content
        if content is None:
            return ""
        return str(content)

    @staticmethod
    def _is_unsupported_responses_endpoint(exc: Exception) -> bool:
        status_code = getattr(exc, "status_code", None)
        if status_code == 404:
            return True

        message = str(exc).strip().lower()
        if not message:
            return False

        return "not found" in message or "404" in message


def _data_url(attachment: Attachment) -> str:
    return f"data:{attachment.mime_type};base64,{attachment.data}"


def _responses_message(turn: ChatTurn) -> dict[str, Any]:
    if turn.role == "assistant":
        return {"role": "assistant", "content": turn.text}

    content: list[dict[str, Any]] = []
    for attachment in turn.attachments:
        if attachment.mime_type.startswith("image/"):
            content.append({"type": "input_image", "image_url": _data_url(attachment)})
        else:
            content.append(
                {"type": "input_file", "filename": attachment.filename, "file_data": _data_url(attachment)}
            )
    content.append({"type": "input_text", "text": turn.text})
    return {"role": "user", "content": content}


def _chat_message(turn: ChatTurn) -> dict[str, Any]:
    if turn.role == "assistant" or not turn.attachments:
        return {"role": turn.role, "content": turn.text}

    content: list[dict[str, Any]] = []
    for attachment in turn.attachments:
        if attachment.mime_type.startswith("image/"):
            content.append({"type": "image_url", "image_url": {"url": _data_url(attachment)}})
        else:
            content.append(
                {"type": "file", "file": {"filename": attachment.filename, "file_data": _data_url(attachment)}}
            )
    content.append({"type": "text", "text": turn.text})
    return {"role": "user", "content": content}


def extract_json(content: str) -> Any:
    """Parse model output that may be wrapped in a ``` or ```json fence."""
    candidate = (content or "").strip()
    if "```" in candidate:
        for part in candidate.split("```"):
            part = part.strip()
            if part.startswith("json"):
                part = part[4:].strip()
            if part.startswith(("{", "[")):
                candidate = part
                break

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse JSON model output")
        raise OracleOutputError("Invalid JSON response from AI") from exc


class ProviderPool:
    def __init__(self, settings: Settings):
        self.settings = settings
        self._openai: LLMProvider | None = None

    def openai(self) -> LLMProvider:
        if self._openai is None:
            self._openai = LLMProvider(
                ProviderConfig(
                    name="openai",
                    base_url=self.settings.openai_base_url,
                    api_key=self.settings.openai_api_key,
                    timeout_sec=self.settings.openai_timeout_sec,
                )
            )
        return self._openai
