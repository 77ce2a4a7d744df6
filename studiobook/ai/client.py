from __future__ import annotations

import json
from typing import Any, Optional

from openai import AsyncOpenAI

from studiobook.config import settings
from studiobook.exceptions import LLMContractError, LLMUpstreamError
from studiobook.logging_context import get_request_logger

logger = get_request_logger(__name__)


class StudioLLMClient:
    """
    OpenAI-backed client for the studio's AI helpers.

    Contract guarantees:
    - complete_json returns a parsed JSON object (dict)
    - complete_text returns non-empty stripped text
    - transcribe returns the non-empty transcript of an audio clip
    - Raises:
        LLMUpstreamError: networking/provider failures
        LLMContractError: empty output, invalid JSON or wrong shape
    """

    def __init__(self, client: Optional[Any] = None) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            try:
                self._client = AsyncOpenAI(api_key=settings.model.api_key or None)
            except Exception as e:
                raise LLMUpstreamError(f"OpenAI client unavailable: {e}") from e
        return self._client

    async def complete_json(self, system: str, prompt: str) -> dict[str, Any]:
        text = await self._call_text(system, prompt, use_json_mode=True)
        data = _parse_json(text)
        if not isinstance(data, dict):
            raise LLMContractError("Expected a JSON object.")
        return data

    async def complete_text(self, system: str, prompt: str) -> str:
        return await self._call_text(system, prompt, use_json_mode=False)

    async def transcribe(self, audio: bytes, mime_type: str, filename: str = "voice.webm") -> str:
        try:
            resp = await self.client.audio.transcriptions.create(
                model=settings.model.transcription_model,
                file=(filename, audio, mime_type),
            )
        except LLMUpstreamError:
            raise
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI transcription error: {e}") from e

        text = (getattr(resp, "text", "") or "").strip()
        if not text:
            raise LLMContractError("Transcription returned no speech.")
        logger.debug("Transcribed %d bytes of %s audio", len(audio), mime_type)
        return text

    async def _call_text(self, system: str, prompt: str, use_json_mode: bool) -> str:
        try:
            kwargs: dict[str, Any] = {
                "model": settings.model.llm_model,
                "messages": [
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                "temperature": settings.model.llm_temperature,
            }
            if use_json_mode:
                kwargs["response_format"] = {"type": "json_object"}

            resp = await self.client.chat.completions.create(**kwargs)
        except LLMUpstreamError:
            raise
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise LLMContractError("LLM returned empty response text.")
        return content


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        snippet = text[:200].replace("\n", " ")
        raise LLMContractError(f"Invalid JSON. Snippet: {snippet!r}") from None
