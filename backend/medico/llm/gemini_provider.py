"""
Google Gemini LLM Provider.
Talks to the Generative Language REST API (generateContent) with httpx.
"""

import httpx
import logging
import time
from typing import Optional, List, Dict, Any

from .base import LLMProvider, LLMMessage, LLMResponse

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """
    Provider for Gemini models.

    Images travel as ``inline_data`` parts ahead of the text part, the
    system prompt as ``systemInstruction``, and structured output through
    ``generationConfig.responseSchema``.
    """

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        default_temperature: float = 0.7,
        default_max_tokens: int = 2048,
        timeout: float = 120.0,
    ):
        super().__init__(api_key, model, base_url, default_temperature, default_max_tokens, timeout)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

    def _format_messages(self, messages: List[LLMMessage]) -> List[Dict[str, Any]]:
        """Convert LLMMessage list to Gemini ``contents``."""
        contents = []
        for m in messages:
            parts: List[Dict[str, Any]] = [
                {"inline_data": {"mime_type": img.mime_type, "data": img.data}}
                for img in m.images
            ]
            parts.append({"text": m.text})
            role = "model" if m.role in ("model", "assistant") else "user"
            contents.append({"role": role, "parts": parts})
        return contents

    def _build_payload(
        self,
        messages: List[LLMMessage],
        system_instruction: Optional[str],
        response_schema: Optional[Dict[str, Any]],
        temperature: Optional[float],
        max_tokens: Optional[int],
    ) -> Dict[str, Any]:
        generation_config: Dict[str, Any] = {
            "temperature": temperature if temperature is not None else self.default_temperature,
            "maxOutputTokens": max_tokens or self.default_max_tokens,
        }
        if response_schema:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = response_schema

        payload: Dict[str, Any] = {
            "contents": self._format_messages(messages),
            "generationConfig": generation_config,
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        return payload

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> tuple:
        """Return (text, finish_reason) from a generateContent reply."""
        candidates = data.get("candidates") or []
        if not candidates:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason")
            return "", block_reason
        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        return text, candidate.get("finishReason")

    async def chat_completion(
        self,
        messages: List[LLMMessage],
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Send request to the generateContent endpoint."""
        start_time = time.time()
        model = kwargs.get("model", self.model)
        url = f"{self.base_url}/models/{model}:generateContent"
        payload = self._build_payload(messages, system_instruction, response_schema, temperature, max_tokens)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"LLM API call starting: provider=gemini, model={model}, "
                f"structured={bool(response_schema)}, {self._summarize(messages)}"
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json=payload, headers=self._get_headers())
                resp.raise_for_status()
                data = resp.json()

            content, finish_reason = self._extract_text(data)
            usage_meta = data.get("usageMetadata", {})
            usage = {
                "prompt_tokens": usage_meta.get("promptTokenCount", 0),
                "completion_tokens": usage_meta.get("candidatesTokenCount", 0),
                "total_tokens": usage_meta.get("totalTokenCount", 0),
            }
            duration_ms = (time.time() - start_time) * 1000

            logger.info(
                "LLM API call completed",
                extra={"extra_fields": {
                    "provider": "gemini",
                    "model": data.get("modelVersion", model),
                    "finish_reason": finish_reason,
                    **usage,
                    "duration_ms": round(duration_ms, 2),
                }}
            )

            return LLMResponse(
                content=content,
                model=data.get("modelVersion", model),
                usage=usage,
                finish_reason=finish_reason,
                raw=data,
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"LLM API call failed: {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "provider": "gemini",
                    "model": model,
                    "duration_ms": round(duration_ms, 2),
                    "error": str(e),
                }}
            )
            raise
