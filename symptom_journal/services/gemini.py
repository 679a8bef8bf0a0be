"""Thin async client for the Gemini ``generateContent`` endpoint.

One prompt in, one text out. No streaming, no history, no retries.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from symptom_journal.config import DEFAULT_GEMINI_BASE_URL, DEFAULT_GEMINI_MODEL, Settings
from symptom_journal.utils.exceptions import AIServiceError, ConfigError

logger = logging.getLogger("symptom_journal")


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        base_url: str = DEFAULT_GEMINI_BASE_URL,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not (api_key or "").strip():
            raise ConfigError("GEMINI_API_KEY is required")
        self.api_key = api_key.strip()
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "GeminiClient":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout_s=settings.gemini_timeout_s,
            **kwargs,
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def _payload(self, prompt: str, response_mime_type: Optional[str]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt.strip()}]}]}
        if response_mime_type:
            payload["generationConfig"] = {"responseMimeType": response_mime_type}
        return payload

    async def generate_content(self, prompt: str, response_mime_type: Optional[str] = None) -> str:
        """Send ``prompt`` and return the first candidate's text.

        Raises AIServiceError on transport errors, non-2xx responses and
        responses that carry no text.
        """
        logger.info({"function": "generate_content", "model": self.model, "stage": "ai_start", "chars": len(prompt)})
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                r = await client.post(
                    self.url,
                    params={"key": self.api_key},
                    headers={"Content-Type": "application/json"},
                    json=self._payload(prompt, response_mime_type),
                )
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPStatusError as e:
            logger.error({"function": "generate_content", "status": e.response.status_code})
            raise AIServiceError(f"Gemini returned HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error({"function": "generate_content", "error": type(e).__name__})
            raise AIServiceError("Gemini request failed") from e

        text = _first_text(data)
        if text is None:
            raise AIServiceError("Gemini response contained no text")
        logger.info({"function": "generate_content", "model": self.model, "stage": "ai_done", "chars": len(text)})
        return text


def _first_text(data: Any) -> Optional[str]:
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None
