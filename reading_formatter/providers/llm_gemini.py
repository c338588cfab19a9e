from __future__ import annotations

import logging
import os
import time

import httpx

from reading_formatter.providers.base import LLMProvider

log = logging.getLogger("reading_formatter.llm")

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiProvider(LLMProvider):
    """Google AI Studio ``generateContent`` over plain HTTP."""

    def __init__(
        self,
        model: str = "gemini-2.5-flash",
        max_tokens: int = 4096,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = os.environ.get("GEMINI_API_KEY", "")
        self.model = model
        self.max_tokens = max_tokens
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def generate(self, prompt: str, temperature: float = 0.3, system: str | None = None) -> str:
        payload: dict = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": self.max_tokens,
            },
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}

        t0 = time.monotonic()
        resp = await self._client.post(
            f"{GEMINI_BASE_URL}/{self.model}:generateContent",
            params={"key": self.api_key},
            json=payload,
        )
        resp.raise_for_status()
        data = resp.json()
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise RuntimeError(f"Unexpected Gemini response: {resp.text[:200]}") from e
        log.info("── RESPONSE (%.1fs) ──", time.monotonic() - t0)
        return "".join(p.get("text", "") for p in parts)

    async def aclose(self) -> None:
        await self._client.aclose()

    def name(self) -> str:
        return f"gemini/{self.model}"
