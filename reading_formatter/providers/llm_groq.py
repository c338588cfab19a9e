from __future__ import annotations

import os

from reading_formatter.providers.llm_openai import OpenAIProvider

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class GroqProvider(OpenAIProvider):
    """Groq serves an OpenAI-compatible chat completions endpoint."""

    def __init__(self, model: str = "llama-3.3-70b-versatile", max_tokens: int = 4096, timeout: float = 120.0):
        super().__init__(
            model=model,
            max_tokens=max_tokens,
            timeout=timeout,
            api_key=os.environ.get("GROQ_API_KEY", ""),
            base_url=GROQ_BASE_URL,
        )

    def name(self) -> str:
        return f"groq/{self.model}"
