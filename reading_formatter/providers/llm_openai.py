from __future__ import annotations

import os

from reading_formatter.providers.base import LLMProvider


def _chat_messages(prompt: str, system: str | None) -> list[dict]:
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    return messages


class OpenAIProvider(LLMProvider):
    def __init__(
        self,
        model: str = "gpt-4o-mini",
        max_tokens: int = 4096,
        timeout: float = 120.0,
        api_key: str | None = None,
        base_url: str | None = None,
    ):
        import openai
        self.client = openai.AsyncOpenAI(
            api_key=api_key if api_key is not None else os.environ.get("OPENAI_API_KEY", ""),
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )
        self.model = model
        self.max_tokens = max_tokens

    async def generate(self, prompt: str, temperature: float = 0.3, system: str | None = None) -> str:
        resp = await self.client.chat.completions.create(
            model=self.model,
            temperature=temperature,
            max_tokens=self.max_tokens,
            messages=_chat_messages(prompt, system),
        )
        return resp.choices[0].message.content or ""

    async def aclose(self) -> None:
        await self.client.close()

    def name(self) -> str:
        return f"openai/{self.model}"
