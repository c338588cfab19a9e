"""Tests for LLM providers that can run without network access."""
from __future__ import annotations

import json

import httpx
import pytest

from reading_formatter.providers.llm_gemini import GEMINI_BASE_URL, GeminiProvider
from reading_formatter.providers.llm_openai import _chat_messages


def _gemini_reply(*texts: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": t} for t in texts]}}]}


class TestGeminiProvider:
    @pytest.mark.asyncio
    async def test_generate_payload_and_text(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_gemini_reply('{"passage":', ' "x"}'))

        llm = GeminiProvider(model="gemini-2.5-flash", max_tokens=512, transport=httpx.MockTransport(handler))
        text = await llm.generate("format this", temperature=0.2, system="be strict")
        await llm.aclose()

        assert text == '{"passage": "x"}'
        assert str(seen["url"]).startswith(f"{GEMINI_BASE_URL}/gemini-2.5-flash:generateContent")
        assert seen["url"].params["key"] == "secret"
        body = seen["body"]
        assert body["contents"][0]["parts"][0]["text"] == "format this"
        assert body["systemInstruction"] == {"parts": [{"text": "be strict"}]}
        assert body["generationConfig"] == {"temperature": 0.2, "maxOutputTokens": 512}

    @pytest.mark.asyncio
    async def test_no_system_instruction(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_gemini_reply("ok"))

        llm = GeminiProvider(transport=httpx.MockTransport(handler))
        assert await llm.generate("hi") == "ok"
        assert "systemInstruction" not in seen["body"]

    @pytest.mark.asyncio
    async def test_http_429_raises_status_error(self):
        llm = GeminiProvider(transport=httpx.MockTransport(
            lambda request: httpx.Response(429, json={"error": {"status": "RESOURCE_EXHAUSTED"}})
        ))
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await llm.generate("hi")
        assert exc_info.value.response.status_code == 429

    @pytest.mark.asyncio
    async def test_unexpected_shape(self):
        llm = GeminiProvider(transport=httpx.MockTransport(
            lambda request: httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}})
        ))
        with pytest.raises(RuntimeError, match="Unexpected Gemini response"):
            await llm.generate("hi")

    def test_name(self):
        assert GeminiProvider(model="gemini-2.0-flash").name() == "gemini/gemini-2.0-flash"


class TestChatMessages:
    def test_with_system(self):
        assert _chat_messages("p", "s") == [
            {"role": "system", "content": "s"},
            {"role": "user", "content": "p"},
        ]

    def test_without_system(self):
        assert _chat_messages("p", None) == [{"role": "user", "content": "p"}]
