"""Tests for the upstream reading-test generator client."""
from __future__ import annotations

import json

import httpx
import pytest

from reading_formatter.cache import ResultCache
from reading_formatter.formatter import ReadingTestFormatter
from reading_formatter.reading_source import ReadingTestSource, generate_and_format
from reading_formatter.remote import RemoteFormattingAdapter
from reading_formatter.scheduler import RequestScheduler


class FakeLLM:
    def __init__(self, response: str):
        self.response = response
        self.prompts: list[str] = []

    async def generate(self, prompt, temperature=0.3, system=None):
        self.prompts.append(prompt)
        return self.response

    def name(self):
        return "fake/model"


def _source(payload: dict, seen: dict | None = None, status: int = 200) -> ReadingTestSource:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
        return httpx.Response(status, json=payload)

    return ReadingTestSource("http://gen.test/", transport=httpx.MockTransport(handler))


def _formatter(llm, clock) -> ReadingTestFormatter:
    scheduler = RequestScheduler(RemoteFormattingAdapter(llm), clock=clock, sleep=clock.sleep)
    return ReadingTestFormatter(scheduler, ResultCache(clock=clock))


class TestReadingTestSource:
    @pytest.mark.asyncio
    async def test_generate(self):
        seen = {}
        source = _source({
            "success": True,
            "topic": "rivers",
            "test_type": "reading",
            "generated_content": "Reading Passage: Rivers flow.",
            "length": 29,
        }, seen)
        generated = await source.generate("rivers")
        assert seen["url"] == "http://gen.test/generate"
        assert seen["body"] == {"topic": "rivers"}
        assert generated.success
        assert generated.test_type == "reading"
        assert generated.generated_content == "Reading Passage: Rivers flow."
        assert generated.length == 29

    @pytest.mark.asyncio
    async def test_missing_fields_defaulted(self):
        generated = await _source({"success": True, "generated_content": "abc"}).generate("t")
        assert generated.topic == "t"
        assert generated.test_type == ""
        assert generated.length == 3

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        with pytest.raises(httpx.HTTPStatusError):
            await _source({"error": "down"}, status=500).generate("t")


class TestGenerateAndFormat:
    @pytest.mark.asyncio
    async def test_success(self, raw_reading_test, remote_response, clock):
        llm = FakeLLM(remote_response)
        source = _source({"success": True, "generated_content": raw_reading_test})
        result = await generate_and_format("Paris", source, _formatter(llm, clock))
        assert len(result.questions) == 2
        assert "Seine" in llm.prompts[0]

    @pytest.mark.asyncio
    async def test_generation_failure_raises(self, clock):
        llm = FakeLLM("{}")
        source = _source({"success": False, "generated_content": ""})
        with pytest.raises(RuntimeError, match="generation failed"):
            await generate_and_format("Paris", source, _formatter(llm, clock))
        assert llm.prompts == []

    @pytest.mark.asyncio
    async def test_empty_content_raises(self, clock):
        source = _source({"success": True, "generated_content": "   "})
        with pytest.raises(RuntimeError):
            await generate_and_format("Paris", source, _formatter(FakeLLM("{}"), clock))
