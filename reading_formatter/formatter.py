"""Public entry point: cache, then remote formatter, then local fallback."""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from reading_formatter.cache import ResultCache
from reading_formatter.config import Settings, load_settings
from reading_formatter.fallback import format_fallback
from reading_formatter.models import FormattedReadingTest
from reading_formatter.prompts import build_format_prompt
from reading_formatter.remote import FormattingError, RemoteFormattingAdapter
from reading_formatter.scheduler import RequestScheduler

if TYPE_CHECKING:
    from reading_formatter.providers.base import LLMProvider

_log = logging.getLogger("reading_formatter.formatter")


class ReadingTestFormatter:
    """Formats raw reading-test text; never raises (except on cancellation)."""

    def __init__(self, scheduler: RequestScheduler, cache: ResultCache | None = None):
        self.scheduler = scheduler
        self.cache = cache if cache is not None else ResultCache()

    async def format(self, raw_content: str, topic: str) -> FormattedReadingTest:
        raw_content = raw_content or ""
        topic = topic or ""

        key = self.cache.make_key(topic, raw_content)
        cached = self.cache.get(key)
        if cached is not None:
            _log.info("Using cached result for %r", topic)
            return cached

        prompt = build_format_prompt(raw_content, topic)
        try:
            result = await self.scheduler.enqueue(prompt)
        except asyncio.CancelledError:
            raise
        except FormattingError as e:
            _log.warning("Remote formatting failed (%s): %s, using local parser", e.kind, e)
        except Exception as e:
            _log.warning("Remote formatting failed (%s), using local parser", e)
        else:
            self.cache.put(key, result)
            return result

        result = format_fallback(raw_content, topic)
        self.cache.put(key, result)
        return result

    async def aclose(self) -> None:
        await self.scheduler.close()
        await self.scheduler.adapter.llm.aclose()


def build_llm(settings: Settings) -> LLMProvider:
    kwargs = {"max_tokens": settings.max_tokens, "timeout": settings.request_timeout}
    if settings.llm_provider == "groq":
        from reading_formatter.providers.llm_groq import GroqProvider
        return GroqProvider(model=settings.llm_model, **kwargs)
    elif settings.llm_provider == "openai":
        from reading_formatter.providers.llm_openai import OpenAIProvider
        return OpenAIProvider(model=settings.llm_model, **kwargs)
    elif settings.llm_provider == "anthropic":
        from reading_formatter.providers.llm_anthropic import AnthropicProvider
        return AnthropicProvider(model=settings.llm_model, **kwargs)
    elif settings.llm_provider == "gemini":
        from reading_formatter.providers.llm_gemini import GeminiProvider
        return GeminiProvider(model=settings.llm_model, **kwargs)
    elif settings.llm_provider == "ollama":
        from reading_formatter.providers.llm_ollama import OllamaProvider
        return OllamaProvider(
            base_url=settings.ollama_url,
            model=settings.llm_model,
            timeout=settings.request_timeout,
        )
    raise ValueError(f"Unknown LLM provider: {settings.llm_provider}")


def build_formatter(settings: Settings, llm: LLMProvider | None = None) -> ReadingTestFormatter:
    adapter = RemoteFormattingAdapter(llm or build_llm(settings), temperature=settings.temperature)
    scheduler = RequestScheduler(adapter, min_interval=settings.min_request_interval)
    cache = ResultCache(
        ttl_seconds=settings.cache_ttl_seconds,
        key_prefix_length=settings.cache_key_prefix_length,
    )
    return ReadingTestFormatter(scheduler, cache)


# Process-wide formatter (one scheduler + cache per process)
_formatter: ReadingTestFormatter | None = None


def get_formatter() -> ReadingTestFormatter:
    global _formatter
    if _formatter is None:
        _formatter = build_formatter(load_settings())
    return _formatter


def set_formatter(formatter: ReadingTestFormatter | None) -> None:
    global _formatter
    _formatter = formatter


async def format_reading_test_with_gemini(raw_content: str, topic: str) -> FormattedReadingTest:
    """Format *raw_content* into a gradable reading test. Never raises."""
    try:
        formatter = get_formatter()
    except Exception as e:
        _log.warning("Formatter unavailable (%s), using local parser", e)
        return format_fallback(raw_content, topic)
    return await formatter.format(raw_content, topic)
