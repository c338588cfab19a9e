from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "llm_provider": "groq",
    "llm_model": "llama-3.3-70b-versatile",
    "ollama_url": "http://localhost:11434",
    "reading_test_api_url": "http://localhost:5002",
    "min_request_interval": 10.0,
    "cache_ttl_hours": 24,
    "cache_key_prefix_length": 100,
    "request_timeout": 120.0,
    "temperature": 0.3,
    "max_tokens": 4096,
}


@dataclass
class Settings:
    llm_provider: str = DEFAULTS["llm_provider"]
    llm_model: str = DEFAULTS["llm_model"]
    ollama_url: str = DEFAULTS["ollama_url"]
    reading_test_api_url: str = DEFAULTS["reading_test_api_url"]
    min_request_interval: float = DEFAULTS["min_request_interval"]
    cache_ttl_hours: int = DEFAULTS["cache_ttl_hours"]
    cache_key_prefix_length: int = DEFAULTS["cache_key_prefix_length"]
    request_timeout: float = DEFAULTS["request_timeout"]
    temperature: float = DEFAULTS["temperature"]
    max_tokens: int = DEFAULTS["max_tokens"]

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_hours * 60 * 60

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in fields(Settings)}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
