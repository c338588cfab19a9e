from __future__ import annotations

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    @abstractmethod
    async def generate(self, prompt: str, temperature: float = 0.3, system: str | None = None) -> str:
        ...

    @abstractmethod
    def name(self) -> str:
        ...

    async def aclose(self) -> None:
        """Release network resources. Default: nothing to release."""
