"""Client for the upstream service that writes raw reading tests."""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import httpx

from reading_formatter.models import GeneratedReadingTest

if TYPE_CHECKING:
    from reading_formatter.formatter import ReadingTestFormatter
    from reading_formatter.models import FormattedReadingTest

log = logging.getLogger("reading_formatter.source")


class ReadingTestSource:
    def __init__(
        self,
        base_url: str = "http://localhost:5002",
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def generate(self, topic: str) -> GeneratedReadingTest:
        """Ask the generator for a raw reading test on *topic*."""
        t0 = time.monotonic()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(f"{self.base_url}/generate", json={"topic": topic})
            resp.raise_for_status()
            data = resp.json()
        content = data.get("generated_content") or ""
        log.info("Generated reading test for %r (%.1fs, %d chars)",
                 topic, time.monotonic() - t0, len(content))
        return GeneratedReadingTest(
            success=bool(data.get("success", False)),
            topic=data.get("topic") or topic,
            test_type=data.get("test_type") or "",
            generated_content=content,
            length=int(data.get("length") or len(content)),
        )


async def generate_and_format(
    topic: str,
    source: ReadingTestSource,
    formatter: ReadingTestFormatter,
) -> FormattedReadingTest:
    """Generate raw content for *topic*, then format it.

    Generation errors propagate; formatting never fails.
    """
    generated = await source.generate(topic)
    if not generated.success or not generated.generated_content.strip():
        raise RuntimeError(f"Reading test generation failed for topic {topic!r}")
    return await formatter.format(generated.generated_content, topic)
