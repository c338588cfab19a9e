"""One call to the remote formatting service, plus response parsing/validation."""
from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING

from reading_formatter.models import (
    CHOICE_TYPES,
    FILL_IN_THE_BLANK,
    QUESTION_TYPES,
    TRUE_FALSE,
    TRUE_FALSE_OPTIONS,
    FormattedQuestion,
    FormattedReadingTest,
)
from reading_formatter.prompts import SYSTEM_PROMPT

if TYPE_CHECKING:
    from reading_formatter.providers.base import LLMProvider

_log = logging.getLogger("reading_formatter.remote")

PLACEHOLDER_ANSWERS = {"answer not provided", "not given", ""}

_RATE_LIMIT_MARKERS = (
    "429",
    "too many requests",
    "resource exhausted",
    "resource_exhausted",
    "quota",
    "rate limit",
    "rate_limit",
)


class FormattingError(Exception):
    """Remote formatting did not produce a usable reading test."""

    kind = "error"


class ServiceError(FormattingError):
    """Transport-level failure talking to the formatting service."""

    def __init__(self, message: str, rate_limited: bool = False):
        super().__init__(message)
        self.rate_limited = rate_limited

    @property
    def kind(self) -> str:
        return "rate_limited" if self.rate_limited else "service"


class ResponseValidationError(FormattingError):
    """The service answered, but not with a valid reading test."""

    kind = "validation"


def is_rate_limit_error(exc: BaseException) -> bool:
    """Heuristic: does *exc* look like an HTTP 429 / quota rejection?"""
    status = getattr(exc, "status_code", None)
    if status is None:
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None)
    if status == 429:
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _RATE_LIMIT_MARKERS)


# ── JSON extraction ───────────────────────────────────────────────────


def _strip_fences(text: str) -> str:
    text = re.sub(r"<think>.*?</think>", "", text, flags=re.DOTALL).strip()
    if text.startswith("```"):
        text = re.sub(r"^```(?:json)?\s*", "", text, flags=re.IGNORECASE)
        text = re.sub(r"\s*```$", "", text)
    return text.strip()


_DECODER = json.JSONDecoder()


def _scan_json_objects(text: str):
    """Yield every JSON object that decodes starting at a ``{`` in *text*.

    Scanning resumes after each decoded object, so nested objects of an
    earlier hit are not yielded again.
    """
    start = text.find("{")
    while start != -1:
        try:
            obj, end = _DECODER.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        yield obj
        start = text.find("{", end)


def extract_json(text: str) -> dict:
    """Parse the reading-test JSON object out of a model response.

    Strict parse of the fence-stripped text first, then the first embedded
    ``{...}`` object. Raises ``ResponseValidationError`` when neither parses.
    """
    body = _strip_fences(text or "")
    if not body:
        raise ResponseValidationError("Empty response from formatting service")
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        data = next(_scan_json_objects(body), None)
        if data is None:
            raise ResponseValidationError(f"Could not parse JSON: {body[:200]}")
    if not isinstance(data, dict):
        raise ResponseValidationError(f"Expected a JSON object, got {type(data).__name__}")
    return data


# ── validation ────────────────────────────────────────────────────────


def _coerce_points(value, default: int = 1) -> int:
    try:
        points = int(value)
    except (TypeError, ValueError):
        return default
    return max(1, points)


def _coerce_question(raw) -> tuple[FormattedQuestion | None, str | None]:
    """Build a FormattedQuestion from one JSON item.

    Returns (question, None) on success or (None, reason) when the item has
    to be dropped.
    """
    if not isinstance(raw, dict):
        return None, f"expected object, got {type(raw).__name__}"

    qtype = str(raw.get("type", "")).strip().lower()
    if qtype not in QUESTION_TYPES:
        return None, f"unknown type {qtype!r}"
    text = str(raw.get("question") or "").strip()
    if not text:
        return None, "empty question text"

    answer = raw.get("correctAnswer")
    if isinstance(answer, list):
        answer = tuple(str(a).strip() for a in answer if str(a).strip())
        if not answer or any(a.lower() in PLACEHOLDER_ANSWERS for a in answer):
            return None, f"invalid answer for {text[:60]!r}"
    elif isinstance(answer, (str, bool, int, float)):
        answer = str(answer).strip()
        if answer.lower() in PLACEHOLDER_ANSWERS:
            return None, f"invalid answer for {text[:60]!r}"
    else:
        return None, f"missing answer for {text[:60]!r}"

    options = raw.get("options")
    if isinstance(options, list):
        options = tuple(str(o).strip() for o in options)
    else:
        options = None

    if qtype == TRUE_FALSE:
        verdict = (answer[0] if isinstance(answer, tuple) else answer).lower()
        if verdict not in ("true", "false"):
            return None, f"true/false answer {verdict!r} for {text[:60]!r}"
        answer = verdict.capitalize()
        options = TRUE_FALSE_OPTIONS
    elif qtype in CHOICE_TYPES:
        if isinstance(answer, tuple):
            answer = answer[0]
        if not options or len(options) < 2 or answer not in options:
            return None, f"correctAnswer not among options for {text[:60]!r}"
    elif qtype == FILL_IN_THE_BLANK and isinstance(answer, str):
        answer = (answer,)

    explanation = raw.get("explanation")
    return FormattedQuestion(
        type=qtype,
        question=text,
        correct_answer=answer,
        points=_coerce_points(raw.get("points")),
        options=options if qtype in CHOICE_TYPES else None,
        explanation=str(explanation).strip() if explanation else None,
    ), None


def parse_formatted_response(text: str) -> FormattedReadingTest:
    """Turn a raw model response into a validated FormattedReadingTest."""
    data = extract_json(text)

    passage = data.get("passage")
    questions = data.get("questions")
    if not isinstance(passage, str) or not passage.strip() or not isinstance(questions, list):
        raise ResponseValidationError("Invalid format: missing passage or questions")

    valid: list[FormattedQuestion] = []
    for i, raw in enumerate(questions, 1):
        question, reason = _coerce_question(raw)
        if reason:
            _log.warning("Skipping question %d: %s", i, reason)
            continue
        valid.append(question)

    if not valid:
        raise ResponseValidationError("No valid questions found after validation")
    return FormattedReadingTest(passage=passage.strip(), questions=tuple(valid))


class RemoteFormattingAdapter:
    """Wraps exactly one formatting request per ``call`` (no retries)."""

    def __init__(self, llm: LLMProvider, temperature: float = 0.3, system: str | None = SYSTEM_PROMPT):
        self.llm = llm
        self.temperature = temperature
        self.system = system

    async def call(self, prompt: str) -> FormattedReadingTest:
        _log.info("Calling %s...", self.llm.name())
        try:
            text = await self.llm.generate(prompt, temperature=self.temperature, system=self.system)
        except Exception as e:
            limited = is_rate_limit_error(e)
            if limited:
                _log.warning("Formatting service rate-limited: %s", e)
            raise ServiceError(f"{type(e).__name__}: {e}", rate_limited=limited) from e

        result = parse_formatted_response(text)
        _log.info("Formatted with %s (%d questions)", self.llm.name(), len(result.questions))
        return result
