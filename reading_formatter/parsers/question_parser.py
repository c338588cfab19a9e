"""Extract numbered questions from generated text and classify them.

A questions block is a sequence of numbered items:

  1. What is the capital of France?
  A) Paris
  B) Lyon
  Answer: A) Paris
  2. The sky is blue. True or False?
  Answer: True

Each item becomes a ``ParsedQuestion`` (raw fields, cleaned), then
``classify_question`` turns it into a typed ``FormattedQuestion``:
multiple_choice > true_false > fill_in_the_blank > short_answer.

Only option markers A-D are recognised.
"""
from __future__ import annotations

import logging
import re

from reading_formatter.models import (
    ANSWER_NOT_PROVIDED,
    FILL_IN_THE_BLANK,
    MULTIPLE_CHOICE,
    SHORT_ANSWER,
    TRUE_FALSE,
    TRUE_FALSE_OPTIONS,
    FormattedQuestion,
    ParsedQuestion,
)
from reading_formatter.normalizer import squash

_log = logging.getLogger("reading_formatter.fallback")

POINTS = {
    MULTIPLE_CHOICE: 2,
    FILL_IN_THE_BLANK: 2,
    SHORT_ANSWER: 3,
    TRUE_FALSE: 1,
}

OPTION_LABELS = "ABCD"

_ITEM_RE = re.compile(r"^[ \t*]*(\d+)\.(?!\d)\s*", re.MULTILINE)
_ANSWER_INLINE_RE = re.compile(r"\b(?:Correct\s+)?Answer\s*:\s*", re.IGNORECASE)
_ANSWER_LINE_RE = re.compile(r"\n[ \t*]*(?:Answer|Response)\b[ \t:*-]*(.+?)[ \t]*$", re.IGNORECASE)
_EXPLANATION_RE = re.compile(r"\bExplanation\s*:\s*", re.IGNORECASE)
# "A." or "A)" opening a line, or "A)" after whitespace mid-line
_OPTION_RE = re.compile(
    r"(?:^[ \t*]*\(?([A-D])[).]|(?<=\s)\(?([A-D])\))\s*(?=\S)", re.MULTILINE
)
_ANSWER_LETTER_RE = re.compile(r"^(?:Option\s+)?\(?([A-Da-d])(?:[).:]|\s*$)\s*", re.IGNORECASE)
_BLANK_RE = re.compile(r"_{3,}")
_TRUE_FALSE_TOKEN_RE = re.compile(r"\b(true|false)\b", re.IGNORECASE)


# ── extraction ────────────────────────────────────────────────────────


def extract_questions(questions_text: str) -> list[ParsedQuestion]:
    """Split *questions_text* into numbered items, in source order."""
    if not questions_text:
        return []
    items = list(_ITEM_RE.finditer(questions_text))
    parsed: list[ParsedQuestion] = []
    for i, m in enumerate(items):
        end = items[i + 1].start() if i + 1 < len(items) else len(questions_text)
        parsed.append(_parse_block(int(m.group(1)), questions_text[m.end():end]))
    return parsed


def _parse_block(number: int, body: str) -> ParsedQuestion:
    explanation = None
    m = _EXPLANATION_RE.search(body)
    if m:
        explanation = squash(body[m.end():]) or None
        body = body[:m.start()]

    answer = ""
    m = _ANSWER_INLINE_RE.search(body)
    if m:
        answer = body[m.end():]
        body = body[:m.start()]
    else:
        m = _ANSWER_LINE_RE.search(body.rstrip())
        if m:
            answer = m.group(1)
            body = body[:m.start()]

    options, stem = _split_options(body)
    answer = squash(answer).strip("* ")

    return ParsedQuestion(
        number=number,
        question=squash(stem).strip("* ") or f"Question {number}",
        answer=answer or ANSWER_NOT_PROVIDED,
        options=options,
        explanation=explanation,
    )


def _split_options(body: str) -> tuple[list[str] | None, str]:
    """Find the longest A, B, C, D marker run and cut the options out of *body*.

    Returns (options, question_text); options is None when fewer than two
    sequential markers are present.
    """
    found = [(m, m.group(1) or m.group(2)) for m in _OPTION_RE.finditer(body)]
    best: list[re.Match] = []
    for i, (m, label) in enumerate(found):
        if label != "A":
            continue
        chain = [m]
        last = label
        for n, n_label in found[i + 1:]:
            if ord(n_label) == ord(last) + 1:
                chain.append(n)
                last = n_label
        # Later runs win ties: "Plan A)" in the stem precedes the real options
        if len(chain) >= len(best):
            best = chain

    if len(best) < 2:
        return None, body

    options = []
    for i, m in enumerate(best):
        end = best[i + 1].start() if i + 1 < len(best) else len(body)
        options.append(squash(body[m.end():end]))
    return options, body[:best[0].start()]


# ── classification ────────────────────────────────────────────────────


def _resolve_choice(answer: str, options: list[str]) -> str | None:
    """Map an answer ("B", "B) Lyon", "Lyon") to the verbatim option text."""
    if answer == ANSWER_NOT_PROVIDED:
        return None
    m = _ANSWER_LETTER_RE.match(answer)
    if m:
        idx = OPTION_LABELS.index(m.group(1).upper())
        if idx < len(options):
            return options[idx]
        answer = answer[m.end():]

    target = answer.strip().lower()
    if not target:
        return None
    for opt in options:
        if opt.lower() == target:
            return opt
    for opt in options:
        low = opt.lower()
        if len(low) >= 3 and (low in target or target in low):
            return opt
    return None


def _resolve_true_false(answer: str) -> str | None:
    if answer == ANSWER_NOT_PROVIDED:
        return None
    low = answer.lower()
    if re.search(r"\bnot\s+true\b", low):
        return "False"
    if re.search(r"\bnot\s+false\b", low):
        return "True"
    m = _TRUE_FALSE_TOKEN_RE.search(answer)
    if m:
        return m.group(1).capitalize()
    first = low.split()[0].strip(".,!") if low.split() else ""
    if first in ("yes", "y", "t"):
        return "True"
    if first in ("no", "n", "f"):
        return "False"
    return None


def _looks_true_false(parsed: ParsedQuestion) -> bool:
    return bool(
        _TRUE_FALSE_TOKEN_RE.search(parsed.answer)
        or _TRUE_FALSE_TOKEN_RE.search(parsed.question)
    )


def _looks_fill_in_the_blank(question: str) -> bool:
    low = question.lower()
    return bool(
        _BLANK_RE.search(question)
        or ("fill" in low and "blank" in low)
        or ("complete" in low and "sentence" in low)
    )


def _blank_answers(question: str, answer: str) -> tuple[str, ...]:
    """One answer per blank when the answer lists exactly that many parts."""
    blanks = len(_BLANK_RE.findall(question))
    if blanks > 1:
        parts = [p.strip() for p in re.split(r"\s*[,;/]\s*", answer) if p.strip()]
        if len(parts) == blanks:
            return tuple(parts)
    return (answer,)


def _question(qtype: str, parsed: ParsedQuestion, question: str, answer, options=None) -> FormattedQuestion:
    return FormattedQuestion(
        type=qtype,
        question=question,
        correct_answer=answer,
        points=POINTS[qtype],
        options=options,
        explanation=parsed.explanation,
    )


def classify_question(parsed: ParsedQuestion) -> FormattedQuestion:
    """Type a parsed question and resolve its answer against the options."""
    if parsed.options and len(parsed.options) >= 2:
        correct = _resolve_choice(parsed.answer, parsed.options)
        if correct is not None:
            return _question(
                MULTIPLE_CHOICE, parsed, parsed.question, correct,
                options=tuple(parsed.options),
            )
        # Ungradable as a choice question; keep the options visible in the stem
        _log.info("Question %d: answer %r matches no option, grading manually",
                  parsed.number, parsed.answer)
        listed = " ".join(
            f"{OPTION_LABELS[i]}) {opt}" for i, opt in enumerate(parsed.options)
        )
        return _question(SHORT_ANSWER, parsed, f"{parsed.question} {listed}", parsed.answer)

    if _looks_true_false(parsed):
        verdict = _resolve_true_false(parsed.answer)
        if verdict is not None:
            return _question(
                TRUE_FALSE, parsed, parsed.question, verdict,
                options=TRUE_FALSE_OPTIONS,
            )

    if _looks_fill_in_the_blank(parsed.question):
        return _question(
            FILL_IN_THE_BLANK, parsed, parsed.question,
            _blank_answers(parsed.question, parsed.answer),
        )

    return _question(SHORT_ANSWER, parsed, parsed.question, parsed.answer)


def parse_questions(questions_text: str) -> list[FormattedQuestion]:
    return [classify_question(p) for p in extract_questions(questions_text)]
