"""Deterministic, local formatting used when the remote formatter is unavailable.

``format_fallback`` never raises: parse problems degrade to
``minimal_reading_test``, the last step of the fallback chain.
"""
from __future__ import annotations

import logging

from reading_formatter.models import SHORT_ANSWER, FormattedQuestion, FormattedReadingTest
from reading_formatter.normalizer import cleanup, paragraphize
from reading_formatter.parsers.question_parser import POINTS, parse_questions
from reading_formatter.parsers.reading_test_parser import split_sections

_log = logging.getLogger("reading_formatter.fallback")

EXCERPT_LENGTH = 1000


def _topic_label(topic: str | None) -> str:
    return (topic or "").strip() or "the assigned topic"


def _placeholder_passage(topic: str | None) -> str:
    return f"Read the following passage about {_topic_label(topic)} and answer the questions below."


def _format(raw_content: str, topic: str) -> FormattedReadingTest:
    passage_text, questions_text = split_sections(raw_content)

    passage = paragraphize(cleanup(passage_text))
    if not passage:
        passage = _placeholder_passage(topic)

    questions = parse_questions(questions_text)
    if not questions:
        _log.info("No numbered questions found, synthesizing one for %r", topic)
        questions = [FormattedQuestion(
            type=SHORT_ANSWER,
            question=f"What is the main topic of the passage about {_topic_label(topic)}?",
            correct_answer=topic,
            points=POINTS[SHORT_ANSWER],
        )]

    return FormattedReadingTest(passage=passage, questions=tuple(questions))


def minimal_reading_test(raw_content: str | None, topic: str | None) -> FormattedReadingTest:
    """Two short-answer stubs around an excerpt of the raw text."""
    label = _topic_label(topic)
    excerpt = str(raw_content or "").strip()[:EXCERPT_LENGTH]
    return FormattedReadingTest(
        passage=excerpt or _placeholder_passage(topic),
        questions=(
            FormattedQuestion(
                type=SHORT_ANSWER,
                question=f"What is the main idea of the passage about {label}?",
                correct_answer=str(topic or ""),
                points=POINTS[SHORT_ANSWER],
            ),
            FormattedQuestion(
                type=SHORT_ANSWER,
                question="Describe one important detail from the passage.",
                correct_answer="Answers will vary",
                points=POINTS[SHORT_ANSWER],
            ),
        ),
    )


def format_fallback(raw_content: str, topic: str) -> FormattedReadingTest:
    """Parse *raw_content* locally into a gradable reading test."""
    try:
        return _format(raw_content or "", topic or "")
    except Exception as e:
        _log.warning("Fallback parse failed (%s), returning minimal test", e)
        return minimal_reading_test(raw_content, topic)
