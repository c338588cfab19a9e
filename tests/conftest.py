"""Shared test fixtures."""
from __future__ import annotations

import json

import pytest

from reading_formatter.models import (
    FILL_IN_THE_BLANK,
    MULTIPLE_CHOICE,
    SHORT_ANSWER,
    TRUE_FALSE,
    FormattedQuestion,
    FormattedReadingTest,
)


class FakeClock:
    """Manually advanced clock; ``sleep`` advances it instead of waiting."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def raw_reading_test():
    """Generator output with a passage and one question of each kind."""
    return """\
Reading Passage:
Paris is the capital of France.It sits on the river Seine.  The city is famous for its museums.
Millions of tourists visit every year. The Eiffel Tower was built in 1889. It was meant to be temporary.

Questions:
1. What is the capital of France?
A) Paris
B) Lyon
C) Nice
D) Lille
Answer: A) Paris
2. The Eiffel Tower was built in 1889. True or False?
Answer: True
3. The city sits on the river ___.
Answer: Seine
4. Why do tourists visit Paris?
Answer: For its museums and landmarks
"""


@pytest.fixture
def sample_test():
    """A valid FormattedReadingTest."""
    return FormattedReadingTest(
        passage="Paris is the capital of France.\n\nIt sits on the Seine.",
        questions=(
            FormattedQuestion(
                type=MULTIPLE_CHOICE,
                question="What is the capital of France?",
                options=("Paris", "Lyon", "Nice", "Lille"),
                correct_answer="Paris",
                points=2,
            ),
            FormattedQuestion(
                type=TRUE_FALSE,
                question="Paris sits on the Seine.",
                options=("True", "False"),
                correct_answer="True",
                points=1,
            ),
            FormattedQuestion(
                type=FILL_IN_THE_BLANK,
                question="The tower was built in ___ by ___.",
                correct_answer=("1889", "Eiffel"),
                points=2,
            ),
            FormattedQuestion(
                type=SHORT_ANSWER,
                question="Why do tourists visit Paris?",
                correct_answer="Museums",
                points=3,
                explanation="Stated in the second paragraph.",
            ),
        ),
    )


@pytest.fixture
def remote_response():
    """A well-formed JSON answer from the formatting service."""
    return json.dumps({
        "passage": "Paris is the capital of France.\n\nIt sits on the Seine.",
        "questions": [
            {
                "type": "multiple_choice",
                "question": "What is the capital of France?",
                "options": ["Paris", "Lyon", "Nice", "Lille"],
                "correctAnswer": "Paris",
                "points": 2,
            },
            {
                "type": "fill_in_the_blank",
                "question": "Paris sits on the river _____.",
                "correctAnswer": ["Seine"],
                "points": 2,
            },
        ],
    })
