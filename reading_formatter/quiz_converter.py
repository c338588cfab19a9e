"""Map formatted questions onto the quiz model used by assignment creation."""
from __future__ import annotations

import hashlib
import logging

from reading_formatter.models import (
    CHOICE_TYPES,
    FILL_IN_THE_BLANK,
    SHORT_ANSWER,
    TRUE_FALSE,
    BlankDefinition,
    FormattedQuestion,
    QuizOption,
    QuizQuestion,
)

_log = logging.getLogger("reading_formatter.quiz")


def question_id(index: int, text: str) -> str:
    """Stable id: same position + same text always gives the same id."""
    digest = hashlib.sha256((text or "").encode()).hexdigest()[:8]
    return f"q-{index + 1}-{digest}"


def _option_label(idx: int) -> str:
    return chr(ord("A") + idx) if idx < 26 else str(idx + 1)


def _spread_points(total_points: float, count: int) -> float:
    return round(total_points / count, 1) if count else 0.0


def _convert_one(
    q: FormattedQuestion,
    index: int,
    auto_gradable: bool,
    points: float | None,
) -> QuizQuestion:
    qid = question_id(index, q.question)
    quiz = QuizQuestion(
        id=qid,
        type=q.type,
        order=index + 1,
        question=q.question or "",
        points=points if points is not None else q.points,
        explanation=q.explanation,
        requires_manual_grading=not auto_gradable,
    )
    answers = [a for a in q.answers() if a is not None]

    if q.type in CHOICE_TYPES:
        quiz.options = [
            QuizOption(id=f"{qid}-opt-{_option_label(i).lower()}", label=_option_label(i), text=opt)
            for i, opt in enumerate(q.options or ())
        ]
        target = answers[0] if answers else None
        for i, opt in enumerate(q.options or ()):
            if opt == target:
                quiz.correct_option_index = i
                break
        else:
            _log.warning("Correct answer not found in options: %.60s", q.question)
        if q.type == TRUE_FALSE:
            quiz.requires_manual_grading = False
    elif q.type == FILL_IN_THE_BLANK:
        quiz.blanks = [
            BlankDefinition(id=f"{qid}-blank-{i}", position=i, correct_answers=[ans])
            for i, ans in enumerate(answers)
        ]
    elif q.type == SHORT_ANSWER:
        # A list answer keeps each element as its own keyword
        quiz.keywords = answers
        quiz.requires_manual_grading = True
    return quiz


def convert_to_quiz_questions(
    questions,
    auto_gradable: bool = True,
    total_points: float | None = None,
) -> list[QuizQuestion]:
    """Convert FormattedQuestions to QuizQuestions, preserving order.

    ``total_points`` spreads a fixed total evenly instead of using each
    question's own points. ``auto_gradable=False`` flags every question for
    manual grading except true/false, which is always auto-graded.
    """
    questions = list(questions or [])
    points = _spread_points(total_points, len(questions)) if total_points is not None else None
    return [
        _convert_one(q, i, auto_gradable, points)
        for i, q in enumerate(questions)
    ]
