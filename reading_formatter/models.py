from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

MULTIPLE_CHOICE = "multiple_choice"
TRUE_FALSE = "true_false"
SHORT_ANSWER = "short_answer"
FILL_IN_THE_BLANK = "fill_in_the_blank"

QUESTION_TYPES = (MULTIPLE_CHOICE, TRUE_FALSE, SHORT_ANSWER, FILL_IN_THE_BLANK)
CHOICE_TYPES = (MULTIPLE_CHOICE, TRUE_FALSE)

TRUE_FALSE_OPTIONS = ("True", "False")
ANSWER_NOT_PROVIDED = "Answer not provided"


@dataclass(frozen=True)
class FormattedQuestion:
    type: str  # multiple_choice | true_false | short_answer | fill_in_the_blank
    question: str
    correct_answer: str | tuple[str, ...]
    points: int = 1
    options: tuple[str, ...] | None = None
    explanation: str | None = None

    def answers(self) -> list[str]:
        """Correct answer(s) as a list, whatever shape they were stored in."""
        if isinstance(self.correct_answer, tuple):
            return list(self.correct_answer)
        return [self.correct_answer]

    def to_dict(self) -> dict:
        d: dict = {
            "type": self.type,
            "question": self.question,
            "correctAnswer": (
                list(self.correct_answer)
                if isinstance(self.correct_answer, tuple)
                else self.correct_answer
            ),
            "points": self.points,
        }
        if self.options is not None:
            d["options"] = list(self.options)
        if self.explanation:
            d["explanation"] = self.explanation
        return d


@dataclass(frozen=True)
class FormattedReadingTest:
    passage: str
    questions: tuple[FormattedQuestion, ...]

    def to_dict(self) -> dict:
        return {
            "passage": self.passage,
            "questions": [q.to_dict() for q in self.questions],
        }


@dataclass
class ParsedQuestion:
    number: int
    question: str
    answer: str
    options: list[str] | None = None
    explanation: str | None = None


@dataclass
class CacheEntry:
    key: str
    data: FormattedReadingTest
    timestamp: float


@dataclass
class QueuedRequest:
    prompt: str
    future: asyncio.Future


@dataclass
class QuizOption:
    id: str
    label: str
    text: str


@dataclass
class BlankDefinition:
    id: str
    position: int
    correct_answers: list[str]
    case_sensitive: bool = False


@dataclass
class QuizQuestion:
    id: str
    type: str
    order: int
    question: str
    points: float
    explanation: str | None = None
    requires_manual_grading: bool = False
    options: list[QuizOption] = field(default_factory=list)
    correct_option_index: int | None = None
    blanks: list[BlankDefinition] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        d: dict = {
            "id": self.id,
            "type": self.type,
            "order": self.order,
            "question": self.question,
            "points": self.points,
            "requiresManualGrading": self.requires_manual_grading,
        }
        if self.explanation:
            d["explanation"] = self.explanation
        if self.options:
            d["options"] = [
                {"id": o.id, "label": o.label, "text": o.text} for o in self.options
            ]
            d["correctAnswer"] = self.correct_option_index
        if self.blanks:
            d["blanks"] = [
                {
                    "id": b.id,
                    "position": b.position,
                    "correctAnswers": b.correct_answers,
                    "caseSensitive": b.case_sensitive,
                }
                for b in self.blanks
            ]
        if self.keywords:
            d["keywords"] = self.keywords
        return d


@dataclass
class GeneratedReadingTest:
    success: bool
    topic: str
    test_type: str
    generated_content: str
    length: int
