"""Split generated reading-test text into its passage and questions sections.

Generated content usually looks like:

  Reading Passage:
  <several paragraphs>

  Questions:
  1. ...
  Answer: ...

When the "Questions:" marker is missing, the first line that starts with a
number ("1.", "2." ...) is taken as the start of the questions.
"""
from __future__ import annotations

import re

_HEADING_MARKER_RE = re.compile(r"^[ \t*#]*Questions?\s*:", re.IGNORECASE | re.MULTILINE)
_QUESTIONS_MARKER_RE = re.compile(r"\bQuestions?\s*:", re.IGNORECASE)
_NUMBERED_LINE_RE = re.compile(r"^\s*\d+\.", re.MULTILINE)
_PASSAGE_LABEL_RE = re.compile(
    r"^\s*[*#]*\s*(?:Reading\s+)?Passage\s*:\s*[*#]*\s*", re.IGNORECASE,
)


def split_sections(content: str) -> tuple[str, str]:
    """Return (passage_text, questions_text); either may be empty."""
    if not content:
        return "", ""

    m = _HEADING_MARKER_RE.search(content) or _QUESTIONS_MARKER_RE.search(content)
    if m:
        passage = content[:m.start()]
        questions = content[m.end():]
    else:
        m = _NUMBERED_LINE_RE.search(content)
        if m:
            passage = content[:m.start()]
            questions = content[m.start():]
        else:
            passage, questions = content, ""

    passage = _PASSAGE_LABEL_RE.sub("", passage, count=1)
    # Markdown emphasis left around the markers ("**Questions:**", "## Questions:")
    passage = passage.rstrip().rstrip("*#").strip()
    questions = questions.lstrip("*# \t").strip()
    return passage, questions
