"""Whitespace, capitalization and paragraph repair for generated text."""
from __future__ import annotations

import re

SENTENCES_PER_PARAGRAPH = 4

_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")


def cleanup(text: str | None) -> str:
    """Repair spacing in text glued together by the generator.

    "endsHere" -> "ends Here", "end.Next" -> "end. Next", runs of spaces and
    tabs collapse to one space, every line is trimmed and 3+ newlines become
    a single blank line.
    """
    if not text:
        return ""
    text = re.sub(r"([a-z])([A-Z])", r"\1 \2", text)
    text = re.sub(r"([.!?])([A-Z])", r"\1 \2", text)
    text = re.sub(r"[ \t\f\v]{2,}", " ", text)
    text = "\n".join(line.strip() for line in text.splitlines())
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def paragraphize(passage: str | None) -> str:
    """Regroup a passage into paragraphs of four sentences."""
    if not passage:
        return ""
    flat = re.sub(r"\s+", " ", passage).strip()
    matches = list(_SENTENCE_RE.finditer(flat))
    if not matches:
        return flat

    sentences = [m.group(0).strip() for m in matches]
    # Trailing fragment without terminal punctuation
    tail = flat[matches[-1].end():].strip()
    if tail:
        sentences.append(tail)

    paragraphs = []
    for i in range(0, len(sentences), SENTENCES_PER_PARAGRAPH):
        group = [s for s in sentences[i:i + SENTENCES_PER_PARAGRAPH] if s]
        if group:
            paragraphs.append(" ".join(group))
    return "\n\n".join(paragraphs)


def squash(text: str | None) -> str:
    """Cleanup and fold onto a single line (question stems, options, answers)."""
    return re.sub(r"\s+", " ", cleanup(text)).strip()
