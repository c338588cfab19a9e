"""Prompt templates for reading-test formatting."""
from __future__ import annotations

SYSTEM_PROMPT = (
    "You are a reading test formatter. Return ONLY valid JSON, "
    "no markdown, no explanations."
)

FORMAT_PROMPT = """\
Format this reading test about "{topic}" into structured JSON.

CRITICAL REQUIREMENTS:

1. PASSAGE FORMATTING (VERY IMPORTANT):
   - Split the passage into clear paragraphs using \\n\\n (double newline)
   - Each paragraph should be 3-5 sentences
   - Fix spacing between words
   - Fix capitalization
   - Remove duplicates
   - Fix grammar and punctuation
   - MUST have paragraph breaks, not one long block of text

2. QUESTIONS FORMATTING:
   - Fix spacing and capitalization
   - Identify types: multiple_choice, true_false, short_answer, fill_in_the_blank
   - Extract all options for multiple choice
   - Extract correct answers PROPERLY:
     * For multiple_choice: correctAnswer MUST be the EXACT TEXT of the correct option
     * For true_false: correctAnswer MUST be "True" or "False"
     * For short_answer: correctAnswer MUST be the actual expected answer text
     * For fill_in_the_blank: correctAnswer MUST be an array of correct words/phrases, one per blank
   - Assign points (1-5 based on difficulty)
   - NEVER use placeholders like "Answer not provided" or "Not Given"

3. VALIDATION:
   - Every question MUST have a valid correctAnswer
   - Multiple choice questions MUST have 2-4 options
   - Fill in the blank MUST have actual answer words, not placeholders

RAW CONTENT:
{raw_content}

Return ONLY this JSON structure (passage MUST have \\n\\n between paragraphs):
{{
  "passage": "First paragraph here.\\n\\nSecond paragraph here.\\n\\nThird paragraph here.",
  "questions": [
    {{
      "type": "multiple_choice",
      "question": "What is the main topic?",
      "options": ["Technology", "Science", "History", "Art"],
      "correctAnswer": "Technology",
      "points": 2
    }},
    {{
      "type": "fill_in_the_blank",
      "question": "The main factor is _____.",
      "correctAnswer": ["innovation"],
      "points": 2
    }},
    {{
      "type": "short_answer",
      "question": "What are the key benefits?",
      "correctAnswer": "Improved efficiency and better outcomes",
      "points": 3
    }}
  ]
}}
"""


def build_format_prompt(raw_content: str, topic: str) -> str:
    return FORMAT_PROMPT.format(topic=topic or "", raw_content=raw_content or "")
