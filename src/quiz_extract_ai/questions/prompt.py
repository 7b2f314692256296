"""
Prompt construction for question extraction.
"""

from __future__ import annotations

from string import Template

SYSTEM_PROMPT = """You convert exam and worksheet documents into structured multiple-choice questions.
Respond ONLY with a single valid JSON object. Do not add explanations, prose or markdown."""

QUESTION_PROMPT_TEMPLATE = Template("""Analyze the following text and extract all multiple choice questions.

Return a single JSON object with exactly one key, "questions", whose value is an array.
Each element of the array is an object with exactly these fields:
- "text": the question string
- "options": an array of exactly 4 option strings
- "correctAnswer": the correct option; it MUST be exactly identical to one of the 4 strings in "options"
- "type": always "mcq"
- "points": always 1

Rules:
- Remove leading numbering or labels from questions and options, such as "110)", "Q5.", "a)", "(b)" or "C.".
- The text may come from OCR and contain broken lines, stray characters or fragments.
  Reconstruct a question only when its text, all 4 options and its answer are clearly present.
  If a question cannot be reconstructed cleanly, omit it. Never invent questions, options or answers.
- If no questions can be extracted, return {"questions": []}.

Example:
{"questions": [{"text": "2+2=?", "options": ["3", "4", "5", "6"], "correctAnswer": "4", "type": "mcq", "points": 1}]}

Text to analyze:
$text
""")

TRUNCATION_NOTE = "\n[... text truncated ...]"


def build_prompt(text: str, max_chars: int = 0) -> str:
    """
    Embed document text into the extraction instructions.

    Args:
        text: Extracted document text, inserted verbatim.
        max_chars: Truncate the text to this many characters (0 = no limit).

    Returns:
        The user prompt for the model.
    """
    if max_chars and len(text) > max_chars:
        text = text[:max_chars] + TRUNCATION_NOTE
    return QUESTION_PROMPT_TEMPLATE.substitute(text=text)
