"""
Field-level extraction for one question segment.

Pulls the stem, options A-D, the correct-answer letter and the explanation
out of a segment body. Every field has a small set of pattern rules tried in
a fixed order; the first rule that yields a non-empty value wins.

Expected format (what the generation prompt asks for):

    Question 1: Which river is known as the Dakshin Ganga?
    A. Krishna
    B. Godavari
    C. Kaveri
    D. Mahanadi
    Correct Answer: B
    Explanation: The Godavari is the longest river in peninsular India.

Models drift from this format, so:
  - a missing stem or option drops the segment (returns a SkipReason),
  - a missing answer defaults to "A" and a missing explanation is synthesized.
"""

import re
from typing import Callable, Optional, Union

from .schemas import QuestionFields, SkipReason

OPTION_LETTERS = ('A', 'B', 'C', 'D')

# Marker that ends each option's text. "Correct." practically never appears,
# so D usually falls through to the end-of-line rule.
SUCCESSORS = {'A': 'B', 'B': 'C', 'C': 'D', 'D': 'Correct'}

DEFAULT_ANSWER = 'A'
DEFAULT_EXPLANATION = "The correct answer is {letter}."

MIN_STEM_LENGTH = 10

# First line that starts with "A." closes the stem
STEM_BOUNDARY = re.compile(r'\n\s*A\.', re.IGNORECASE)

# Separators tolerated between a label and its value: "Correct Answer: B",
# "Correct Answer - B", "**Correct Answer:** (B)"
CORRECT_ANSWER_PATTERN = re.compile(
    r'Correct\s*Answer[\s:*\-()\[\]]*([A-D])\b', re.IGNORECASE
)
EXPLANATION_PATTERN = re.compile(r'Explanation[\s:*\-]*(.+)', re.IGNORECASE | re.DOTALL)


def _marker(letter: str) -> str:
    # Only at the start of a line: "India." or "4th century B.C." are not markers
    return rf'^[^\S\n]*{re.escape(letter)}\.[^\S\n]*'


# The value starts on the marker's own line; a bare "A." line has no value.
_UNTIL_SUCCESSOR = {
    letter: re.compile(
        rf'{_marker(letter)}(\S.*?)(?=\n[^\S\n]*{re.escape(successor)}\.)',
        re.IGNORECASE | re.DOTALL | re.MULTILINE
    )
    for letter, successor in SUCCESSORS.items()
}
_TO_LINE_END = {
    letter: re.compile(rf'{_marker(letter)}(\S.*?)(?=\n)', re.IGNORECASE | re.MULTILINE)
    for letter in OPTION_LETTERS
}
_LINE_PREFIX = {
    letter: re.compile(rf'^{re.escape(letter)}\.\s*', re.IGNORECASE)
    for letter in OPTION_LETTERS
}


# --- Option rules, in fallback order ---

def option_until_successor(text: str, letter: str) -> str:
    """Text after "L." up to the line that starts with the successor marker."""
    match = _UNTIL_SUCCESSOR[letter].search(text)
    return match.group(1).strip() if match else ''


def option_to_line_end(text: str, letter: str) -> str:
    """Text after "L." up to the end of that line."""
    match = _TO_LINE_END[letter].search(text)
    return match.group(1).strip() if match else ''


def option_from_line_scan(text: str, letter: str) -> str:
    """First line whose trimmed form starts with "L.", prefix removed."""
    prefix = _LINE_PREFIX[letter]
    for line in text.split('\n'):
        stripped = line.strip()
        if prefix.match(stripped):
            return prefix.sub('', stripped).strip()
    return ''


OPTION_RULES: tuple[Callable[[str, str], str], ...] = (
    option_until_successor,
    option_to_line_end,
    option_from_line_scan,
)


def extract_option(text: str, letter: str) -> str:
    """Run the option rules in order; empty string when all of them fail."""
    for rule in OPTION_RULES:
        value = rule(text, letter)
        if value:
            return value
    return ''


# --- Other fields ---

def split_stem(body: str) -> Union[tuple[str, str], SkipReason]:
    """
    Split a segment into (stem, options_text).

    options_text starts at the line holding "A." so option rules never look
    inside the stem.
    """
    match = STEM_BOUNDARY.search(body)
    if not match:
        return SkipReason.missing_stem()

    stem = body[:match.start()].strip()
    if not stem:
        return SkipReason.missing_stem()
    if len(stem) < MIN_STEM_LENGTH:
        return SkipReason.short_stem()

    return stem, body[match.start():]


def extract_correct_answer(body: str) -> Optional[str]:
    match = CORRECT_ANSWER_PATTERN.search(body)
    return match.group(1).upper() if match else None


def extract_explanation(body: str) -> Optional[str]:
    match = EXPLANATION_PATTERN.search(body)
    if not match:
        return None
    return match.group(1).strip() or None


def extract_fields(body: str) -> Union[QuestionFields, SkipReason]:
    """
    Extract every field of one question segment.

    Args:
        body: Segment text following a "Question N:" marker

    Returns:
        QuestionFields when stem and all four options were found,
        otherwise a SkipReason naming what was missing
    """
    if not isinstance(body, str):
        raise TypeError(f"body must be a str, got {type(body).__name__}")

    split = split_stem(body)
    if isinstance(split, SkipReason):
        return split
    stem, options_text = split

    options = {}
    for letter in OPTION_LETTERS:
        value = extract_option(options_text, letter)
        if not value:
            return SkipReason.missing_option(letter)
        options[letter] = value

    answer = extract_correct_answer(options_text)
    explanation = extract_explanation(options_text)
    letter = answer or DEFAULT_ANSWER

    return QuestionFields(
        stem=stem,
        options=options,
        correct_answer=letter,
        explanation=explanation or DEFAULT_EXPLANATION.format(letter=letter),
        answer_defaulted=answer is None,
        explanation_defaulted=explanation is None,
    )
