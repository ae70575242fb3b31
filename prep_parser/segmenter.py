"""
Splits a model completion into per-question segments.

A segment starts at a "Question N:" marker and runs to the next marker or
the end of the text. Anything before the first marker (model preamble such as
"Sure, here are your questions") is ignored.
"""

import re

from .schemas import Segment
from .logger import get_module_logger

logger = get_module_logger("segmenter")

# "Question", whitespace, digits, optional whitespace, colon
QUESTION_MARKER = re.compile(r'Question\s+(\d+)\s*:', re.IGNORECASE)

# Too short to hold a stem, four options, an answer and an explanation
MIN_SEGMENT_LENGTH = 50


def segment_questions(text: str) -> list[Segment]:
    """
    Split completion text into (label, body) segments.

    Labels are taken verbatim: repeated or out-of-order numbers pass through
    unchanged. Bodies shorter than MIN_SEGMENT_LENGTH are dropped.

    Args:
        text: Raw completion text

    Returns:
        Segments in the order their markers appear
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be a str, got {type(text).__name__}")

    markers = list(QUESTION_MARKER.finditer(text))
    segments = []

    for index, marker in enumerate(markers):
        end = markers[index + 1].start() if index + 1 < len(markers) else len(text)
        body = text[marker.end():end]
        label = int(marker.group(1))

        if len(body) < MIN_SEGMENT_LENGTH:
            logger.debug(f"Dropping question {label}: body too short ({len(body)} chars)")
            continue

        segments.append(Segment(label=label, body=body))

    logger.debug(f"Found {len(markers)} markers, kept {len(segments)} segments")
    return segments
