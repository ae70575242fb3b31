"""
Assembles QuestionRecords from segments.

Order is discovery order, not label order, and colliding labels are kept as
separate records. Dropped segments are collected as SkipReasons so callers
can report "parsed 8 of 10".
"""

from typing import Iterable

from .fields import extract_fields
from .schemas import ParseResult, QuestionRecord, Segment, SkipReason
from .segmenter import segment_questions
from .logger import get_module_logger

logger = get_module_logger("assembler")


class RecordAssembler:
    """Turns segments into records, dropping the ones that do not parse."""

    def assemble(self, segments: Iterable[Segment]) -> ParseResult:
        records = []
        skipped = []
        defaulted_answers = []
        defaulted_explanations = []
        segment_count = 0

        for label, body in segments:
            segment_count += 1
            fields = extract_fields(body)

            if isinstance(fields, SkipReason):
                reason = fields.model_copy(update={"label": label})
                logger.debug(f"Skipping {reason.describe()}")
                skipped.append(reason)
                continue

            if fields.answer_defaulted:
                defaulted_answers.append(label)
            if fields.explanation_defaulted:
                defaulted_explanations.append(label)

            records.append(QuestionRecord(
                id=label,
                question=fields.stem,
                option_a=fields.options['A'],
                option_b=fields.options['B'],
                option_c=fields.options['C'],
                option_d=fields.options['D'],
                correct_answer=fields.correct_answer,
                explanation=fields.explanation,
            ))

        logger.info(
            f"Parsed {len(records)} of {segment_count} segments, {len(skipped)} skipped"
        )
        if defaulted_answers:
            logger.debug(f"Answer defaulted to A for questions {defaulted_answers}")

        return ParseResult(
            records=records,
            skipped=skipped,
            segment_count=segment_count,
            defaulted_answers=defaulted_answers,
            defaulted_explanations=defaulted_explanations,
        )


def parse_mcq_response_detailed(text: str) -> ParseResult:
    """Segment a completion and assemble records, keeping drop diagnostics."""
    return RecordAssembler().assemble(segment_questions(text))


def parse_mcq_response(text: str) -> list[QuestionRecord]:
    """
    Parse a model completion into question records.

    An empty list means nothing parsed; it is not an error here.
    """
    return parse_mcq_response_detailed(text).records
