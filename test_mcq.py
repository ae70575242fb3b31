"""
Tests for the MCQ path: segmenter, field rules and record assembly.

All inputs are hand-written completions in (and slightly out of) the format
the generation prompt asks for; no LLM is involved.
"""

import pytest
from pydantic import ValidationError

from prep_parser.assembler import RecordAssembler, parse_mcq_response, parse_mcq_response_detailed
from prep_parser.fields import (
    extract_correct_answer,
    extract_fields,
    extract_option,
    option_from_line_scan,
    option_to_line_end,
    option_until_successor,
)
from prep_parser.schemas import QuestionFields, Segment, SkipReason
from prep_parser.segmenter import segment_questions


WELL_FORMED = """Question 7: Which river is known as the Dakshin Ganga in India?
A. Krishna
B. Godavari
C. Kaveri
D. Mahanadi
Correct Answer: B
Explanation: The Godavari is the longest river in peninsular India.
"""

MISSING_OPTION_C = """Question 2: Which article of the Constitution abolishes untouchability?
A. Article 14
B. Article 17
D. Article 21
Correct Answer: B
Explanation: Article 17 abolishes untouchability.
"""

NO_ANSWER_LINE = """Question 3: Who was the first Governor-General of independent India?
A. Lord Mountbatten
B. Jawaharlal Nehru
C. Rajendra Prasad
D. Sardar Patel
Explanation: Lord Mountbatten held the office until June 1948.
"""

NO_EXPLANATION_LINE = """Question 4: Which gas makes up most of the Earth's atmosphere?
A. Oxygen
B. Nitrogen
C. Argon
D. Carbon dioxide
Correct Answer: B
"""


# ---------------------------------------------------------------------------
# Segmenter
# ---------------------------------------------------------------------------

def test_segmenter_ignores_preamble():
    text = "Sure! Here are your questions.\n\n" + WELL_FORMED
    segments = segment_questions(text)
    assert len(segments) == 1
    assert segments[0].label == 7
    assert "Sure!" not in segments[0].body


def test_segmenter_marker_is_case_insensitive():
    segments = segment_questions(WELL_FORMED.replace("Question 7:", "QUESTION 7 :"))
    assert [s.label for s in segments] == [7]


def test_segmenter_drops_short_bodies():
    text = "Question 1: too short\n" + WELL_FORMED
    segments = segment_questions(text)
    assert [s.label for s in segments] == [7]


def test_segmenter_keeps_labels_verbatim():
    text = (
        WELL_FORMED.replace("Question 7:", "Question 3:")
        + WELL_FORMED.replace("Question 7:", "Question 1:")
        + WELL_FORMED.replace("Question 7:", "Question 3:")
    )
    assert [s.label for s in segment_questions(text)] == [3, 1, 3]


def test_segmenter_no_markers():
    assert segment_questions("The model refused to answer.") == []


def test_segmenter_rejects_non_string():
    with pytest.raises(TypeError):
        segment_questions(None)


# ---------------------------------------------------------------------------
# Option rules
# ---------------------------------------------------------------------------

def test_option_rule_until_successor_spans_lines():
    text = "\nA. First line\ncontinued here\nB. Second\n"
    assert option_until_successor(text, "A") == "First line\ncontinued here"


def test_option_falls_back_to_line_end_when_successor_missing():
    text = "\nA. Foo\nC. Bar\n"
    assert option_until_successor(text, "A") == ""
    assert option_to_line_end(text, "A") == "Foo"
    assert extract_option(text, "A") == "Foo"


def test_option_falls_back_to_line_scan_on_last_line():
    text = "\nA. one\nB. two\nC. three\n  D. four"
    assert option_until_successor(text, "D") == ""
    assert option_to_line_end(text, "D") == ""
    assert option_from_line_scan(text, "D") == "four"
    assert extract_option(text, "D") == "four"


def test_option_letter_inside_word_is_not_a_marker():
    # "India." ends in "a." but is not option A
    text = "\nSee India. Then pick\nB. Two\n"
    assert extract_option(text, "A") == ""


def test_bare_option_marker_does_not_take_the_next_line():
    text = "\nA.\nB. Godavari\nC. Kaveri\nD. Mahanadi\n"
    assert option_until_successor(text, "A") == ""
    assert option_to_line_end(text, "A") == ""
    assert extract_option(text, "A") == ""
    assert extract_option(text, "B") == "Godavari"


def test_era_abbreviations_are_not_option_markers():
    text = (
        "\nA. 4th century B.C.\nB. 2nd century A.D.\n"
        "C. 5th century A.D.\nD. 1st century B.C.\nCorrect Answer: A\n"
    )
    assert [extract_option(text, letter) for letter in "ABCD"] == [
        "4th century B.C.", "2nd century A.D.", "5th century A.D.", "1st century B.C.",
    ]


def test_option_missing_everywhere_is_empty():
    assert extract_option("\nA. one\nB. two\n", "C") == ""


# ---------------------------------------------------------------------------
# Field extraction
# ---------------------------------------------------------------------------

def test_fields_from_well_formed_segment():
    fields = extract_fields(segment_questions(WELL_FORMED)[0].body)

    assert isinstance(fields, QuestionFields)
    assert fields.stem == "Which river is known as the Dakshin Ganga in India?"
    assert fields.options == {
        "A": "Krishna", "B": "Godavari", "C": "Kaveri", "D": "Mahanadi",
    }
    assert fields.correct_answer == "B"
    assert fields.explanation == "The Godavari is the longest river in peninsular India."
    assert not fields.answer_defaulted
    assert not fields.explanation_defaulted


def test_fields_missing_option_names_letter():
    reason = extract_fields(segment_questions(MISSING_OPTION_C)[0].body)
    assert reason == SkipReason.missing_option("C")


def test_fields_missing_stem_boundary():
    body = " What is the capital of France? (a) Paris (b) Rome (c) Berlin (d) Madrid"
    assert extract_fields(body) == SkipReason.missing_stem()


def test_fields_short_stem():
    body = " Why?\nA. Because of one\nB. Two\nC. Three\nD. Four\nCorrect Answer: A\n"
    assert extract_fields(body) == SkipReason.short_stem()


def test_fields_default_answer_is_a():
    fields = extract_fields(segment_questions(NO_ANSWER_LINE)[0].body)
    assert fields.correct_answer == "A"
    assert fields.answer_defaulted
    assert fields.explanation == "Lord Mountbatten held the office until June 1948."


def test_fields_synthesized_explanation():
    fields = extract_fields(segment_questions(NO_EXPLANATION_LINE)[0].body)
    assert fields.correct_answer == "B"
    assert fields.explanation == "The correct answer is B."
    assert fields.explanation_defaulted


@pytest.mark.parametrize("line, expected", [
    ("Correct Answer: C", "C"),
    ("correct answer - d", "D"),
    ("**Correct Answer:** (c)", "C"),
    ("CorrectAnswer:B", "B"),
    ("Correct Answer: Both A and C", None),
    ("Answer: B", None),
])
def test_correct_answer_separators(line, expected):
    assert extract_correct_answer(f"\n{line}\n") == expected


def test_fields_rejects_non_string():
    with pytest.raises(TypeError):
        extract_fields(None)


# ---------------------------------------------------------------------------
# Record assembly
# ---------------------------------------------------------------------------

def test_well_formed_completion_yields_one_record_with_label_id():
    records = parse_mcq_response(WELL_FORMED)

    assert len(records) == 1
    record = records[0]
    assert record.id == 7
    assert record.question == "Which river is known as the Dakshin Ganga in India?"
    assert all(record.options.values())
    assert record.correct_answer == "B"


def test_segment_missing_option_is_dropped():
    completion = WELL_FORMED + MISSING_OPTION_C + NO_EXPLANATION_LINE
    result = parse_mcq_response_detailed(completion)

    assert result.segment_count == 3
    assert len(result.records) < result.segment_count
    assert [r.id for r in result.records] == [7, 4]
    assert result.skipped_count == 1
    assert result.skipped[0].label == 2
    assert result.skipped[0].letter == "C"
    assert result.skipped[0].describe() == "question 2: missing option C"


def test_missing_answer_line_defaults_to_a():
    [record] = parse_mcq_response(NO_ANSWER_LINE)
    assert record.correct_answer == "A"


def test_missing_explanation_line_is_synthesized():
    [record] = parse_mcq_response(NO_EXPLANATION_LINE)
    assert record.explanation == f"The correct answer is {record.correct_answer}."


def test_blank_option_line_drops_the_segment():
    completion = """Question 5: Which river is known as the Dakshin Ganga?
A.
B. Godavari
C. Kaveri
D. Mahanadi
Correct Answer: B
Explanation: The Godavari is the longest river in peninsular India.
"""
    result = parse_mcq_response_detailed(completion)
    assert result.records == []
    assert result.skipped[0].describe() == "question 5: missing option A"


def test_era_options_parse_cleanly():
    completion = """Question 6: When did Ashoka rule the Mauryan empire?
A. 3rd century B.C.
B. 2nd century A.D.
C. 5th century A.D.
D. 1st century B.C.
Correct Answer: A
Explanation: Ashoka ruled from about 268 to 232 B.C.
"""
    [record] = parse_mcq_response(completion)
    assert record.options == {
        "A": "3rd century B.C.",
        "B": "2nd century A.D.",
        "C": "5th century A.D.",
        "D": "1st century B.C.",
    }
    assert record.correct_answer == "A"


def test_defaulted_fields_are_reported_by_label():
    completion = WELL_FORMED + NO_ANSWER_LINE + NO_EXPLANATION_LINE
    result = parse_mcq_response_detailed(completion)

    assert [r.id for r in result.records] == [7, 3, 4]
    assert result.defaulted_answers == [3]
    assert result.defaulted_explanations == [4]


def test_records_keep_discovery_order_and_duplicate_labels():
    completion = (
        NO_EXPLANATION_LINE.replace("Question 4:", "Question 9:")
        + WELL_FORMED.replace("Question 7:", "Question 2:")
        + NO_ANSWER_LINE.replace("Question 3:", "Question 9:")
    )
    records = parse_mcq_response(completion)
    assert [r.id for r in records] == [9, 2, 9]
    assert records[0].question != records[2].question


def test_assembler_accepts_plain_segments():
    segments = [Segment(label=11, body=segment_questions(WELL_FORMED)[0].body)]
    result = RecordAssembler().assemble(segments)
    assert [r.id for r in result.records] == [11]


def test_parse_is_idempotent():
    completion = WELL_FORMED + MISSING_OPTION_C + NO_ANSWER_LINE
    first = [r.model_dump() for r in parse_mcq_response(completion)]
    second = [r.model_dump() for r in parse_mcq_response(completion)]
    assert first == second


def test_empty_completion_gives_empty_list():
    assert parse_mcq_response("") == []


def test_records_are_frozen():
    [record] = parse_mcq_response(WELL_FORMED)
    with pytest.raises(ValidationError):
        record.correct_answer = "C"
