"""
LLM-backed MCQ generator.

Builds the question prompt from source text, asks the model for a plain-text
completion and hands it to the MCQ parser.

Input:  source text (e.g. text extracted from a PDF) + question count
Output: list of QuestionRecord, or GenerationError when nothing usable came back
"""

from typing import Optional

from .assembler import parse_mcq_response_detailed
from .exceptions import GenerationError, LLMClientError
from .llm_client import BaseLLMClient, LLMClient, LLMProvider
from .schemas import QuestionRecord
from .logger import get_module_logger

logger = get_module_logger("generator")

# Bounds pattern-matching cost on whatever the model echoes back
MAX_TEXT_LENGTH = 200_000

MIN_QUESTIONS = 1
MAX_QUESTIONS = 200

# Roughly one question's worth of completion tokens, capped per request
TOKENS_PER_QUESTION = 500
MAX_COMPLETION_TOKENS = 16000

TEMPERATURE = 0.7

# The parser is built around exactly this layout. Plain text instead of JSON:
# long JSON completions get cut off mid-string, plain text loses one question.
USER_PROMPT = """You are an expert UPSC exam question creator. Create EXACTLY {count} Multiple Choice Questions (MCQs) from this content.

CONTENT TO ANALYZE:
{text}

REQUIREMENTS:
1. Create EXACTLY {count} MCQs - no more, no less
2. Each question should be challenging and test understanding
3. 4 options per question (A, B, C, D)
4. Only ONE correct answer per question
5. Include brief explanation for each answer

OUTPUT FORMAT (follow EXACTLY for each question):

Question 1: [Question text]
A. [Option A text]
B. [Option B text]
C. [Option C text]
D. [Option D text]
Correct Answer: [Single letter: A, B, C, or D]
Explanation: [Brief explanation]

START GENERATING {count} MCQs NOW:"""


def clamp_count(count: int) -> int:
    return min(MAX_QUESTIONS, max(MIN_QUESTIONS, count))


def build_prompt(text: str, count: int) -> str:
    """Fill the generation prompt, truncating the source text."""
    return USER_PROMPT.format(count=count, text=text[:MAX_TEXT_LENGTH])


class QuestionGenerator:
    """Generates MCQs from source text with an LLM."""

    def __init__(
        self,
        llm_client: Optional[BaseLLMClient] = None,
        provider: Optional[LLMProvider] = None
    ):
        # Injected clients make the generator testable without an API key
        self.llm_client = llm_client
        if self.llm_client is None:
            try:
                self.llm_client = LLMClient.create(provider=provider)
            except LLMClientError as e:
                raise GenerationError(
                    f"Failed to initialize LLM client: {e.message}",
                    details={"provider": e.provider}
                )

    def generate(self, text: str, count: int = 10) -> list[QuestionRecord]:
        """
        Generate and parse MCQs.

        Args:
            text: Source content to write questions about
            count: Requested number of questions, clamped to 1..200

        Returns:
            Records in the order the model produced them (never empty)

        Raises:
            GenerationError: no completion came back, or nothing in it parsed
        """
        count = clamp_count(count)
        if len(text) > MAX_TEXT_LENGTH:
            logger.info(f"Truncating source text from {len(text)} to {MAX_TEXT_LENGTH} chars")

        logger.info(f"Generating {count} MCQs")
        try:
            completion = self.llm_client.complete(
                build_prompt(text, count),
                temperature=TEMPERATURE,
                max_tokens=min(MAX_COMPLETION_TOKENS, count * TOKENS_PER_QUESTION)
            )
        except LLMClientError as e:
            raise GenerationError(
                f"LLM failed: {e.message}",
                details={"provider": e.provider, **e.details}
            )

        if not completion or not completion.strip():
            raise GenerationError("AI returned empty response. Please try again.")

        logger.info(f"Completion length: {len(completion)} chars")
        result = parse_mcq_response_detailed(completion[:MAX_TEXT_LENGTH])

        if not result.records:
            raise GenerationError(
                "Could not parse any questions from the AI response. Please try again.",
                details={
                    "segments": result.segment_count,
                    "skipped": [reason.describe() for reason in result.skipped],
                }
            )

        if result.skipped:
            logger.warning(f"Skipped {result.skipped_count} malformed questions")
        return result.records


def generate_questions(text: str, count: int = 10,
                       provider: Optional[LLMProvider] = None) -> list[QuestionRecord]:
    """Convenience function to generate MCQs."""
    return QuestionGenerator(provider=provider).generate(text, count)
