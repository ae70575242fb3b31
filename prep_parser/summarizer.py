"""
LLM-based article summarizer for revision notes.

Takes the flattened text of a scraped article and asks the model for a
summary, key points and UPSC syllabus mapping, returned as JSON. Also writes
short Mains answers from a set of saved notes.

Input:  plain text (usually ScrapedArticle.content) + optional title, or a
        topic + list of Notes
Output: SummaryResult, UPSCAnalysis or NotesAnswer
"""

from typing import Optional

from pydantic import ValidationError

from .exceptions import LLMClientError, SummarizationError
from .llm_client import BaseLLMClient, LLMClient, LLMProvider
from .schemas import MainsRelevance, Note, NotesAnswer, SummaryResult, UPSCAnalysis
from .logger import get_module_logger

logger = get_module_logger("summarizer")

MAX_CONTENT_LENGTH = 8000
TRUNCATION_MARKER = "...[truncated]"
MIN_CONTENT_LENGTH = 50

TEMPERATURE = 0.3

SYSTEM_PROMPT = """You are an expert UPSC exam coach and content summarizer. Your task is to analyze articles and extract UPSC-relevant information.

When summarizing content:
1. Focus on facts, data, and concepts relevant to UPSC Civil Services Exam
2. Identify key points for Prelims (factual) and Mains (analytical)
3. Suggest relevant GS paper associations (GS1: History/Geography/Culture, GS2: Polity/Governance/IR, GS3: Economy/S&T/Environment, GS4: Ethics)
4. Extract important dates, persons, places, and data points
5. Keep the summary concise but comprehensive (around 200-300 words)
6. Suggest appropriate tags for organization

Respond in JSON format."""

SUMMARY_PROMPT = """Please summarize the following article for UPSC preparation:

{title}Content:
{content}

Provide your response in the following JSON format:
{{
    "summary": "A comprehensive 200-300 word summary focusing on UPSC-relevant information",
    "keyPoints": ["List of 5-7 key bullet points for quick revision"],
    "relevantTopics": ["List of UPSC syllabus topics this relates to"],
    "suggestedTags": ["Suggested tags like GS1, Geography, Environment, etc."]
}}"""

ANALYSIS_PROMPT = """Analyze the following content for UPSC Civil Services Exam preparation:

{title}Content:
{content}

Provide detailed analysis in the following JSON format:
{{
    "summary": "200-300 word comprehensive summary",
    "keyPoints": ["5-7 key points for revision"],
    "relevantTopics": ["Related UPSC syllabus topics"],
    "suggestedTags": ["Tags for organization"],
    "mainsRelevance": {{
        "gs1": "Relevance to GS1 (History, Geography, Culture, Society) if any",
        "gs2": "Relevance to GS2 (Polity, Governance, IR, Social Justice) if any",
        "gs3": "Relevance to GS3 (Economy, S&T, Environment, Security) if any",
        "gs4": "Relevance to GS4 (Ethics, Integrity, Aptitude) if any"
    }},
    "prelims": ["Factual points for Prelims MCQs"],
    "importantDates": ["Any significant dates mentioned"],
    "importantPersons": ["Key persons/personalities mentioned"]
}}

Only include paper relevance if genuinely applicable. Respond with valid JSON only."""


ANSWER_SYSTEM_PROMPT = "You are an expert UPSC Mains answer writer. Write structured, fact-based answers using the provided sources."

ANSWER_PROMPT = """Based on the following notes/sources, write a comprehensive UPSC Mains-style answer on the topic: "{topic}"

Sources:
{sources}

Requirements:
1. Write exactly 200 words (UPSC standard)
2. Structure: Introduction → Body → Conclusion
3. Use facts and data from the sources
4. Maintain exam-appropriate language
5. Include relevant examples

Respond in JSON format:
{{
    "answer": "Your 200-word structured answer",
    "sources": ["List of sources used"]
}}"""

NOTE_EXCERPT_LENGTH = 1500
ANSWER_TEMPERATURE = 0.4
ANSWER_MAX_TOKENS = 1500


def truncate_content(content: str) -> str:
    """Cut content to MAX_CONTENT_LENGTH, marking the cut."""
    if len(content) > MAX_CONTENT_LENGTH:
        return content[:MAX_CONTENT_LENGTH] + TRUNCATION_MARKER
    return content


def build_notes_context(notes: list[Note]) -> str:
    """Numbered source excerpts, each cut to NOTE_EXCERPT_LENGTH, separated by rules."""
    return '\n\n---\n\n'.join(
        f"[Source {i}: {note.label}]\n{note.content[:NOTE_EXCERPT_LENGTH]}"
        for i, note in enumerate(notes, start=1)
    )


def _string_list(value) -> list[str]:
    # Models sometimes answer a list field with a single string
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(item) for item in value if item]
    return []


def _text(value, default: str) -> str:
    # A list where a string was asked for is joined rather than rejected
    if isinstance(value, list):
        value = ' '.join(str(item) for item in value if item)
    if not value:
        return default
    return value if isinstance(value, str) else str(value)


class Summarizer:
    """Summarizes article text with an LLM."""

    def __init__(
        self,
        llm_client: Optional[BaseLLMClient] = None,
        provider: Optional[LLMProvider] = None
    ):
        self.llm_client = llm_client
        if self.llm_client is None:
            try:
                self.llm_client = LLMClient.create(provider=provider)
            except LLMClientError as e:
                raise SummarizationError(
                    f"Failed to initialize LLM client: {e.message}",
                    details={"provider": e.provider}
                )

    def _ask(
        self,
        prompt: str,
        max_tokens: int,
        system_prompt: str = SYSTEM_PROMPT,
        temperature: float = TEMPERATURE
    ) -> dict:
        try:
            response = self.llm_client.complete_json(
                prompt,
                system_prompt=system_prompt,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except LLMClientError as e:
            raise SummarizationError(
                f"LLM failed: {e.message}",
                details={"provider": e.provider, **e.details}
            )

        if not isinstance(response, dict):
            raise SummarizationError(
                "Model returned JSON that is not an object",
                details={"response": response}
            )
        return response

    def _article_prompt(self, template: str, content: str, title: Optional[str]) -> str:
        return template.format(
            title=f"Title: {title}\n\n" if title else "",
            content=truncate_content(content)
        )

    def summarize(self, content: str, title: Optional[str] = None) -> SummaryResult:
        """
        Summarize article content.

        Raises:
            SummarizationError: content too short, or the LLM call failed
        """
        if not content or len(content) < MIN_CONTENT_LENGTH:
            raise SummarizationError("Content too short to summarize")

        logger.info(f"Summarizing {len(content)} chars")
        response = self._ask(self._article_prompt(SUMMARY_PROMPT, content, title), max_tokens=2048)

        return SummaryResult(
            summary=_text(response.get("summary"), "Summary not available"),
            key_points=_string_list(response.get("keyPoints")),
            relevant_topics=_string_list(response.get("relevantTopics")),
            suggested_tags=_string_list(response.get("suggestedTags")),
        )

    def analyze_for_upsc(self, content: str, title: Optional[str] = None) -> UPSCAnalysis:
        """
        Detailed exam analysis of article content.

        Raises:
            SummarizationError: empty content, or the LLM call failed
        """
        if not content or not content.strip():
            raise SummarizationError("No content to analyze")

        logger.info(f"Analyzing {len(content)} chars for UPSC relevance")
        response = self._ask(self._article_prompt(ANALYSIS_PROMPT, content, title), max_tokens=3000)

        relevance = response.get("mainsRelevance") or {}
        try:
            mains_relevance = MainsRelevance(**{
                paper: str(text) for paper, text in relevance.items()
                if paper in ("gs1", "gs2", "gs3", "gs4") and text
            })
        except (AttributeError, ValidationError):
            logger.warning("Ignoring malformed mainsRelevance in model reply")
            mains_relevance = MainsRelevance()

        return UPSCAnalysis(
            summary=_text(response.get("summary"), "Summary not available"),
            key_points=_string_list(response.get("keyPoints")),
            relevant_topics=_string_list(response.get("relevantTopics")),
            suggested_tags=_string_list(response.get("suggestedTags")),
            mains_relevance=mains_relevance,
            prelims=_string_list(response.get("prelims")),
            important_dates=_string_list(response.get("importantDates")),
            important_persons=_string_list(response.get("importantPersons")),
        )

    def answer_from_notes(self, topic: str, notes: list[Note]) -> NotesAnswer:
        """
        Write a 200-word Mains answer on a topic from saved notes.

        Each note contributes its first 1,500 characters. When the model does
        not list its sources, every note's title is reported instead.

        Raises:
            SummarizationError: no topic or no notes, or the LLM call failed
        """
        if not topic or not topic.strip():
            raise SummarizationError("No topic to answer")
        if not notes:
            raise SummarizationError("No notes to answer from")

        logger.info(f"Writing answer on {topic!r} from {len(notes)} notes")
        prompt = ANSWER_PROMPT.format(topic=topic, sources=build_notes_context(notes))
        response = self._ask(
            prompt,
            max_tokens=ANSWER_MAX_TOKENS,
            system_prompt=ANSWER_SYSTEM_PROMPT,
            temperature=ANSWER_TEMPERATURE
        )

        return NotesAnswer(
            answer=_text(response.get("answer"), ""),
            sources=_string_list(response.get("sources")) or [note.title for note in notes],
        )
