"""
Pydantic schemas for everything the parser hands back to callers.

MCQ path:   completion text → Segment → QuestionFields | SkipReason → QuestionRecord
HTML path:  page body → ContentBlock list → ScrapedArticle
LLM side:   SummaryResult / UPSCAnalysis parsed from JSON replies

Records are frozen: once the assembler or the block extractor builds one,
nobody mutates it.
"""

from enum import Enum
from typing import Annotated, Literal, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field


OptionLetter = Literal["A", "B", "C", "D"]


# --- MCQ path ---

class Segment(NamedTuple):
    """Text between one "Question N:" marker and the next."""
    label: int   # N, verbatim from the source text
    body: str


class QuestionRecord(BaseModel):
    """One finished multiple-choice question."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Label taken verbatim from 'Question N:'")
    question: str = Field(min_length=1, description="Question stem")
    option_a: str = Field(min_length=1)
    option_b: str = Field(min_length=1)
    option_c: str = Field(min_length=1)
    option_d: str = Field(min_length=1)
    correct_answer: OptionLetter = "A"
    explanation: str

    @property
    def options(self) -> dict[str, str]:
        return {
            "A": self.option_a,
            "B": self.option_b,
            "C": self.option_c,
            "D": self.option_d,
        }


class QuestionFields(BaseModel):
    """Complete field set pulled out of one segment by the field extractor."""
    model_config = ConfigDict(frozen=True)

    stem: str
    options: dict[str, str]              # keyed "A".."D", all non-empty
    correct_answer: OptionLetter
    explanation: str
    # Defaults are recorded so callers can flag them for human review
    answer_defaulted: bool = False
    explanation_defaulted: bool = False


class SkipReason(BaseModel):
    """Why a segment was dropped instead of becoming a record."""
    model_config = ConfigDict(frozen=True)

    code: Literal["missing_stem", "short_stem", "missing_option"]
    letter: Optional[OptionLetter] = None   # set for missing_option
    label: Optional[int] = None             # filled in by the assembler

    @classmethod
    def missing_stem(cls) -> "SkipReason":
        return cls(code="missing_stem")

    @classmethod
    def short_stem(cls) -> "SkipReason":
        return cls(code="short_stem")

    @classmethod
    def missing_option(cls, letter: str) -> "SkipReason":
        return cls(code="missing_option", letter=letter)

    def describe(self) -> str:
        where = f"question {self.label}" if self.label is not None else "segment"
        if self.code == "missing_option":
            return f"{where}: missing option {self.letter}"
        return f"{where}: {self.code.replace('_', ' ')}"


class ParseResult(BaseModel):
    """Records plus diagnostics from one pass over a completion."""
    records: list[QuestionRecord] = Field(default_factory=list)
    skipped: list[SkipReason] = Field(default_factory=list)
    segment_count: int = 0
    # Labels of records whose answer / explanation was filled in by default
    defaulted_answers: list[int] = Field(default_factory=list)
    defaulted_explanations: list[int] = Field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


# --- HTML path ---

class BlockKind(str, Enum):
    """Type tag of a content block."""
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BULLET_LIST = "bullet-list"
    NUMBERED_LIST = "numbered-list"
    QUOTE = "quote"


class ContentBlock(BaseModel):
    """
    One unit of extracted page content.

    text is meaningful for every kind; for lists it is the items joined with
    ", " (the display form). level is set for headings only, items for list
    kinds only and never empty.
    """
    model_config = ConfigDict(frozen=True)

    kind: BlockKind
    text: str
    level: Optional[Annotated[int, Field(ge=1, le=6)]] = None
    items: Optional[Annotated[list[str], Field(min_length=1)]] = None

    def plain_text(self) -> str:
        """Text used when blocks are flattened: list items one per line."""
        if self.items:
            return "\n".join(self.items)
        return self.text


class PageMetadata(BaseModel):
    """Head-of-document metadata read from <title> and <meta> tags."""
    title: str = ""
    description: str = ""
    author: Optional[str] = None
    published_date: Optional[str] = None
    featured_image: Optional[str] = None


class ScrapedArticle(BaseModel):
    """A page body turned into blocks plus the flattened plain text."""
    url: str = ""
    title: str = "Untitled"
    content: str = ""
    content_blocks: list[ContentBlock] = Field(default_factory=list)
    author: Optional[str] = None
    published_date: Optional[str] = None
    meta_description: str = ""
    featured_image: Optional[str] = None


# --- LLM replies ---

class SummaryResult(BaseModel):
    """Article summary for revision notes."""
    summary: str = "Summary not available"
    key_points: list[str] = Field(default_factory=list)
    relevant_topics: list[str] = Field(default_factory=list)
    suggested_tags: list[str] = Field(default_factory=list)


class MainsRelevance(BaseModel):
    """Relevance to each General Studies paper, when there is any."""
    gs1: Optional[str] = None
    gs2: Optional[str] = None
    gs3: Optional[str] = None
    gs4: Optional[str] = None


class UPSCAnalysis(SummaryResult):
    """Summary plus exam-specific analysis."""
    mains_relevance: MainsRelevance = Field(default_factory=MainsRelevance)
    prelims: list[str] = Field(default_factory=list)
    important_dates: list[str] = Field(default_factory=list)
    important_persons: list[str] = Field(default_factory=list)


class Note(BaseModel):
    """One saved note used as a source for a written answer."""
    title: str
    content: str
    source: Optional[str] = None

    @property
    def label(self) -> str:
        return self.source or self.title


class NotesAnswer(BaseModel):
    """Mains-style answer written from a set of notes."""
    answer: str = ""
    sources: list[str] = Field(default_factory=list)
