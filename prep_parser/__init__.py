"""
Exam-prep parser

Turns unreliable text into typed records:
- MCQ path:  model completion → Segmenter → field rules → RecordAssembler
- HTML path: page body → HtmlSanitizer → BlockExtractor → flattened text

Public API surface:
  MCQ parsing      — parse_mcq_response, parse_mcq_response_detailed, segment_questions
  HTML extraction  — HtmlSanitizer, BlockExtractor, PageScraper, strip_tags, flatten_blocks
  LLM services     — QuestionGenerator, Summarizer, LLMClient, LLMProvider
  Data models      — QuestionRecord, SkipReason, ParseResult, ContentBlock, BlockKind,
                     ScrapedArticle, SummaryResult, UPSCAnalysis, Note, NotesAnswer
  Error types      — PrepParserError, GenerationError, SummarizationError, LLMClientError
"""

# --- MCQ path ---
from .segmenter import segment_questions
from .fields import extract_fields
from .assembler import RecordAssembler, parse_mcq_response, parse_mcq_response_detailed

# --- HTML path ---
from .sanitizer import HtmlSanitizer, strip_tags
from .extractor import BlockExtractor, flatten_blocks
from .scraper import PageScraper, scrape_html, is_valid_url, extract_domain

# --- LLM-backed services ---
from .llm_client import LLMClient, LLMProvider, BaseLLMClient
from .generator import QuestionGenerator
from .summarizer import Summarizer

# --- Data models ---
from .schemas import (
    QuestionRecord,
    QuestionFields,
    SkipReason,
    ParseResult,
    Segment,
    ContentBlock,
    BlockKind,
    ScrapedArticle,
    SummaryResult,
    UPSCAnalysis,
    Note,
    NotesAnswer,
)

# --- Exceptions ---
from .exceptions import PrepParserError, GenerationError, SummarizationError, LLMClientError

__version__ = "0.1.0"
__all__ = [
    "segment_questions",
    "extract_fields",
    "RecordAssembler",
    "parse_mcq_response",
    "parse_mcq_response_detailed",
    "HtmlSanitizer",
    "strip_tags",
    "BlockExtractor",
    "flatten_blocks",
    "PageScraper",
    "scrape_html",
    "is_valid_url",
    "extract_domain",
    "LLMClient",
    "LLMProvider",
    "BaseLLMClient",
    "QuestionGenerator",
    "Summarizer",
    "QuestionRecord",
    "QuestionFields",
    "SkipReason",
    "ParseResult",
    "Segment",
    "ContentBlock",
    "BlockKind",
    "ScrapedArticle",
    "SummaryResult",
    "UPSCAnalysis",
    "Note",
    "NotesAnswer",
    "PrepParserError",
    "GenerationError",
    "SummarizationError",
    "LLMClientError",
]
