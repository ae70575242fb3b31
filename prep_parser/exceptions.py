"""
Custom exceptions for the exam-prep parser.

Error philosophy:
  - Extraction never raises for bad data. Segments that cannot be parsed are
    dropped with a SkipReason, missing answers/explanations are defaulted.
  - GenerationError    → caller-visible: no completion came back, or nothing
                         in it survived parsing.
  - SummarizationError → caller-visible: content too short, or the LLM failed.
  - LLMClientError     → FAIL HARD at the client level (wrapped into one of the
                         errors above by the generator and the summarizer).
"""

from typing import Optional


class PrepParserError(Exception):
    """Base exception for all exam-prep parser errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMClientError(PrepParserError):
    """Raised when an LLM API call fails or the client cannot be built."""

    def __init__(
        self,
        message: str,
        provider: str,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.provider = provider  # "openai", "anthropic" or "openrouter"


class GenerationError(PrepParserError):
    """
    Raised by the question generator when the run produced nothing usable.

    Covers both "no response received at all" and "a response arrived but no
    question survived parsing". An empty record list is never returned from
    a generate() call.
    """

    def to_response(self) -> dict:
        """Convert to a JSON-friendly error payload."""
        return {
            "error": "GenerationError",
            "message": self.message,
            "details": self.details
        }


class SummarizationError(PrepParserError):
    """Raised when an article cannot be summarized."""
    pass
