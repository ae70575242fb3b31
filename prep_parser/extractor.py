"""
Rule-based content block extractor.

Turns sanitized markup into typed ContentBlocks: headings, paragraphs,
bullet and numbered lists, quotes.

Blocks come out grouped by type, not in document order: all headings first,
then paragraphs, then lists, then quotes. Downstream summarization only reads
the flattened text, and existing notes were built with this order, so it is
kept as the default. BlockExtractor(ordered=True) sorts every match by its
start offset instead.

Pipeline position: Stage 2 of 2 (HtmlSanitizer → BlockExtractor).
Input:  sanitized HTML string
Output: list of ContentBlock
"""

import re
from typing import Callable, Iterable, Optional

from .sanitizer import HtmlSanitizer, strip_tags
from .schemas import BlockKind, ContentBlock
from .logger import get_module_logger

logger = get_module_logger("extractor")

# Paragraphs at or under this length are navigation/caption noise
MIN_PARAGRAPH_LENGTH = 20

HEADING_PATTERN = re.compile(r'<h([1-6])[^>]*>(.*?)</h\1>', re.IGNORECASE | re.DOTALL)
PARAGRAPH_PATTERN = re.compile(r'<p\b[^>]*>(.*?)</p>', re.IGNORECASE | re.DOTALL)
LIST_PATTERN = re.compile(r'<(ul|ol)\b[^>]*>(.*?)</\1>', re.IGNORECASE | re.DOTALL)
LIST_ITEM_PATTERN = re.compile(r'<li\b[^>]*>(.*?)</li>', re.IGNORECASE | re.DOTALL)
BLOCKQUOTE_PATTERN = re.compile(r'<blockquote\b[^>]*>(.*?)</blockquote>', re.IGNORECASE | re.DOTALL)


def _heading_block(match: re.Match) -> Optional[ContentBlock]:
    text = strip_tags(match.group(2))
    if not text:
        return None
    return ContentBlock(kind=BlockKind.HEADING, text=text, level=int(match.group(1)))


def _paragraph_block(match: re.Match) -> Optional[ContentBlock]:
    text = strip_tags(match.group(1))
    if len(text) <= MIN_PARAGRAPH_LENGTH:
        return None
    return ContentBlock(kind=BlockKind.PARAGRAPH, text=text)


def _list_block(match: re.Match) -> Optional[ContentBlock]:
    items = [strip_tags(item) for item in LIST_ITEM_PATTERN.findall(match.group(2))]
    items = [item for item in items if item]
    if not items:
        return None
    kind = BlockKind.NUMBERED_LIST if match.group(1).lower() == 'ol' else BlockKind.BULLET_LIST
    return ContentBlock(kind=kind, text=', '.join(items), items=items)


def _quote_block(match: re.Match) -> Optional[ContentBlock]:
    text = strip_tags(match.group(1))
    if not text:
        return None
    return ContentBlock(kind=BlockKind.QUOTE, text=text)


# (pattern, builder) pairs in emission order. The builder returns None for
# matches that should not become a block.
BLOCK_RULES: tuple[tuple[re.Pattern, Callable[[re.Match], Optional[ContentBlock]]], ...] = (
    (HEADING_PATTERN, _heading_block),
    (PARAGRAPH_PATTERN, _paragraph_block),
    (LIST_PATTERN, _list_block),
    (BLOCKQUOTE_PATTERN, _quote_block),
)


class BlockExtractor:
    """Extracts typed content blocks from sanitized HTML."""

    def __init__(self, ordered: bool = False):
        """
        Args:
            ordered: If True, emit blocks in document order instead of
                     grouping them by type.
        """
        self.ordered = ordered
        self._sanitizer = HtmlSanitizer()

    def extract(self, html: str) -> list[ContentBlock]:
        """
        Extract content blocks from HTML.

        Args:
            html: Sanitized HTML string

        Returns:
            Ordered list of ContentBlock
        """
        if not isinstance(html, str):
            raise TypeError(f"html must be a str, got {type(html).__name__}")

        # Callers normally pass sanitizer output already; scripts are removed
        # again so raw markup never leaks script bodies into paragraphs.
        cleaned = self._sanitizer.remove_scripts(html)

        found = []  # (start offset, block)
        for pattern, build in BLOCK_RULES:
            for match in pattern.finditer(cleaned):
                block = build(match)
                if block is not None:
                    found.append((match.start(), block))

        if self.ordered:
            # Stable sort: a list and the paragraph inside it keep rule order
            found.sort(key=lambda pair: pair[0])

        blocks = [block for _, block in found]
        logger.info(f"Extracted {len(blocks)} content blocks")
        return blocks


def flatten_blocks(blocks: Iterable[ContentBlock]) -> str:
    """Join block texts with blank lines; list items go one per line."""
    return '\n\n'.join(text for text in (b.plain_text() for b in blocks) if text)


def extract(html: str, ordered: bool = False) -> list[ContentBlock]:
    """Convenience function to extract content blocks from HTML."""
    return BlockExtractor(ordered=ordered).extract(html)
