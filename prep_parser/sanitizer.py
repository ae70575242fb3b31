"""
String-level HTML cleanup for article extraction.

Narrows a full page body down to the part most likely to hold the article:
- Strips script and style blocks and HTML comments
- Drops page chrome (nav, header, footer, aside) and boilerplate divs
- Picks the first <article>, else the first <main>, else what is left

Design principle: NEVER FAIL on bad HTML. A pattern that does not match just
falls through to the next rule.

Pipeline position: Stage 1 of 2 (HtmlSanitizer → BlockExtractor).
Input:  raw HTML string
Output: narrowed HTML string
"""

import re

from .logger import get_module_logger

logger = get_module_logger("sanitizer")


# Any tag-delimited marker. Deliberately loose: malformed tags lose whatever
# lies between '<' and the next '>'.
TAG_PATTERN = re.compile(r'<[^>]+>')


def strip_tags(fragment: str) -> str:
    """Remove every tag from a markup fragment and trim the result."""
    return TAG_PATTERN.sub('', fragment).strip()


class HtmlSanitizer:
    """
    Rule-based HTML sanitizer.

    Each step is its own method so the rules can be exercised one at a time;
    sanitize() runs them in order.
    """

    # Script/style bodies may contain '<' (e.g. "a < b"), so the body is
    # consumed one '<' at a time until the matching close tag.
    SCRIPT_PATTERN = re.compile(
        r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>', re.IGNORECASE
    )
    STYLE_PATTERN = re.compile(
        r'<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>', re.IGNORECASE
    )
    COMMENT_PATTERN = re.compile(r'<!--.*?-->', re.DOTALL)

    # Page chrome removed wholesale
    CHROME_TAGS = ('nav', 'header', 'footer', 'aside')

    # Class-name vocabulary for boilerplate divs. Substring match, and the
    # tokens themselves are matched case-sensitively.
    BOILERPLATE_CLASSES = (
        'sidebar', 'advertisement', 'ads', 'comments', 'related', 'social', 'share'
    )

    ARTICLE_PATTERN = re.compile(r'<article\b[^>]*>(.*?)</article>', re.IGNORECASE | re.DOTALL)
    MAIN_PATTERN = re.compile(r'<main\b[^>]*>(.*?)</main>', re.IGNORECASE | re.DOTALL)

    def __init__(self):
        self._chrome_patterns = [
            re.compile(rf'<{tag}\b[^>]*>.*?</{tag}>', re.IGNORECASE | re.DOTALL)
            for tag in self.CHROME_TAGS
        ]
        vocabulary = '|'.join(self.BOILERPLATE_CLASSES)
        # Non-greedy up to the first </div>: a nested div cuts the match short.
        self._boilerplate_div_pattern = re.compile(
            rf'<div[^>]*class="[^"]*(?-i:{vocabulary})[^"]*"[^>]*>.*?</div>',
            re.IGNORECASE | re.DOTALL
        )

    def remove_scripts(self, html: str) -> str:
        """Remove script and style blocks and HTML comments."""
        cleaned = self.SCRIPT_PATTERN.sub('', html)
        cleaned = self.STYLE_PATTERN.sub('', cleaned)
        return self.COMMENT_PATTERN.sub('', cleaned)

    def remove_boilerplate(self, html: str) -> str:
        """Remove nav/header/footer/aside blocks and boilerplate divs."""
        cleaned = html
        removed = 0

        for pattern in self._chrome_patterns:
            cleaned, count = pattern.subn('', cleaned)
            removed += count

        cleaned, count = self._boilerplate_div_pattern.subn('', cleaned)
        removed += count

        if removed:
            logger.debug(f"Removed {removed} boilerplate containers")
        return cleaned

    def select_main_content(self, html: str) -> str:
        """Return the first <article> body, else the first <main> body, else the input."""
        match = self.ARTICLE_PATTERN.search(html)
        if match:
            logger.debug("Selected <article> content")
            return match.group(1)

        match = self.MAIN_PATTERN.search(html)
        if match:
            logger.debug("Selected <main> content")
            return match.group(1)

        logger.debug("No <article> or <main>, using whole document")
        return html

    def sanitize(self, html: str) -> str:
        """
        Narrow a full HTML document to its most likely article body.

        Args:
            html: Raw HTML string

        Returns:
            Sanitized HTML substring
        """
        if not isinstance(html, str):
            raise TypeError(f"html must be a str, got {type(html).__name__}")

        cleaned = self.remove_scripts(html)
        cleaned = self.remove_boilerplate(cleaned)
        return self.select_main_content(cleaned)


def sanitize(html: str) -> str:
    """Convenience function to sanitize HTML."""
    return HtmlSanitizer().sanitize(html)
