"""
Page scraper: an already-fetched HTML body in, a ScrapedArticle out.

Coordinates the two HTML stages (HtmlSanitizer → BlockExtractor) and reads
head metadata (title, description, author, publish date, image) with
BeautifulSoup. Fetching the page is the caller's job.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .extractor import BlockExtractor, flatten_blocks
from .sanitizer import HtmlSanitizer
from .schemas import PageMetadata, ScrapedArticle
from .logger import get_module_logger

logger = get_module_logger("scraper")

# "Story title | Site" / "Story title - Site" → "Story title"
TITLE_SUFFIX_PATTERN = re.compile(r'\s*(?:\||\s[-–—])\s*[^|]*$')


def clean_title(title: str) -> str:
    """Drop a trailing site-name suffix from a page title."""
    return TITLE_SUFFIX_PATTERN.sub('', title, count=1).strip()


def is_valid_url(url: str) -> bool:
    """True for http(s) URLs with a host."""
    try:
        parsed = urlparse(url)
    except (TypeError, ValueError):
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def extract_domain(url: str) -> str:
    """Hostname without a leading "www.", or the input when it does not parse."""
    try:
        hostname = urlparse(url).hostname
    except (TypeError, ValueError):
        return url
    if not hostname:
        return url
    return hostname.removeprefix('www.')


def _parse_soup(html: str) -> BeautifulSoup:
    # Parser fallback chain: html5lib → lxml → html.parser. html5lib copes with
    # the worst markup; html.parser needs no extra packages.
    try:
        return BeautifulSoup(html, 'html5lib')
    except Exception as e:
        logger.warning(f"html5lib parsing failed, trying lxml: {e}")
    try:
        return BeautifulSoup(html, 'lxml')
    except Exception as e:
        logger.warning(f"lxml parsing also failed: {e}")
    return BeautifulSoup(html, 'html.parser')


def _meta_content(soup: BeautifulSoup, **attrs) -> Optional[str]:
    tag = soup.find('meta', attrs=attrs)
    if tag is None:
        return None
    content = (tag.get('content') or '').strip()
    return content or None


def extract_page_metadata(html: str) -> PageMetadata:
    """Read title and <meta> tags from the full, unsanitized document."""
    soup = _parse_soup(html)

    title = soup.title.get_text(strip=True) if soup.title else ''
    og_title = _meta_content(soup, property='og:title')
    if og_title:
        title = og_title

    return PageMetadata(
        title=title,
        description=_meta_content(soup, name='description') or '',
        author=_meta_content(soup, name='author'),
        published_date=_meta_content(soup, property='article:published_time'),
        featured_image=_meta_content(soup, property='og:image'),
    )


class PageScraper:
    """
    Turns a page body into a ScrapedArticle.

    Stages:
    1. Metadata: BeautifulSoup over the full document
    2. Sanitizer: narrow to the article body
    3. Extractor: typed blocks, then flattened plain text
    """

    def __init__(self, ordered_blocks: bool = False):
        self.sanitizer = HtmlSanitizer()
        self.extractor = BlockExtractor(ordered=ordered_blocks)

    def scrape(self, html: str, url: str = '') -> ScrapedArticle:
        """
        Scrape an HTML body.

        Args:
            html: Full HTTP response body
            url: Where the body came from (recorded, never fetched)

        Returns:
            ScrapedArticle; content_blocks may be empty
        """
        if not isinstance(html, str):
            raise TypeError(f"html must be a str, got {type(html).__name__}")

        logger.info(f"Scraping {url or 'document'} ({len(html)} chars)")
        metadata = extract_page_metadata(html)

        main_content = self.sanitizer.sanitize(html)
        blocks = self.extractor.extract(main_content)

        if not blocks:
            logger.warning(f"No content blocks found in {url or 'document'}")

        return ScrapedArticle(
            url=url,
            title=clean_title(metadata.title) or 'Untitled',
            content=flatten_blocks(blocks),
            content_blocks=blocks,
            author=metadata.author,
            published_date=metadata.published_date,
            meta_description=metadata.description,
            featured_image=metadata.featured_image,
        )


def scrape_html(html: str, url: str = '') -> ScrapedArticle:
    """Convenience function to scrape an HTML body."""
    return PageScraper().scrape(html, url)
