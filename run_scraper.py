#!/usr/bin/env python3
"""
CLI script to turn saved HTML pages into content blocks.

Reads each file, narrows it to the article body, extracts typed blocks and
prints the resulting articles as JSON.

Usage:
    python run_scraper.py page.html
    python run_scraper.py saved/*.html -o articles.json
    python run_scraper.py page.html --url https://example.com/story --ordered
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from prep_parser.scraper import PageScraper
from prep_parser.logger import setup_logger


def main():
    parser = argparse.ArgumentParser(description="Extract content blocks from HTML files")
    parser.add_argument("files", nargs="+", help="HTML files to process")
    parser.add_argument("--output", "-o", help="Output JSON file")
    parser.add_argument("--url", default="", help="Source URL to record (single file)")
    parser.add_argument(
        "--ordered",
        action="store_true",
        help="Emit blocks in document order instead of grouped by type"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    setup_logger(level=logging.DEBUG if args.verbose else logging.WARNING)

    scraper = PageScraper(ordered_blocks=args.ordered)
    results = []

    for filepath in args.files:
        path = Path(filepath)
        print(f"Scraping: {path.name}", file=sys.stderr)

        try:
            html = path.read_text(encoding="utf-8", errors="replace")
            article = scraper.scrape(html, url=args.url)
        except OSError as e:
            results.append({"file": path.name, "status": "error", "error": str(e)})
            print(f"  ✗ Error: {e}", file=sys.stderr)
            continue

        # Nothing extracted is reported, not raised: the page may just be empty
        status = "success" if article.content_blocks else "empty"
        results.append({
            "file": path.name,
            "status": status,
            "article": article.model_dump(mode="json"),
        })
        print(f"  ✓ {len(article.content_blocks)} blocks, title: {article.title}", file=sys.stderr)

    # ensure_ascii=False keeps non-English text readable
    output = json.dumps(results, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"\nSaved to: {args.output}", file=sys.stderr)
    else:
        print(output)


if __name__ == "__main__":
    main()
