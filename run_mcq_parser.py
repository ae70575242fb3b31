#!/usr/bin/env python3
"""
CLI script to parse MCQs out of model completions.

By default each file is a saved completion and is parsed directly, with no
LLM call. With --generate (-g) each file is treated as source text: the LLM
writes the questions first (needs an API key, see LLM_PROVIDER).

Usage:
    python run_mcq_parser.py completion.txt
    python run_mcq_parser.py notes.txt --generate --count 20 -o questions.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Load .env file automatically (API keys, LLM_PROVIDER)
from dotenv import load_dotenv
load_dotenv()

from prep_parser.assembler import parse_mcq_response_detailed
from prep_parser.exceptions import GenerationError
from prep_parser.generator import QuestionGenerator
from prep_parser.logger import setup_logger


def main():
    parser = argparse.ArgumentParser(description="Parse multiple-choice questions from text files")
    parser.add_argument("files", nargs="+", help="Completion (or source) text files")
    parser.add_argument("--output", "-o", help="Output JSON file")
    parser.add_argument(
        "--generate", "-g",
        action="store_true",
        help="Treat files as source text and generate questions with the LLM"
    )
    parser.add_argument("--count", "-n", type=int, default=10, help="Questions to generate")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    setup_logger(level=logging.DEBUG if args.verbose else logging.WARNING)

    # Only build a generator (which needs an API key) if --generate was requested
    generator = None
    if args.generate:
        try:
            generator = QuestionGenerator()
        except GenerationError as e:
            print(f"✗ {e.message}", file=sys.stderr)
            sys.exit(1)

    results = []

    for filepath in args.files:
        path = Path(filepath)
        print(f"Parsing: {path.name}", file=sys.stderr)

        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            results.append({"file": path.name, "status": "error", "error": str(e)})
            print(f"  ✗ Error: {e}", file=sys.stderr)
            continue

        if generator:
            try:
                records = generator.generate(text, count=args.count)
            except GenerationError as e:
                results.append({"file": path.name, "status": "error", **e.to_response()})
                print(f"  ✗ Error: {e.message}", file=sys.stderr)
                continue
            results.append({
                "file": path.name,
                "status": "success",
                "records": [r.model_dump() for r in records],
            })
            print(f"  ✓ {len(records)} questions", file=sys.stderr)
            continue

        result = parse_mcq_response_detailed(text)
        results.append({
            "file": path.name,
            "status": "success" if result.records else "empty",
            "records": [r.model_dump() for r in result.records],
            "skipped": [reason.describe() for reason in result.skipped],
            "defaulted_answers": result.defaulted_answers,
        })
        print(
            f"  ✓ {len(result.records)} of {result.segment_count} questions "
            f"({result.skipped_count} skipped)",
            file=sys.stderr
        )

    output = json.dumps(results, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"\nSaved to: {args.output}", file=sys.stderr)
    else:
        print(output)


if __name__ == "__main__":
    main()
