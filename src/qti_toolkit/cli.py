"""
Module: cli

Purpose:
    Command line entry point.

        qti-toolkit parse   INPUT [--type T] [--html FILE] [-o questions.json]
        qti-toolkit convert QUESTIONS.json -o package.zip [--title T] [--shuffle] ...
        qti-toolkit build   INPUT -o package.zip [parse + convert options]

    Exit status: 0 on success, 1 when the input cannot be parsed,
    converted or loaded, 2 on usage errors.

Key Functions:
    - main(): Parse arguments and dispatch to a command
    - build_parser(): The argparse parser (for tests and docs)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from qti_toolkit import __version__
from qti_toolkit.builder import PackageConfig, generate_qti_package, write_package_zip
from qti_toolkit.core.errors import QTIToolkitError
from qti_toolkit.core.models import ParseMode, Question
from qti_toolkit.core.schemas import ValidationError
from qti_toolkit.core.utils import load_questions_json, save_questions_json, serialize_questions
from qti_toolkit.extractor import (
    DiagnosticsCollector,
    ExtractionConfig,
    ExtractionResult,
    load_source,
    parse_questions,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def _parse_mode(value: str) -> ParseMode:
    try:
        return ParseMode.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


# ─────────────────────────────────────────────────────────────────────────────
# Argument parser
# ─────────────────────────────────────────────────────────────────────────────

def _add_parse_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", type=Path, help="Source document (.txt, .html, .htm or .pdf)")
    parser.add_argument(
        "--type", "-t",
        dest="question_type",
        type=_parse_mode,
        default=ParseMode.AUTO,
        help="Question type: MCQ, EMQ, SAQ, MIXED or auto (default: auto)",
    )
    parser.add_argument("--html", type=Path, help="HTML rendering of the same document (tables)")
    parser.add_argument("--diagnostics", type=Path, help="Write an item-level issue report (JSON)")
    parser.add_argument("--timings", type=Path, help="Append phase timings to this JSON file")


def _add_package_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--output", "-o", type=Path, required=True, help="Output package (.zip)")
    parser.add_argument("--title", help="Assessment title (default: input file name)")
    parser.add_argument("--shuffle", action="store_true", help="Allow choice shuffling")
    parser.add_argument(
        "--include-metadata",
        action="store_true",
        help="Add question profile/statistics as manifest keywords",
    )
    parser.add_argument(
        "--deterministic-ids",
        action="store_true",
        help="Derive identifiers from content (reproducible packages)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qti-toolkit",
        description="Convert exam text (MCQ, EMQ, SAQ) into IMS QTI 2.1 packages.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    parse_cmd = commands.add_parser("parse", help="Extract questions to JSON")
    _add_parse_options(parse_cmd)
    parse_cmd.add_argument("--output", "-o", type=Path, help="questions.json (default: stdout)")

    convert_cmd = commands.add_parser("convert", help="Package a questions JSON file")
    convert_cmd.add_argument("questions", type=Path, help="questions.json from 'parse'")
    _add_package_options(convert_cmd)

    build_cmd = commands.add_parser("build", help="Parse and package in one step")
    _add_parse_options(build_cmd)
    _add_package_options(build_cmd)

    return parser


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────

def _extract(args: argparse.Namespace) -> ExtractionResult:
    source = load_source(args.input, args.html)
    collector = DiagnosticsCollector() if args.diagnostics else None
    try:
        result = parse_questions(
            source.text,
            args.question_type,
            filename=source.filename,
            html_content=source.html or "",
            config=ExtractionConfig(),
            diagnostics_collector=collector,
        )
    finally:
        if collector is not None:
            collector.generate_report().save(args.diagnostics)
    if args.timings:
        result.timing.save(args.timings, label=source.filename)
    for warning in result.warnings:
        logger.warning(warning)
    return result


def _package(questions: List[Question], args: argparse.Namespace, default_title: str) -> Path:
    config = PackageConfig(
        title=args.title or default_title,
        shuffle_answers=args.shuffle,
        include_metadata=args.include_metadata,
        deterministic_identifiers=args.deterministic_ids,
    )
    package = generate_qti_package(questions, config=config)
    return write_package_zip(package, args.output)


def cmd_parse(args: argparse.Namespace) -> int:
    result = _extract(args)
    if args.output:
        save_questions_json(
            result.questions,
            args.output,
            result.parse_mode,
            source=args.input.name,
            warnings=result.warnings,
        )
        logger.info(f"Saved {result.question_count} questions to {args.output}")
    else:
        data = serialize_questions(
            result.questions, result.parse_mode, source=args.input.name, warnings=result.warnings
        )
        json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
    return EXIT_OK


def cmd_convert(args: argparse.Namespace) -> int:
    questions = load_questions_json(args.questions)
    path = _package(questions, args, args.questions.stem)
    print(f"Package written to: {path}")
    return EXIT_OK


def cmd_build(args: argparse.Namespace) -> int:
    result = _extract(args)
    path = _package(result.questions, args, args.input.stem)
    print(f"{result.question_count} {result.parse_mode} questions packaged to: {path}")
    return EXIT_OK


COMMANDS = {
    "parse": cmd_parse,
    "convert": cmd_convert,
    "build": cmd_build,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return COMMANDS[args.command](args)
    except (QTIToolkitError, ValidationError) as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
