"""Command-line interface.

Usage:
    pathsift extract app.ts
    pathsift extract data.csv --sort length-desc --dedupe
    pathsift extract page.html --json --resolve-symlinks --workspace .
    pathsift dedupe paths.txt
    pathsift sort paths.txt --order desc
    pathsift config --json

Exit status is 0 on success, 1 on errors (including unsupported formats) and
2 when a document is blocked by the safety gate.
"""

import argparse
import asyncio
import dataclasses
import json
import logging
from pathlib import Path
import sys
from typing import Any

from .config import ConfigFileError, resolve_config
from .config.audit import summarize_origins
from .documents import load_document
from .errors import sanitize_error_message
from .pipeline import PipelineResult, process_documents
from .postprocess import SORT_ORDERS, dedupe_paths, sort_paths, split_lines


EXIT_OK = 0
EXIT_ERROR = 1
EXIT_BLOCKED = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathsift",
        description="Extract, validate and resolve file paths found in documents",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    extract = sub.add_parser("extract", help="Extract paths from documents")
    extract.add_argument("files", nargs="+", type=Path, metavar="FILE")
    extract.add_argument(
        "-f", "--format", dest="language_id", help="Language id (default: by extension)"
    )
    extract.add_argument(
        "--no-validate",
        action="store_true",
        help="Keep candidates that fail format or security validation",
    )
    extract.add_argument(
        "--resolve-symlinks", action="store_true", help="Follow symbolic links"
    )
    extract.add_argument(
        "--workspace-relative",
        action="store_true",
        help="Rewrite paths relative to their workspace folder",
    )
    extract.add_argument(
        "--workspace",
        action="append",
        default=[],
        metavar="DIR",
        help="Workspace folder (repeatable)",
    )
    extract.add_argument("--dedupe", action="store_true", help="Drop repeated paths")
    extract.add_argument("--sort", choices=SORT_ORDERS, help="Sort the output")
    extract.add_argument("--json", action="store_true", help="Output as JSON")
    extract.add_argument(
        "--force", action="store_true", help="Override a safety block"
    )
    extract.add_argument("--profile", help="Configuration profile to use")

    dedupe = sub.add_parser("dedupe", help="Deduplicate a list of paths")
    dedupe.add_argument("file", help="File with one path per line, or - for stdin")

    sort = sub.add_parser("sort", help="Sort a list of paths")
    sort.add_argument("file", help="File with one path per line, or - for stdin")
    sort.add_argument("--order", choices=SORT_ORDERS, default="asc")

    config = sub.add_parser("config", help="Show the effective configuration")
    config.add_argument("--profile", help="Configuration profile to use")
    config.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def _read_lines(source: str) -> list[str]:
    if source == "-":
        return split_lines(sys.stdin.read())
    return split_lines(Path(source).read_text(encoding="utf-8"))


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.resolve_symlinks:
        overrides["resolve_symlinks"] = True
    if args.workspace_relative:
        overrides["resolve_workspace_relative"] = True
    if args.dedupe:
        overrides["dedupe_enabled"] = True
    return overrides


def _result_to_dict(result: PipelineResult) -> dict[str, Any]:
    return {
        "document": result.document,
        "fileType": result.file_type.value,
        "success": result.success,
        "blocked": result.blocked,
        "paths": list(result.paths),
        "errors": [e.message for e in result.extraction.errors],
        "warnings": [w.message for w in result.warnings],
        "safetyWarnings": list(result.safety.warnings) if result.safety else [],
        "validation": [
            {
                "path": v.path,
                "status": v.status,
                "exists": v.exists,
                "resolvedPath": v.resolved_path,
                "error": v.error,
            }
            for v in result.validation
        ],
    }


def _run_extract(args: argparse.Namespace) -> int:
    try:
        config = resolve_config(_overrides(args), profile=args.profile).to_frozen()
    except (ConfigFileError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        documents = [load_document(f, args.language_id) for f in args.files]
    except OSError as e:
        print(sanitize_error_message(f"Cannot read input: {e}"), file=sys.stderr)
        return EXIT_ERROR

    results = asyncio.run(
        process_documents(
            documents,
            config,
            workspace_folders=[str(Path(w).resolve()) for w in args.workspace],
            validate=not args.no_validate,
            confirm=(lambda _message: True) if args.force else None,
        )
    )

    if args.sort:
        results = [
            _with_paths(r, sort_paths(r.paths, args.sort)) for r in results
        ]

    if args.json:
        print(json.dumps([_result_to_dict(r) for r in results], indent=2))
    else:
        for result in results:
            for warning in result.warnings:
                print(f"warning: {warning.message}", file=sys.stderr)
            for path in result.paths:
                print(path)

    if any(r.blocked for r in results):
        return EXIT_BLOCKED
    if not all(r.success for r in results):
        return EXIT_ERROR
    return EXIT_OK


def _with_paths(result: PipelineResult, paths: list[str]) -> PipelineResult:
    return dataclasses.replace(result, paths=tuple(paths))


def _run_config(args: argparse.Namespace) -> int:
    try:
        resolved = resolve_config(profile=args.profile)
    except (ConfigFileError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.json:
        info = {
            "config": dataclasses.asdict(resolved.to_frozen()),
            "sources": dict(resolved.origin),
            "summary": summarize_origins(resolved.origin),
        }
        print(json.dumps(info, indent=2))
    else:
        print("=== Effective Configuration ===")
        print(resolved.audit())
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "extract":
        return _run_extract(args)
    if args.command == "config":
        return _run_config(args)

    try:
        lines = _read_lines(args.file)
    except OSError as e:
        print(sanitize_error_message(f"Cannot read input: {e}"), file=sys.stderr)
        return EXIT_ERROR

    if args.command == "dedupe":
        output = dedupe_paths(lines)
    else:
        output = sort_paths([line for line in lines if line.strip()], args.order)
    for line in output:
        print(line)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
