"""Command line interface for the i18nkit message extractor."""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Iterable, List, Optional

from .configuration import get_settings
from .errors import (
    I18nKitError,
    InvalidConfigurationError,
    StoreWriteError,
)
from .extractor import (
    ExtractionRunner,
    ExtractionSummary,
    ExtractOptions,
    resolve_languages,
)
from .finder import resolve_files, search_files, split_option
from .store import SQLiteMessageStore


def yes_no(value: str) -> bool:
    return value.strip().lower() != "no"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="i18nkit-extract",
        description=(
            "Extract translatable strings from PHP source files and store them "
            "in the message table. String literals passed to the __ family of "
            "functions are extracted."
        ),
    )
    parser.add_argument(
        "--paths",
        help="Comma separated list of paths that are searched for source files.",
    )
    parser.add_argument(
        "--files",
        help="Comma separated list of files to parse.",
    )
    parser.add_argument(
        "--exclude",
        help=(
            "Comma separated list of directories to exclude. Any path containing "
            "a path segment with the provided values will be skipped. E.g. test,vendors"
        ),
    )
    parser.add_argument(
        "--app",
        help="Directory where your application is located (default: current directory).",
    )
    parser.add_argument(
        "--languages",
        help="Comma separated list of languages. Defaults to the I18N_LANGUAGES setting.",
    )
    parser.add_argument(
        "--domains",
        help="Comma separated list of domains to save. Defaults to all domains.",
    )
    parser.add_argument(
        "--merge",
        choices=["yes", "no"],
        default="no",
        help="Merge all domain strings into a single `default` domain (default: no).",
    )
    parser.add_argument(
        "--extract-core",
        choices=["yes", "no"],
        default="no",
        help="Also extract messages from the framework core path (default: no).",
    )
    parser.add_argument(
        "--core-path",
        help="Framework core path. Defaults to the I18N_CORE_PATH setting.",
    )
    parser.add_argument(
        "--relative-paths",
        action="store_true",
        help="Use application relative paths in references.",
    )
    parser.add_argument(
        "--no-location",
        action="store_true",
        help="Do not write file locations for each extracted message.",
    )
    parser.add_argument(
        "--marker-error",
        action="store_true",
        help="Display the content of invalid marker calls.",
    )
    parser.add_argument(
        "--database",
        help="SQLite database file. Defaults to the I18N_DATABASE setting.",
    )
    parser.add_argument(
        "--table",
        help="Table used for storing messages. Defaults to the I18N_TABLE setting.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show each file as it is processed.",
    )
    return parser


def collect_files(
    *,
    files: Optional[str],
    paths: List[str],
    exclude: List[str],
) -> List[str]:
    if files:
        return resolve_files(split_option(files))
    return search_files(paths, exclude=exclude)


def execute_extraction(
    *,
    paths: List[str],
    files: List[str],
    languages: List[str],
    database: str,
    table: str,
    options: ExtractOptions,
) -> tuple[int, ExtractionSummary | None, str | None]:
    """Execute an extraction run and return the exit code, summary, and message."""

    try:
        store = SQLiteMessageStore(database, table)
    except I18nKitError as exc:
        return 1, None, str(exc)

    runner = ExtractionRunner(
        files=files,
        languages=languages,
        store=store,
        options=options,
        scan_paths=paths,
    )

    try:
        summary = runner.run()
    except InvalidConfigurationError as exc:
        return 1, None, str(exc)
    except StoreWriteError as exc:
        return 1, None, str(exc)
    except KeyboardInterrupt:
        return 2, None, "Extraction interrupted by user."
    finally:
        store.close()

    return 0, summary, None


def print_header(paths: Iterable[str]) -> None:
    print("\nExtracting...")
    print("-" * 63)
    print("Paths:")
    for path in paths:
        print(f"   {path}")
    print("-" * 63)


def print_summary(summary: ExtractionSummary, *, marker_error: bool) -> None:
    """Output a friendly report once processing completes."""

    print("\nExtraction complete.")
    print(
        f"  Files:           {summary.files_scanned} scanned / {summary.files_total} total "
        f"({summary.files_skipped} unreadable)"
    )
    print(f"  Messages:        {summary.messages}")
    print(f"  Languages:       {', '.join(summary.languages)}")
    print(
        f"  Records:         {summary.inserted} inserted, "
        f"{summary.skipped} already present"
    )
    print(f"  Elapsed time:    {summary.elapsed_seconds:.2f} seconds")
    if summary.marker_errors:
        print(f"{summary.marker_errors} marker error(s) detected.", file=sys.stderr)
        if not marker_error:
            print(" => Use the --marker-error option to display errors.", file=sys.stderr)
    print("Done.")


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    app_root = str(pathlib.Path(args.app or pathlib.Path.cwd()).expanduser().resolve())
    try:
        settings = get_settings(pathlib.Path(app_root))
    except InvalidConfigurationError as exc:
        print(exc)
        return 1

    paths = split_option(args.paths) or [app_root]
    core_path = args.core_path or settings.I18N_CORE_PATH
    if yes_no(args.extract_core):
        if not core_path:
            print("--extract-core requires --core-path or the I18N_CORE_PATH setting.")
            return 1
        paths.append(core_path)

    languages = resolve_languages(args.languages, settings.I18N_LANGUAGES)
    try:
        files = collect_files(
            files=args.files,
            paths=paths,
            exclude=split_option(args.exclude),
        )
    except InvalidConfigurationError as exc:
        print(exc)
        return 1

    options = ExtractOptions(
        merge=yes_no(args.merge),
        domains=split_option(args.domains) or None,
        no_location=args.no_location,
        marker_error=args.marker_error or settings.I18N_MARKER_ERROR,
        relative_paths=args.relative_paths,
        core_path=core_path,
        app_root=app_root,
        verbose=args.verbose,
    )

    print_header(paths)
    exit_code, summary, message = execute_extraction(
        paths=paths,
        files=files,
        languages=languages,
        database=args.database or settings.I18N_DATABASE,
        table=args.table or settings.I18N_TABLE,
        options=options,
    )

    if message:
        print(message)
    if summary:
        print_summary(summary, marker_error=options.marker_error)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
