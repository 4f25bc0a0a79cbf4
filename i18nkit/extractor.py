"""High-level orchestration of a message extraction run."""

from __future__ import annotations

import os
import pathlib
import sys
import time
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from .aggregator import TranslationAggregator
from .diagnostics import MarkerErrorCounter
from .errors import (
    ErrorCategory,
    ErrorRecord,
    InvalidConfigurationError,
    UnreadableFileError,
)
from .finder import read_source, split_option
from .lexer import significant_tokens
from .scanner import MARKER_SIGNATURES, MarkerScanner, marker_call_pattern
from .store import MessageStore
from .structures import MarkerDiagnostic, MarkerSignature


@dataclass
class ExtractOptions:
    """Flags steering how messages are recorded and saved."""

    merge: bool = False
    domains: Optional[List[str]] = None
    no_location: bool = False
    marker_error: bool = False
    relative_paths: bool = False
    core_path: Optional[str] = None
    app_root: Optional[str] = None
    verbose: bool = False


@dataclass
class ExtractionSummary:
    """Report returned after an extraction run."""

    files_total: int
    files_scanned: int
    files_skipped: int
    messages: int
    inserted: int
    skipped: int
    marker_errors: int
    languages: List[str]
    elapsed_seconds: float
    diagnostics: List[MarkerDiagnostic] = field(default_factory=list)
    warnings: List[ErrorRecord] = field(default_factory=list)


def resolve_languages(option: Optional[str], configured: Any = None) -> List[str]:
    """Target locales from a comma separated option or the configuration.

    The configured value may be a comma separated string, a list of locales,
    or a mapping of language keys whose values may carry a ``locale``.
    """

    if option:
        return split_option(option)
    if not configured:
        return []
    if isinstance(configured, str):
        return split_option(configured)
    if isinstance(configured, Mapping):
        languages = []
        for key, value in configured.items():
            if isinstance(value, Mapping) and value.get("locale"):
                languages.append(str(value["locale"]))
            else:
                languages.append(str(key))
        return languages
    return [str(item) for item in configured if item]


def validate_inputs(files: Sequence[str], languages: Sequence[str]) -> None:
    if not languages:
        raise InvalidConfigurationError(
            "No target languages found. Pass --languages or set I18N_LANGUAGES."
        )
    if not files:
        raise InvalidConfigurationError("No source files found to extract from.")


def reference_strip_paths(
    scan_paths: Sequence[str],
    app_root: Optional[str],
) -> List[str]:
    """Path prefixes removed from references, each ending with a separator."""

    prefixes = []
    for path in list(scan_paths) + ([app_root] if app_root else []):
        resolved = str(pathlib.Path(path).expanduser().resolve())
        prefixes.append(resolved.rstrip(os.sep) + os.sep)
    return list(dict.fromkeys(prefixes))


class ExtractionRunner:
    """Coordinates scanning, aggregation and saving."""

    def __init__(
        self,
        *,
        files: Sequence[str],
        languages: Sequence[str],
        store: MessageStore,
        options: Optional[ExtractOptions] = None,
        scan_paths: Sequence[str] = (),
        signatures: Sequence[MarkerSignature] = MARKER_SIGNATURES,
    ) -> None:
        self.files = list(files)
        self.languages = list(languages)
        self.store = store
        self.options = options or ExtractOptions()
        self.scan_paths = list(scan_paths)

        self.scanner = MarkerScanner(signatures)
        self.pattern = marker_call_pattern(signatures)
        self.aggregator = TranslationAggregator()
        self.counter = MarkerErrorCounter(self.options.core_path)
        self.diagnostics: List[MarkerDiagnostic] = []
        self.warnings: List[ErrorRecord] = []

    def run(self) -> ExtractionSummary:
        start_time = time.time()
        validate_inputs(self.files, self.languages)

        scanned = 0
        for file in self.files:
            if self.options.verbose:
                print(f"Processing {file}...")
            try:
                code = read_source(file)
            except UnreadableFileError as exc:
                self._warn(ErrorCategory.FILE_IO, str(exc), exc.reason)
                continue
            scanned += 1
            if self.pattern.search(code):
                self.scan_source(code, file)

        report = self.aggregator.flush(
            self.store,
            self.languages,
            domains=self.options.domains,
            merge=self.options.merge,
            no_location=self.options.no_location,
            strip_paths=reference_strip_paths(self.scan_paths, self.options.app_root),
        )

        return ExtractionSummary(
            files_total=len(self.files),
            files_scanned=scanned,
            files_skipped=len(self.files) - scanned,
            messages=report.messages,
            inserted=report.inserted,
            skipped=report.skipped,
            marker_errors=self.counter.total,
            languages=self.languages,
            elapsed_seconds=time.time() - start_time,
            diagnostics=list(self.diagnostics),
            warnings=list(self.warnings),
        )

    def scan_source(self, code: str, file: str) -> None:
        """Scan one file's source and record what it contains."""

        tokens = significant_tokens(code)
        result = self.scanner.scan_all(tokens, file)
        reference = self.reference_path(file)
        for match in result.matches:
            call = self.scanner.signature(match.marker).bind(match.arguments)
            self.aggregator.record(
                call.domain,
                call.singular,
                call.plural,
                call.context,
                reference,
                match.line,
            )
        for diagnostic in result.diagnostics:
            self.counter.register(diagnostic)
            self.diagnostics.append(diagnostic)
            if self.options.marker_error:
                print(diagnostic.format(), file=sys.stderr)

    def reference_path(self, file: str) -> str:
        if self.options.relative_paths and self.options.app_root:
            root = str(pathlib.Path(self.options.app_root).expanduser().resolve())
            return "." + file.replace(root, "")
        return file

    def _warn(self, category: ErrorCategory, message: str, details: str | None = None) -> None:
        self.warnings.append(ErrorRecord(category=category, message=message, details=details))
        print(message, file=sys.stderr)
