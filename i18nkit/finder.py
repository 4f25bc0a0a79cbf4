"""Discovery of source files to scan."""

from __future__ import annotations

import os
import pathlib
import re
from typing import Iterable, List, Optional, Sequence

from .errors import InvalidConfigurationError, UnreadableFileError

DEFAULT_EXTENSIONS = (".php",)


def split_option(value: Optional[str]) -> List[str]:
    """Split a comma separated option, dropping blanks."""

    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def build_exclude_pattern(exclude: Sequence[str]) -> Optional[re.Pattern[str]]:
    """Match any path containing one of the values as a path segment."""

    if not exclude:
        return None
    parts = []
    for value in exclude:
        if os.sep != "\\" and not value.startswith(os.sep):
            value = os.sep + value
        parts.append(re.escape(value))
    return re.compile("|".join(parts))


def search_files(
    paths: Sequence[str],
    exclude: Sequence[str] = (),
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> List[str]:
    """Collect matching files below every path, sorted per path."""

    pattern = build_exclude_pattern(exclude)
    suffixes = tuple(ext.lower() for ext in extensions)
    found: List[str] = []
    for raw_path in paths:
        root = pathlib.Path(raw_path).expanduser()
        if not root.is_dir():
            raise InvalidConfigurationError(f"Path '{raw_path}' is not a directory.")
        root = root.resolve()
        files = sorted(
            str(candidate)
            for candidate in root.rglob("*")
            if candidate.is_file() and candidate.suffix.lower() in suffixes
        )
        if pattern is not None:
            files = [file for file in files if not pattern.search(file)]
        found.extend(files)
    return list(dict.fromkeys(found))


def resolve_files(files: Iterable[str]) -> List[str]:
    """Absolute paths for an explicit file list, in the given order."""

    resolved = [str(pathlib.Path(file).expanduser().resolve()) for file in files]
    return list(dict.fromkeys(resolved))


def read_source(path: str) -> str:
    """Read a source file as UTF-8 text."""

    try:
        return pathlib.Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise UnreadableFileError(
            path, f"not valid UTF-8 (byte {exc.start})"
        ) from exc
    except OSError as exc:
        raise UnreadableFileError(path, exc.strerror or str(exc)) from exc
