"""Reporting of marker calls whose arguments could not be extracted."""

from __future__ import annotations

import os
from typing import List, Optional, Sequence

from .structures import MarkerDiagnostic, Token


def render_call_source(tokens: Sequence[Token], open_index: int) -> str:
    """Rebuild the raw text after the opening parenthesis up to its match.

    Whitespace tokens are not part of the stream, so the result is the
    token texts glued together, closing parenthesis included.
    """

    parts: List[str] = []
    depth = 1
    index = open_index + 1
    while index < len(tokens) and depth:
        token = tokens[index]
        parts.append(token.text)
        if token.is_punct("("):
            depth += 1
        elif token.is_punct(")"):
            depth -= 1
        index += 1
    return "".join(parts)


def build_diagnostic(
    tokens: Sequence[Token],
    *,
    file: str,
    marker_index: int,
) -> MarkerDiagnostic:
    marker = tokens[marker_index]
    return MarkerDiagnostic(
        file=file,
        line=marker.line,
        marker=marker.text,
        source=render_call_source(tokens, marker_index + 1),
    )


class MarkerErrorCounter:
    """Counts marker errors outside the framework core."""

    def __init__(self, core_path: Optional[str] = None) -> None:
        self.core_path = core_path or None
        self.total: int = 0
        self.ignored: int = 0

    def is_core(self, file: str) -> bool:
        if not self.core_path:
            return False
        core = os.path.realpath(self.core_path)
        resolved = os.path.realpath(file)
        return resolved == core or resolved.startswith(core.rstrip(os.sep) + os.sep)

    def register(self, diagnostic: MarkerDiagnostic) -> bool:
        """Count a diagnostic; return False when it sits under the core path."""

        if self.is_core(diagnostic.file):
            self.ignored += 1
            return False
        self.total += 1
        return True
