"""Detection of translation marker calls in a token stream."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from .diagnostics import build_diagnostic
from .literals import format_literal, join_literals
from .structures import (
    ArgumentRole,
    CallMatch,
    ExtractedValue,
    MarkerSignature,
    ScanResult,
    Token,
    TokenKind,
)

DOMAIN = ArgumentRole.DOMAIN
CONTEXT = ArgumentRole.CONTEXT
SINGULAR = ArgumentRole.SINGULAR
PLURAL = ArgumentRole.PLURAL

MARKER_SIGNATURES: Tuple[MarkerSignature, ...] = (
    MarkerSignature("__", (SINGULAR,)),
    MarkerSignature("__n", (SINGULAR, PLURAL)),
    MarkerSignature("__d", (DOMAIN, SINGULAR)),
    MarkerSignature("__dn", (DOMAIN, SINGULAR, PLURAL)),
    MarkerSignature("__x", (CONTEXT, SINGULAR)),
    MarkerSignature("__xn", (CONTEXT, SINGULAR, PLURAL)),
    MarkerSignature("__dx", (DOMAIN, CONTEXT, SINGULAR)),
    MarkerSignature("__dxn", (DOMAIN, CONTEXT, SINGULAR, PLURAL)),
)

CONCAT_OPERATOR = "."


def marker_call_pattern(signatures: Sequence[MarkerSignature]) -> re.Pattern[str]:
    """Quick textual check used to skip files with no marker calls at all."""

    names = sorted((re.escape(sig.name) for sig in signatures), key=len, reverse=True)
    return re.compile(r"(?<![\w$])(?:" + "|".join(names) + r")\s*\(")


def find_closing_parenthesis(tokens: Sequence[Token], open_index: int) -> int:
    """Index of the parenthesis closing the one at ``open_index``."""

    depth = 0
    index = open_index
    while index < len(tokens):
        token = tokens[index]
        if token.is_punct("("):
            depth += 1
        elif token.is_punct(")"):
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return len(tokens)


class MarkerScanner:
    """Finds marker calls and extracts their literal arguments."""

    def __init__(self, signatures: Sequence[MarkerSignature] = MARKER_SIGNATURES) -> None:
        self.signatures = tuple(signatures)
        self._by_name = {sig.name: sig for sig in self.signatures}

    def signature(self, name: str) -> MarkerSignature:
        return self._by_name[name]

    def scan_all(self, tokens: Sequence[Token], file: str) -> ScanResult:
        result = ScanResult()
        for signature in self.signatures:
            result.extend(self.scan(tokens, signature, file))
        return result

    def scan(
        self,
        tokens: Sequence[Token],
        signature: MarkerSignature,
        file: str,
    ) -> ScanResult:
        result = ScanResult()
        index = 0
        while len(tokens) - index > 1:
            token = tokens[index]
            if (
                token.kind is TokenKind.IDENTIFIER
                and token.text == signature.name
                and tokens[index + 1].is_punct("(")
            ):
                end = find_closing_parenthesis(tokens, index + 1)
                values = self.extract_values(tokens, index + 2, end, signature.arity)
                if len(values) == signature.arity:
                    result.matches.append(
                        CallMatch(
                            marker=signature.name,
                            line=token.line,
                            arguments=tuple(values),
                        )
                    )
                else:
                    result.diagnostics.append(
                        build_diagnostic(tokens, file=file, marker_index=index)
                    )
            index += 1
        return result

    def extract_values(
        self,
        tokens: Sequence[Token],
        start: int,
        end: int,
        target: int,
    ) -> List[ExtractedValue]:
        """Greedily read literal arguments between ``start`` and ``end``."""

        values: List[ExtractedValue] = []
        position = start
        while len(values) < target and position < end:
            token = tokens[position]
            if token.is_punct(","):
                position += 1
                continue
            if token.kind is TokenKind.NUMBER:
                values.append(ExtractedValue(text=token.text, is_number=True))
                position += 1
                continue
            if token.kind is not TokenKind.STRING_LITERAL:
                break
            literal, position = self._read_concatenation(tokens, position, end)
            if literal is None:
                break
            values.append(ExtractedValue(text=literal))
        return values

    def _read_concatenation(
        self,
        tokens: Sequence[Token],
        position: int,
        end: int,
    ) -> Tuple[Optional[str], int]:
        """Read ``'a' . 'b' . ...`` starting at a string literal.

        Returns ``None`` when an operand of the chain is not a literal.
        """

        raws = [tokens[position].text]
        position += 1
        while position < end and tokens[position].is_punct(CONCAT_OPERATOR):
            operand = tokens[position + 1] if position + 1 < end else None
            if operand is None or operand.kind is not TokenKind.STRING_LITERAL:
                return None, position
            raws.append(operand.text)
            position += 2
        if len(raws) == 1:
            return format_literal(raws[0]), position
        return join_literals(raws), position
