"""Decoding of PHP string literals and escaping for storage."""

from __future__ import annotations

import re
from typing import Iterable

SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "v": "\v",
    "f": "\f",
    "a": "\a",
    "b": "\b",
}

STORAGE_ESCAPES = {value: f"\\{key}" for key, value in SIMPLE_ESCAPES.items()}

ESCAPE_PATTERN = re.compile(r"\\(?:x([0-9A-Fa-f]{1,2})|([0-7]{1,3})|(.))", re.DOTALL)
SINGLE_QUOTE_PATTERN = re.compile(r"\\([\\'])")


def _replace_escape(match: re.Match[str]) -> str:
    hex_digits, octal_digits, char = match.groups()
    if hex_digits is not None:
        return chr(int(hex_digits, 16))
    if octal_digits is not None:
        return chr(int(octal_digits, 8) & 0xFF)
    return SIMPLE_ESCAPES.get(char, char)


def unescape_double_quoted(body: str) -> str:
    """Resolve C-style backslash escapes."""

    return ESCAPE_PATTERN.sub(_replace_escape, body)


def unescape_single_quoted(body: str) -> str:
    return SINGLE_QUOTE_PATTERN.sub(r"\1", body)


def decode_literal(raw: str) -> str:
    """Return the run-time value of a quoted literal, CRLF folded to LF."""

    quote, body = raw[:1], raw[1:-1]
    if quote == '"':
        value = unescape_double_quoted(body)
    else:
        value = unescape_single_quoted(body)
    return value.replace("\r\n", "\n")


def escape_for_storage(value: str) -> str:
    """Escape control characters, backslashes and double quotes."""

    escaped = []
    for char in value:
        code = ord(char)
        if char in STORAGE_ESCAPES:
            escaped.append(STORAGE_ESCAPES[char])
        elif code < 0x20:
            escaped.append(f"\\{code:03o}")
        elif char in {"\\", '"'}:
            escaped.append("\\" + char)
        else:
            escaped.append(char)
    return "".join(escaped)


def format_literal(raw: str) -> str:
    """Decode a single literal token and escape it for storage."""

    return escape_for_storage(decode_literal(raw))


def join_literals(raws: Iterable[str]) -> str:
    """Decode literals joined by the concatenation operator into one value."""

    return escape_for_storage("".join(decode_literal(raw) for raw in raws))
