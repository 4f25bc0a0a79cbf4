"""PHP token stream for the scanner, built on the tree-sitter PHP grammar.

The scanner only needs leaves: constant string literals, integers, names and
punctuation, each with the line it starts on. String, heredoc, variable and
comment nodes are flattened into single tokens so their contents are never
mistaken for code.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List

import tree_sitter_php as ts_php
from tree_sitter import Language, Node, Parser

from .structures import INERT_KINDS, Token, TokenKind

ATOMIC_NODES = frozenset(
    {
        "text",
        "comment",
        "string",
        "encapsed_string",
        "heredoc",
        "nowdoc",
        "shell_command_expression",
        "variable_name",
        "qualified_name",
        "relative_name",
        "cast_type",
        "integer",
        "float",
    }
)

NAMED_KINDS = {
    "text": TokenKind.INLINE_HTML,
    "comment": TokenKind.COMMENT,
    "string": TokenKind.STRING_LITERAL,
    "name": TokenKind.IDENTIFIER,
    "qualified_name": TokenKind.IDENTIFIER,
    "relative_name": TokenKind.IDENTIFIER,
    "integer": TokenKind.NUMBER,
}

# Children allowed inside a double-quoted string that is still a constant.
LITERAL_PARTS = frozenset({"string_content", "string_value", "escape_sequence", "string"})


@lru_cache(maxsize=1)
def php_parser() -> Parser:
    """Parser for PHP files with inline HTML, created once."""

    return Parser(Language(ts_php.language_php()))


def is_constant_string(node: Node) -> bool:
    """Return True when a double-quoted string embeds no variables."""

    return all(child.type in LITERAL_PARTS for child in node.named_children)


def classify(node: Node) -> TokenKind:
    if node.type == "encapsed_string":
        return TokenKind.STRING_LITERAL if is_constant_string(node) else TokenKind.OTHER
    if node.is_named:
        return NAMED_KINDS.get(node.type, TokenKind.OTHER)
    text = node.type
    if len(text) == 1 and not (text.isalnum() or text == "_"):
        return TokenKind.PUNCT
    return TokenKind.OTHER


def tokenize(source: str) -> List[Token]:
    """Split PHP source into tokens in source order, inline HTML included."""

    tree = php_parser().parse(source.encode("utf-8"))
    tokens: List[Token] = []
    stack: List[Node] = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.start_byte == node.end_byte:
            continue
        if node.child_count and node.type not in ATOMIC_NODES:
            stack.extend(reversed(node.children))
            continue
        tokens.append(
            Token(
                kind=classify(node),
                text=node.text.decode("utf-8"),
                line=node.start_point[0] + 1,
            )
        )
    return tokens


def significant_tokens(source: str) -> List[Token]:
    """Tokenize and drop inline HTML."""

    return [token for token in tokenize(source) if token.kind not in INERT_KINDS]
