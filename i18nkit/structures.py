"""Core data structures for the i18nkit extractor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Sequence, Tuple


class TokenKind(Enum):
    """Lexical classes produced by the PHP lexer."""

    STRING_LITERAL = auto()
    IDENTIFIER = auto()
    NUMBER = auto()
    WHITESPACE = auto()
    OTHER = auto()
    PUNCT = auto()
    COMMENT = auto()
    INLINE_HTML = auto()


INERT_KINDS = frozenset({TokenKind.WHITESPACE, TokenKind.INLINE_HTML})


@dataclass(frozen=True)
class Token:
    """A single lexical token and the line it starts on."""

    kind: TokenKind
    text: str
    line: int

    def is_punct(self, char: str) -> bool:
        return self.kind is TokenKind.PUNCT and self.text == char


class ArgumentRole(Enum):
    DOMAIN = "domain"
    CONTEXT = "context"
    SINGULAR = "singular"
    PLURAL = "plural"


@dataclass(frozen=True)
class ExtractedValue:
    """A literal argument recovered from a call site."""

    text: str
    is_number: bool = False


@dataclass(frozen=True)
class MarkerCall:
    """Arguments of a marker call assigned to their roles."""

    singular: str
    domain: str = "default"
    plural: Optional[str] = None
    context: Optional[str] = None


@dataclass(frozen=True)
class MarkerSignature:
    """Name of a marker function and the roles of its leading arguments."""

    name: str
    roles: Tuple[ArgumentRole, ...]

    @property
    def arity(self) -> int:
        return len(self.roles)

    def bind(self, values: Sequence[ExtractedValue]) -> MarkerCall:
        """Assign extracted values to roles in declaration order."""

        if len(values) != self.arity:
            raise ValueError(
                f"{self.name} expects {self.arity} arguments, got {len(values)}."
            )
        bound: Dict[ArgumentRole, str] = {
            role: value.text for role, value in zip(self.roles, values)
        }
        return MarkerCall(
            singular=bound.get(ArgumentRole.SINGULAR, ""),
            domain=bound.get(ArgumentRole.DOMAIN, "default"),
            plural=bound.get(ArgumentRole.PLURAL),
            context=bound.get(ArgumentRole.CONTEXT),
        )


@dataclass(frozen=True)
class CallMatch:
    """A marker invocation whose literal arguments satisfied its signature."""

    marker: str
    line: int
    arguments: Tuple[ExtractedValue, ...]


@dataclass(frozen=True)
class MarkerDiagnostic:
    """A marker invocation whose arguments could not be extracted."""

    file: str
    line: int
    marker: str
    source: str

    def format(self) -> str:
        return (
            f"Invalid marker content in {self.file}:{self.line}\n"
            f"* {self.marker}({self.source}"
        )


@dataclass
class ScanResult:
    """Matches found in a token sequence along with non-fatal diagnostics."""

    matches: List[CallMatch] = field(default_factory=list)
    diagnostics: List[MarkerDiagnostic] = field(default_factory=list)

    def extend(self, other: "ScanResult") -> None:
        self.matches.extend(other.matches)
        self.diagnostics.extend(other.diagnostics)


@dataclass
class TranslationEntry:
    """Aggregated occurrences of a (domain, singular, context) message."""

    domain: str
    singular: str
    context: Optional[str] = None
    plural: Optional[str] = None
    references: Dict[str, List[int]] = field(default_factory=dict)

    @property
    def key(self) -> Tuple[str, str, Optional[str]]:
        return (self.domain, self.singular, self.context)

    def add_reference(self, file: str, line: int) -> None:
        self.references.setdefault(file, []).append(line)


@dataclass(frozen=True)
class MessageRecord:
    """One persisted row of the message repository."""

    domain: str
    locale: str
    singular: str
    plural: Optional[str] = None
    context: Optional[str] = None
    refs: Optional[str] = None


class UpsertOutcome(Enum):
    INSERTED = "inserted"
    SKIPPED = "skipped"
