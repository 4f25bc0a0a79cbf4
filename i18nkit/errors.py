"""Error definitions for the i18nkit extractor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class ErrorCategory(Enum):
    """Categorises handled errors for reporting."""

    FILE_IO = auto()


class I18nKitError(Exception):
    """Base exception for all custom errors."""


class InvalidConfigurationError(I18nKitError):
    """Raised when the run cannot start because its inputs are unusable."""


class UnreadableFileError(I18nKitError):
    """Raised when a source file cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not read {path}: {reason}")
        self.path = path
        self.reason = reason


class StoreWriteError(I18nKitError):
    """Raised when the message store rejects a query or an insert."""


@dataclass
class ErrorRecord:
    """Stores context for a handled error."""

    category: ErrorCategory
    message: str
    details: Optional[str] = None
