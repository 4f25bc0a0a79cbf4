"""Message repositories receiving the extracted strings."""

from __future__ import annotations

import re
import sqlite3
from abc import ABC, abstractmethod
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, List

from .errors import InvalidConfigurationError, StoreWriteError
from .structures import MessageRecord, UpsertOutcome

DEFAULT_TABLE = "i18n_messages"
RECORD_FIELDS = tuple(f.name for f in fields(MessageRecord))
IDENTITY_FIELDS = ("domain", "locale", "singular", "context")
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_conditions(conditions: dict[str, Any]) -> None:
    unknown = sorted(set(conditions) - set(RECORD_FIELDS))
    if unknown:
        raise ValueError(f"Unknown message fields: {', '.join(unknown)}")


class MessageStore(ABC):
    """Abstract repository of translation messages."""

    @abstractmethod
    def find(self, **conditions: Any) -> List[MessageRecord]:
        """Return records whose fields equal the given values."""

    @abstractmethod
    def count(self, **conditions: Any) -> int:
        """Count records whose fields equal the given values."""

    @abstractmethod
    def save(self, record: MessageRecord) -> None:
        """Insert a new record."""

    def upsert(self, record: MessageRecord) -> UpsertOutcome:
        """Insert the record unless one with the same identity exists.

        Existing records are left as they are, refs and plural included.
        """

        identity = {name: getattr(record, name) for name in IDENTITY_FIELDS}
        if self.count(**identity):
            return UpsertOutcome.SKIPPED
        self.save(record)
        return UpsertOutcome.INSERTED

    def close(self) -> None:
        """Release resources held by the store."""


class MemoryMessageStore(MessageStore):
    """Keeps records in a list; used for dry runs and tests."""

    def __init__(self) -> None:
        self.records: List[MessageRecord] = []

    def find(self, **conditions: Any) -> List[MessageRecord]:
        _check_conditions(conditions)
        return [
            record
            for record in self.records
            if all(getattr(record, key) == value for key, value in conditions.items())
        ]

    def count(self, **conditions: Any) -> int:
        return len(self.find(**conditions))

    def save(self, record: MessageRecord) -> None:
        self.records.append(record)


class SQLiteMessageStore(MessageStore):
    """Stores records in a SQLite table with translation value columns."""

    def __init__(self, path: str | Path, table: str = DEFAULT_TABLE) -> None:
        if not IDENTIFIER_PATTERN.match(table):
            raise InvalidConfigurationError(f"Invalid table name '{table}'.")
        self.path = str(path)
        self.table = table
        try:
            self.db = sqlite3.connect(self.path, timeout=20)
            self.db.execute("PRAGMA busy_timeout = 20000")
            self.setup()
        except sqlite3.Error as exc:
            raise StoreWriteError(f"Could not open message store {self.path}: {exc}") from exc

    def setup(self) -> None:
        with self.db:
            self.db.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    domain TEXT NOT NULL,
                    locale TEXT NOT NULL,
                    singular TEXT NOT NULL,
                    plural TEXT,
                    context TEXT,
                    refs TEXT,
                    value_0 TEXT,
                    value_1 TEXT,
                    value_2 TEXT
                )
                """
            )
            self.db.execute(
                f"""
                CREATE INDEX IF NOT EXISTS idx_{self.table}_lookup
                ON {self.table}(domain, locale, singular)
                """
            )

    def _where(self, conditions: dict[str, Any]) -> tuple[str, list[Any]]:
        _check_conditions(conditions)
        if not conditions:
            return "", []
        clause = " AND ".join(f"{key} IS ?" for key in conditions)
        return f" WHERE {clause}", list(conditions.values())

    def find(self, **conditions: Any) -> List[MessageRecord]:
        where, params = self._where(conditions)
        columns = ", ".join(RECORD_FIELDS)
        try:
            rows = self.db.execute(
                f"SELECT {columns} FROM {self.table}{where} ORDER BY id", params
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreWriteError(f"Message lookup failed: {exc}") from exc
        return [MessageRecord(*row) for row in rows]

    def count(self, **conditions: Any) -> int:
        where, params = self._where(conditions)
        try:
            row = self.db.execute(
                f"SELECT COUNT(*) FROM {self.table}{where}", params
            ).fetchone()
        except sqlite3.Error as exc:
            raise StoreWriteError(f"Message lookup failed: {exc}") from exc
        return int(row[0])

    def save(self, record: MessageRecord) -> None:
        data = asdict(record)
        columns = ", ".join(data)
        placeholders = ", ".join("?" for _ in data)
        try:
            with self.db:
                self.db.execute(
                    f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})",
                    list(data.values()),
                )
        except sqlite3.Error as exc:
            raise StoreWriteError(
                f"Could not save message '{record.singular}' ({record.locale}): {exc}"
            ) from exc

    def close(self) -> None:
        self.db.close()
