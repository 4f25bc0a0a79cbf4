"""Accumulation of extracted messages and their hand-off to the store."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Collection, Dict, Iterator, List, Optional, Sequence, Tuple

from .structures import MessageRecord, TranslationEntry, UpsertOutcome

if TYPE_CHECKING:
    from .store import MessageStore

EntryKey = Tuple[str, str, Optional[str]]


@dataclass
class FlushReport:
    """Outcome counters for a flush."""

    messages: int = 0
    inserted: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.skipped


def collapse_lines(lines: Sequence[int]) -> List[int]:
    """Drop repeated line numbers, keeping first-seen order."""

    return list(dict.fromkeys(lines))


def strip_prefixes(text: str, prefixes: Sequence[str]) -> str:
    """Remove every occurrence of each prefix, shortest prefixes first."""

    for prefix in sorted((p for p in prefixes if p), key=len):
        text = text.replace(prefix, "")
    return text


def format_references(
    entry: TranslationEntry,
    strip_paths: Sequence[str] = (),
    separator: str = os.sep,
) -> str:
    """Render references as ``file:l1;l2`` lines with forward slashes."""

    occurrences = "\n".join(
        f"{file}:{';'.join(str(line) for line in collapse_lines(lines))}"
        for file, lines in entry.references.items()
    )
    occurrences = strip_prefixes(occurrences, strip_paths)
    return occurrences.replace(separator, "/")


class TranslationAggregator:
    """Collects messages keyed by domain, singular and context."""

    def __init__(self) -> None:
        self._entries: Dict[EntryKey, TranslationEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TranslationEntry]:
        return iter(self._entries.values())

    def entries(self) -> List[TranslationEntry]:
        return list(self._entries.values())

    def get(
        self,
        domain: str,
        singular: str,
        context: Optional[str] = None,
    ) -> Optional[TranslationEntry]:
        return self._entries.get((domain, singular, context or None))

    def record(
        self,
        domain: str,
        singular: str,
        plural: Optional[str],
        context: Optional[str],
        file: str,
        line: int,
    ) -> TranslationEntry:
        context = context or None
        key = (domain, singular, context)
        entry = self._entries.get(key)
        if entry is None:
            entry = TranslationEntry(domain=domain, singular=singular, context=context)
            self._entries[key] = entry
        if plural is not None:
            entry.plural = plural
        entry.add_reference(file, line)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def flush(
        self,
        store: "MessageStore",
        languages: Sequence[str],
        *,
        domains: Optional[Collection[str]] = None,
        merge: bool = False,
        no_location: bool = False,
        strip_paths: Sequence[str] = (),
    ) -> FlushReport:
        """Upsert every retained entry once per language, then clear."""

        report = FlushReport()
        for entry in self._entries.values():
            if domains and entry.domain not in domains:
                continue
            report.messages += 1
            domain = "default" if merge else entry.domain
            refs = None if no_location else format_references(entry, strip_paths)
            for locale in languages:
                outcome = store.upsert(
                    MessageRecord(
                        domain=domain,
                        locale=locale,
                        singular=entry.singular,
                        plural=entry.plural,
                        context=entry.context,
                        refs=refs,
                    )
                )
                if outcome is UpsertOutcome.INSERTED:
                    report.inserted += 1
                else:
                    report.skipped += 1
        self.clear()
        return report
