from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..entries.service import EntryService
from .parser import ParsedLine, importable_entries, parse_text


@dataclass(frozen=True)
class ImportPreview:
    results: list[ParsedLine]

    @property
    def valid_count(self) -> int:
        return sum(1 for r in self.results if r.importable)

    @property
    def error_count(self) -> int:
        return len(self.results) - self.valid_count


class BulkImportService:
    """Parse a paste into a preview, then append only the valid lines."""

    def __init__(self, entries: EntryService):
        self._entries = entries

    def preview(self, text: str) -> ImportPreview:
        return ImportPreview(results=parse_text(text))

    def confirm(self, results: Sequence[ParsedLine]) -> int:
        valid = importable_entries(list(results))
        if not valid:
            return 0
        return self._entries.add_many(valid)
