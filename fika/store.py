"""Reading-progress store keyed by absolute book path.

On disk the store is a JSON document ``{"books": [{"path", "progress"}]}``.
Unlike settings, the store is validated strictly: a corrupt or unwritable
store raises ``StoreError`` instead of silently losing bookmarks.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from . import config
from .errors import StoreError
from .fileio import atomic_write_bytes

logger = logging.getLogger(__name__)


@dataclass
class ProgressRecord:
    path: str
    progress: int = 0


@dataclass
class ProgressStore:
    location: Path
    books: list[ProgressRecord] = field(default_factory=list)

    @classmethod
    def load(cls, location: Path | None = None) -> ProgressStore:
        """Load the store, creating and writing an empty one when it does not exist."""
        target = location if location is not None else config.STORE_PATH
        try:
            raw = target.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("Progress store not found at %s, initializing", target)
            store = cls(location=target)
            store.save()
            return store
        except OSError as exc:
            raise StoreError(f"Cannot read progress store {target}: {exc.strerror or exc}") from exc

        store = cls(location=target, books=_parse_books(raw, target))
        logger.debug("Loaded %d progress records from %s", len(store.books), target)
        return store

    def find_or_create(self, path: str | Path) -> ProgressRecord:
        """Return the record for ``path``, appending a zero-progress one when absent.

        The returned object is the stored instance; mutating it changes what
        the next ``save`` writes.
        """
        key = str(path)
        for record in self.books:
            if record.path == key:
                return record
        record = ProgressRecord(path=key)
        self.books.append(record)
        return record

    def to_data(self) -> dict[str, object]:
        return {"books": [{"path": book.path, "progress": book.progress} for book in self.books]}

    def save(self) -> None:
        """Write the whole store back to ``location``; raises ``StoreError`` on failure."""
        try:
            self.location.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(self.to_data(), indent=2) + "\n"
            atomic_write_bytes(self.location, payload.encode("utf-8"))
        except OSError as exc:
            raise StoreError(f"Failed to save progress store {self.location}: {exc.strerror or exc}") from exc
        logger.debug("Saved %d progress records to %s", len(self.books), self.location)


def _parse_books(raw: str, location: Path) -> list[ProgressRecord]:
    if not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise StoreError(f"Progress store {location} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise StoreError(f"Progress store {location} must contain a JSON object")

    books = data.get("books", [])
    if not isinstance(books, list):
        raise StoreError(f"Progress store {location}: 'books' must be a list")

    records: list[ProgressRecord] = []
    for index, entry in enumerate(books):
        if not isinstance(entry, dict):
            raise StoreError(f"Progress store {location}: entry {index} is not an object")
        path = entry.get("path")
        progress = entry.get("progress", 0)
        if not isinstance(path, str) or not path:
            raise StoreError(f"Progress store {location}: entry {index} has no path")
        if isinstance(progress, bool) or not isinstance(progress, int) or progress < 0:
            raise StoreError(f"Progress store {location}: entry {index} has invalid progress {progress!r}")
        records.append(ProgressRecord(path=path, progress=progress))
    return records
