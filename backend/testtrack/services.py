"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories,
the scoring module and the transfer codec. Services are intentionally
thin: they run the scoring pipeline, persist results via repositories
and convert stored rows back into `TestEntry` values.
"""

import json
import logging
import uuid
from typing import Dict, List, Optional

from sqlmodel import Session

from . import models, repositories
from .schemas import EntryImport, EntryIn, SUBJECTS, TestEntry, SubjectPerformance
from .scoring import build_entry
from .utils.stats import summarize_entries
from .utils.transfer import dump_entries, parse_entries_json

logger = logging.getLogger("testtrack.services")

BLOCKS = SUBJECTS + ("total",)


def _to_rows(entry: TestEntry) -> List[models.SubjectResult]:
    """Flatten an entry's four blocks into `SubjectResult` rows."""
    rows = []
    for name in BLOCKS:
        block: SubjectPerformance = getattr(entry, name)
        rows.append(models.SubjectResult(subject=name, **block.model_dump()))
    return rows


def _to_entry(sitting: models.Sitting) -> TestEntry:
    """Rebuild a `TestEntry` from a stored sitting and its rows."""
    by_subject: Dict[str, SubjectPerformance] = {}
    for r in sitting.results:
        by_subject[r.subject] = SubjectPerformance(**{f: getattr(r, f) for f in SubjectPerformance.model_fields})
    return TestEntry(
        id=sitting.id,
        date=sitting.date,
        test_name=sitting.test_name,
        **{name: by_subject.get(name, SubjectPerformance()) for name in BLOCKS},
    )


def _log_event(name: str, **fields) -> None:
    logger.info("%s %s", name, json.dumps(fields, ensure_ascii=True, default=str))


class EntryService:
    """Create, replace, delete, import and export test entries."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.SittingRepository(session)

    def create(self, payload: EntryIn) -> TestEntry:
        """Score `payload` and store it under a fresh id."""
        entry = build_entry(str(uuid.uuid4()), payload)
        sitting = models.Sitting(id=entry.id, date=entry.date, test_name=entry.test_name)
        self.repo.create(sitting, _to_rows(entry))
        _log_event("entry_created", id=entry.id, date=entry.date, total_marks=entry.total.marks)
        return entry

    def get(self, entry_id: str) -> Optional[TestEntry]:
        """Return the entry with `entry_id` or `None` if not found."""
        sitting = self.repo.get(entry_id)
        return _to_entry(sitting) if sitting else None

    def list_entries(self) -> List[TestEntry]:
        """All entries, newest first."""
        return [_to_entry(s) for s in self.repo.list_all()]

    def update(self, entry_id: str, payload: EntryIn) -> Optional[TestEntry]:
        """Replace an entry with freshly scored values, keeping its id.

        Returns `None` if no entry has that id.
        """
        sitting = self.repo.get(entry_id)
        if not sitting:
            return None
        entry = build_entry(entry_id, payload)
        self.repo.replace(sitting, entry.date, entry.test_name, _to_rows(entry))
        _log_event("entry_replaced", id=entry_id, date=entry.date, total_marks=entry.total.marks)
        return entry

    def delete(self, entry_id: str) -> bool:
        """Delete an entry; returns False when it did not exist."""
        deleted = self.repo.delete(entry_id)
        if deleted:
            _log_event("entry_deleted", id=entry_id)
        return deleted

    def clear(self) -> int:
        """Delete every entry and return how many were removed."""
        removed = self.repo.delete_all()
        _log_event("entries_cleared", deleted=removed)
        return removed

    def replace_all(self, items: List[EntryImport]) -> Dict[str, int]:
        """Replace the whole collection with `items`, rescoring each one.

        Every item is scored before anything is deleted, so a failure
        leaves the stored collection as it was.
        """
        staged = []
        for item in items:
            entry = build_entry(item.id or str(uuid.uuid4()), item)
            sitting = models.Sitting(id=entry.id, date=entry.date, test_name=entry.test_name)
            staged.append((sitting, _to_rows(entry)))
        replaced = self.repo.delete_all(commit=False)
        imported = self.repo.add_many(staged)
        _log_event("entries_imported", imported=imported, replaced=replaced)
        return {'imported': imported, 'replaced': replaced}

    def import_json(self, file_bytes: bytes) -> Dict[str, int]:
        """Import an export file, replacing the current collection.

        Raises ValueError if the payload is not an array of valid entries.
        """
        items = parse_entries_json(file_bytes)
        return self.replace_all(items)

    def export_json(self) -> str:
        """Serialise all entries in the export format."""
        return dump_entries(self.list_entries())

    def seed_if_empty(self, raw_entries: List[dict]) -> int:
        """Load `raw_entries` when no entry is stored yet; returns the count added."""
        if self.repo.count() > 0:
            return 0
        items = [EntryImport.model_validate(r) for r in raw_entries]
        return self.replace_all(items)['imported']


class StatsService:
    """Dashboard aggregates over the stored entries."""
    def __init__(self, session: Session):
        self.session = session
        self.entries = EntryService(session)

    def dashboard(self, error_view: str = 'total') -> Dict:
        """Return the dashboard summary for every stored entry.

        Entries are passed oldest-created first so that, among sittings on
        the same date, the most recently recorded counts as the latest.
        """
        entries = list(reversed(self.entries.list_entries()))
        return summarize_entries(entries, error_view)
