"""JSON import/export of the test history.

The interchange format is a JSON array of entry objects in the same
camelCase shape the API returns. Parsing is strict about structure:
anything that is not an array of valid entry objects raises ValueError
and nothing is coerced. Derived values in a file are ignored; callers
rebuild them with `scoring.build_entry`.
"""

import json
from datetime import date
from typing import Iterable, List

from pydantic import ValidationError

from ..schemas import EntryImport, TestEntry


def parse_entries_json(b: bytes) -> List[EntryImport]:
    """Parse an export file into validated `EntryImport` items.

    Raises ValueError describing the first problem found: undecodable
    bytes, invalid JSON, a top-level value that is not an array, an item
    that is not an object or fails validation, or a repeated id.
    """
    try:
        data = json.loads(b.decode('utf-8'))
    except UnicodeDecodeError:
        raise ValueError('file is not UTF-8 text') from None
    except json.JSONDecodeError as e:
        raise ValueError(f'invalid JSON: {e.msg} at line {e.lineno}') from e
    if not isinstance(data, list):
        raise ValueError('expected a JSON array of test entries')
    out = []
    seen_ids = set()
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f'entry {idx} must be an object')
        try:
            parsed = EntryImport.model_validate(item)
        except ValidationError as e:
            raise ValueError(f'entry {idx}: {_first_error(e)}') from e
        if parsed.id is not None:
            if parsed.id in seen_ids:
                raise ValueError(f'entry {idx}: duplicate id {parsed.id}')
            seen_ids.add(parsed.id)
        out.append(parsed)
    return out


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = '.'.join(str(p) for p in err.get('loc', ()))
    return f"{loc}: {err.get('msg')}" if loc else str(err.get('msg'))


def dump_entries(entries: Iterable[TestEntry]) -> str:
    """Serialise entries to the indented JSON export format."""
    payload = [e.model_dump(mode='json', by_alias=True) for e in entries]
    return json.dumps(payload, indent=2)


def export_filename(today: date) -> str:
    """Download name for an export made on `today`."""
    return f"test_history_{today.isoformat()}.json"
