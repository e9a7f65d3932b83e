import importlib.util
import json
from pathlib import Path

from sqlmodel import Session

from testtrack.database import engine
from testtrack.services import EntryService
from testtrack.utils.sample_data import SAMPLE_ENTRIES

_SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "import_history.py"
_spec = importlib.util.spec_from_file_location("import_history", _SCRIPT)
import_history = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(import_history)


def _stored_names():
    with Session(engine) as session:
        return sorted(e.test_name for e in EntryService(session).list_entries())


def test_export_then_reimport(tmp_path, capsys):
    with Session(engine) as session:
        EntryService(session).seed_if_empty(SAMPLE_ENTRIES)
    path = tmp_path / "history.json"

    assert import_history.main(path, export=True) == 0
    assert len(json.loads(path.read_text(encoding="utf-8"))) == 2
    assert "Exported 2 entries" in capsys.readouterr().out

    with Session(engine) as session:
        EntryService(session).clear()
    assert _stored_names() == []

    assert import_history.main(path) == 0
    assert "Imported 2 entries, replaced 0" in capsys.readouterr().out
    assert _stored_names() == ["DFT 1", "DFT 2"]


def test_missing_file_is_rejected(tmp_path, capsys):
    assert import_history.main(tmp_path / "nope.json") == 1
    assert "File not found" in capsys.readouterr().out


def test_invalid_file_leaves_history_untouched(tmp_path, capsys):
    with Session(engine) as session:
        EntryService(session).seed_if_empty(SAMPLE_ENTRIES)
    path = tmp_path / "bad.json"
    path.write_text('{"not": "an array"}', encoding="utf-8")

    assert import_history.main(path) == 1
    assert "Import rejected" in capsys.readouterr().out
    assert _stored_names() == ["DFT 1", "DFT 2"]
