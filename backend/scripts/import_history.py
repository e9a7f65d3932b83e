"""CLI script to import or export the test history of the local DB.
Usage: python scripts/import_history.py FILE [--export]
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so `testtrack` package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from testtrack.database import engine, create_db_and_tables
from testtrack import services


def main(path: pathlib.Path, export: bool = False) -> int:
    """Import `path` into the database, or write the history to it.

    Importing replaces every stored entry. Results are printed to stdout
    for a quick CLI feedback loop; the return value is the exit code.
    """
    create_db_and_tables()
    with Session(engine) as session:
        svc = services.EntryService(session)
        if export:
            path.write_text(svc.export_json(), encoding='utf-8')
            print(f'Exported {len(svc.list_entries())} entries to {path}')
            return 0
        if not path.exists():
            print(f'File not found: {path}')
            return 1
        try:
            result = svc.import_json(path.read_bytes())
        except ValueError as e:
            print(f'Import rejected: {e}')
            return 1
        print(f"Imported {result['imported']} entries, replaced {result['replaced']}")
        return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('file', type=pathlib.Path, help='JSON history file')
    parser.add_argument('--export', action='store_true', help='Write the stored history to FILE instead of importing it')
    args = parser.parse_args()
    sys.exit(main(args.file, export=args.export))
