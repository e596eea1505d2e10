"""List the unique indexes and create any that are missing.

One-off maintenance for databases created before an index was added to
schema.sql. Tables that already hold duplicate rows must be cleaned first.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.database.bootstrap import (
    UNIQUE_INDEXES,
    ensure_unique_indexes,
    list_indexes,
)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--list", action="store_true", help="only print the current indexes")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    for table in sorted({t for t, _, _ in UNIQUE_INDEXES}):
        for ix in list_indexes(db_config, table):
            print(f"{table}.{ix['name']} ({ix['column']}){' UNIQUE' if ix['unique'] else ''}")

    if args.list:
        return

    created = ensure_unique_indexes(db_config)
    print(f"OK: created {len(created)} index(es): {', '.join(created) or '-'}")


if __name__ == "__main__":
    main()
