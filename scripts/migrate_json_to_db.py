#!/usr/bin/env python3
"""
Migrate settings and the verification cache from a JSON store to SQLite.

Usage:
    python scripts/migrate_json_to_db.py --json data/store.json --db data/store.db
"""

import argparse
from pathlib import Path
import sys

from jobhelper.database import SqliteStore
from jobhelper.storage import load_store


def migrate(json_path: Path, db_path: Path, dry_run: bool = False, overwrite: bool = False) -> bool:
    """
    Copy every slot of the JSON store into the SQLite store.

    Args:
        json_path: Path to JSON store file
        db_path: Path to SQLite database file
        dry_run: If True, don't write to database
        overwrite: Replace slots that already exist in the database

    Returns:
        True when the database ends up holding the same values as the JSON store
    """
    print(f"Loading slots from {json_path}...")
    data = load_store(json_path)
    print(f"Found {len(data)} slots in JSON store")

    if dry_run:
        print("\n[DRY RUN] Would migrate the following slots:")
        for key, value in data.items():
            size = len(value) if isinstance(value, (list, dict)) else 1
            print(f"  {key}: {size} item(s)")
        return True

    print(f"\nInitializing database at {db_path}...")
    db = SqliteStore(db_path)

    migrated = 0
    skipped = 0
    for key, value in data.items():
        if not overwrite and db.get(key) is not None:
            print(f"Slot {key} already exists, skipping")
            skipped += 1
            continue
        db.set(key, value)
        migrated += 1

    mismatched = [key for key in data if db.get(key) != data[key]]
    print("\nMigration complete!")
    print(f"   Migrated:   {migrated}")
    print(f"   Skipped:    {skipped}")
    print(f"   Mismatched: {len(mismatched)}")
    for key in mismatched:
        print(f"   - {key} differs between JSON and database")
    return not mismatched


def main():
    parser = argparse.ArgumentParser(description="Migrate a JSON store to SQLite")
    parser.add_argument("--json", type=Path, default=Path("data/store.json"),
                        help="Path to JSON store file")
    parser.add_argument("--db", type=Path, default=Path("data/store.db"),
                        help="Path to SQLite database file")
    parser.add_argument("--dry-run", action="store_true",
                        help="Show what would be migrated without writing")
    parser.add_argument("--overwrite", action="store_true",
                        help="Replace slots that already exist in the database")

    args = parser.parse_args()

    if not args.json.exists():
        print(f"JSON file not found: {args.json}")
        sys.exit(1)

    ok = migrate(args.json, args.db, dry_run=args.dry_run, overwrite=args.overwrite)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
