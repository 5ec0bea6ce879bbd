"""
Load vehicles into the catalog from a CSV file (columns: year, make, model, trim).
Feeds the /api/car-options dropdowns. Rows already in the catalog are skipped.
Usage: python scripts/setup/seed_catalog.py vehicles.csv [--dry-run]
"""

import argparse
import csv
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from carit.database import SessionLocal, create_tables
from carit.exceptions import InvalidArgumentError
from carit.services.catalog_service import find_or_create, lookup_vehicle, normalize_description


def read_rows(path):
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        missing = {"year", "make", "model"} - set(reader.fieldnames or [])
        if missing:
            raise SystemExit(f"CSV is missing columns: {', '.join(sorted(missing))}")
        for line_no, row in enumerate(reader, start=2):
            yield line_no, row


def main():
    parser = argparse.ArgumentParser(description="Seed the CarIT vehicle catalog from CSV")
    parser.add_argument("csv_path", help="CSV with year,make,model[,trim] columns")
    parser.add_argument("--dry-run", action="store_true", help="Validate and count without writing")
    args = parser.parse_args()

    create_tables()
    db = SessionLocal()
    created = existing = invalid = 0
    try:
        for line_no, row in read_rows(args.csv_path):
            try:
                year, make, model, trim = normalize_description(
                    row.get("year"), row.get("make"), row.get("model"), row.get("trim"))
            except InvalidArgumentError as e:
                invalid += 1
                print(f"  line {line_no}: skipped ({e.message})")
                continue

            if lookup_vehicle(db, year, make, model, trim) is not None:
                existing += 1
                continue
            if not args.dry_run:
                find_or_create(db, year, make, model, trim)
            created += 1
    finally:
        db.close()

    verb = "Would create" if args.dry_run else "Created"
    print(f"{verb} {created} | already present {existing} | invalid {invalid}")


if __name__ == "__main__":
    main()
