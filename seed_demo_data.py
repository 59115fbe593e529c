#!/usr/bin/env python3
"""
Seed the database with the FitCoach demo data set.

The demo document (admin, trainer and student accounts, a roster of students,
sessions, payments and plans) is built by the local document store and copied
into the database. Rows that already exist are skipped, so the script can be
run repeatedly.

Usage:
    python seed_demo_data.py [--variation full|minimal|empty] [--yes]
"""

import argparse
import os
import sys
import tempfile

from dotenv import load_dotenv

load_dotenv()

from fitcoach.db.session import SessionLocal, init_db
from fitcoach.models.user import User
from fitcoach.services.local_storage import KeyValueFile, LocalDataStore, import_into_database


def print_summary(summary):
    print("\n" + "=" * 60)
    print("DEMO DATA SEEDING SUMMARY")
    print("=" * 60)
    for table, count in summary.items():
        print(f"{table:<20} {count} created")
    print("=" * 60)


def main(argv=None) -> bool:
    parser = argparse.ArgumentParser(description="Seed the database with FitCoach demo data")
    parser.add_argument("--variation", choices=["full", "minimal", "empty"], default="full")
    parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    args = parser.parse_args(argv)

    print("Starting demo data seeding process...")
    init_db()

    db = SessionLocal()
    try:
        print(f"Database connection successful. Current users: {db.query(User).count()}")

        if not args.yes:
            confirmation = input("Do you want to continue with demo data seeding? (yes/y to continue): ").strip().lower()
            if confirmation not in ["yes", "y"]:
                print("Seeding cancelled by user.")
                return False

        with tempfile.TemporaryDirectory() as workdir:
            store = LocalDataStore(KeyValueFile(os.path.join(workdir, "demo.json")))
            store.add_data_variation(args.variation)
            summary = import_into_database(db, store.export_for_database())

        print_summary(summary)
        return True
    except Exception as e:
        print(f"Seeding failed: {e}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
