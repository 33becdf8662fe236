#!/usr/bin/env python3
"""
Database Viewer Script for the AddedEmail Backend

Usage:
    python scripts/view_database.py
    python scripts/view_database.py --summary         # Show summary only
    python scripts/view_database.py --limit 20        # Show at most 20 rows
"""

import sys
from pathlib import Path
from datetime import datetime

# Add the backend directory to the Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from sqlalchemy import func
from sqlalchemy.orm import Session
from app.database import engine
from app.models import AddedEmail
from typing import Optional


def view_table(db: Session, limit: Optional[int] = None):
    """Print AddedEmail rows, newest first"""
    print(f"📊 TABLE: {AddedEmail.__tablename__.upper()}")
    print("-" * 50)

    count = db.query(AddedEmail).count()
    print(f"Total records: {count}")

    if count == 0:
        print("No records found")
        print()
        return

    query = db.query(AddedEmail).order_by(AddedEmail.created_at.desc())
    query = query.limit(limit or 10)
    records = query.all()

    for i, record in enumerate(records, 1):
        print(f"\nRecord {i}:")

        for column in AddedEmail.__table__.columns:
            value = getattr(record, column.name)

            if isinstance(value, datetime):
                value = value.strftime("%Y-%m-%d %H:%M:%S UTC")

            print(f"  {column.name}: {value}")

    remaining = count - len(records)
    if remaining > 0:
        print(f"  ... and {remaining} more records")

    print("-" * 50)
    print()


def view_database_summary(db: Session):
    """Show entry counts per owner"""
    print("=" * 60)
    print("ADDED EMAIL SUMMARY")
    print("=" * 60)
    print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print()

    print(f"📊 Total entries: {db.query(AddedEmail).count()}")
    print()

    owners = (
        db.query(AddedEmail.created_by, func.count(AddedEmail.id))
        .group_by(AddedEmail.created_by)
        .order_by(func.count(AddedEmail.id).desc())
        .all()
    )
    if owners:
        print("👥 ENTRIES BY OWNER:")
        for owner, entries in owners:
            print(f"  - {owner or 'no owner'}: {entries}")

    print()


def main():
    """Main function to handle command line arguments"""
    import argparse

    parser = argparse.ArgumentParser(description="View AddedEmail table contents")
    parser.add_argument("--summary", action="store_true", help="Show summary only")
    parser.add_argument("--limit", type=int, help="Limit number of records to display")

    args = parser.parse_args()

    db = Session(bind=engine)

    try:
        if args.summary:
            view_database_summary(db)
        else:
            view_table(db, args.limit)
    finally:
        db.close()


if __name__ == "__main__":
    main()
