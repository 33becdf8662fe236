#!/usr/bin/env python3
"""
Database Clear Script for the AddedEmail Backend

Removes every AddedEmail row while keeping the table, its indexes,
trigger and policies in place. Connects with the application's own
credentials, so row level security is not consulted.

Usage:
    python scripts/clear_database.py
    python scripts/clear_database.py --force   # Skip confirmation
"""

import sys
from pathlib import Path

# Add the backend directory to the Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from sqlalchemy.orm import Session
from app.database import engine
from app.models import AddedEmail


def clear_database():
    """Delete all AddedEmail rows"""
    print("🗑️  Clearing AddedEmail table...")

    db = Session(bind=engine)

    try:
        deleted = db.query(AddedEmail).delete()
        db.commit()
        print(f"✅ Removed {deleted} email entries")

        print("\n📊 Table counts after clearing:")
        print(f"  - Added emails: {db.query(AddedEmail).count()}")

    except Exception as e:
        print(f"❌ Error clearing database: {e}")
        db.rollback()
        return False
    finally:
        db.close()

    return True


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Clear AddedEmail table")
    parser.add_argument("--force", action="store_true", help="Skip confirmation prompt")
    args = parser.parse_args()

    if not args.force:
        response = input(
            "⚠️  This will delete ALL added emails from the database. Continue? (y/N): "
        )
        if response.lower() != "y":
            print("Operation cancelled.")
            sys.exit(0)

    success = clear_database()
    sys.exit(0 if success else 1)
