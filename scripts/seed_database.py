#!/usr/bin/env python3
"""
Database Seed Script for the AddedEmail Backend

Adds a handful of sample email entries owned by a freshly generated
development user, going through AddedEmailService so the same policies
and timestamp rules apply as for API callers. Prints an access token for
that user.

Usage:
    python scripts/seed_database.py
    python scripts/seed_database.py --clear  # Clear table first
"""

import sys
import uuid
from pathlib import Path

# Add the backend directory to the Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from sqlalchemy.orm import Session
from app.core.errors import UniquenessViolation
from app.database import engine, create_tables
from app.models import AddedEmail
from app.services.added_email import AddedEmailService
from app.utils.auth import Principal, create_access_token

SAMPLE_EMAILS = [
    {"email": "ada@example.com", "first_name": "Ada", "last_name": "Lovelace"},
    {"email": "grace@example.com", "first_name": "Grace", "last_name": "Hopper"},
    {"email": "alan@example.com", "first_name": "Alan", "last_name": "Turing"},
    {"email": "newsletter@example.com"},
]


def seed_database(clear_first: bool = False):
    """Seed the AddedEmail table with sample entries"""
    print("🌱 Seeding AddedEmail table...")

    if clear_first:
        from scripts.clear_database import clear_database

        print("Clearing existing data first...")
        clear_database()

    # Ensure tables exist
    create_tables()

    db = Session(bind=engine)
    service = AddedEmailService()
    principal = Principal(user_id=uuid.uuid4())

    try:
        print(f"\n👤 Seeding as development user {principal.user_id}")
        for entry in SAMPLE_EMAILS:
            try:
                record = service.create_email(db, principal, entry)
                print(f"  ✅ Added {record.email} (ID: {record.id})")
            except UniquenessViolation:
                print(f"  ⏭️  {entry['email']} already present, skipping")

        print(f"\n📊 Database seeding complete! Summary:")
        print(f"  - Added emails: {db.query(AddedEmail).count()}")

        print(f"\n🔑 Access token for {principal.user_id}:")
        print(f"  {create_access_token(principal.user_id)}")

        return True

    except Exception as e:
        print(f"❌ Error seeding database: {e}")
        db.rollback()
        return False
    finally:
        db.close()


def main():
    """Main function to handle command line arguments"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Seed AddedEmail table with sample data"
    )
    parser.add_argument(
        "--clear", action="store_true", help="Clear table before seeding"
    )
    args = parser.parse_args()

    success = seed_database(clear_first=args.clear)

    if success:
        print("\n🎉 Database seeding completed successfully!")
        print("\n💡 Next steps:")
        print("  1. Start the API server: uvicorn main:app --reload")
        print("  2. Call /api/added-emails with the token above")
        print("  3. Use scripts/view_database.py to inspect the data")
    else:
        print("\n❌ Database seeding failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
