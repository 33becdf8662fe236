#!/usr/bin/env python3
"""
Database Management Script for the AddedEmail Backend

A convenience wrapper around the scripts in scripts/.

Usage:
    python manage_db.py clear              # Delete all added emails
    python manage_db.py seed               # Add sample entries
    python manage_db.py seed --clear       # Clear then seed
    python manage_db.py view               # View entries
    python manage_db.py view --summary     # View summary only
    python manage_db.py reset              # Clear and seed (full reset)
"""

import sys
import subprocess
import argparse
from pathlib import Path
from typing import Optional, List


def run_script(script_name: str, args: Optional[List[str]] = None):
    """Run a script in the scripts directory"""
    script_path = Path(__file__).parent / "scripts" / f"{script_name}.py"

    if not script_path.exists():
        print(f"❌ Script not found: {script_path}")
        return False

    cmd = [sys.executable, str(script_path)]
    if args:
        cmd.extend(args)

    try:
        result = subprocess.run(cmd, check=True)
        return result.returncode == 0
    except subprocess.CalledProcessError as e:
        print(f"❌ Script failed with exit code {e.returncode}")
        return False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="AddedEmail Database Management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python manage_db.py clear --force            # Clear without confirmation
  python manage_db.py seed                     # Add sample data
  python manage_db.py view --limit 25          # View up to 25 entries
  python manage_db.py reset                    # Full reset (clear + seed)
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    clear_parser = subparsers.add_parser("clear", help="Delete all added emails")
    clear_parser.add_argument("--force", action="store_true", help="Skip confirmation")

    seed_parser = subparsers.add_parser("seed", help="Seed table with sample data")
    seed_parser.add_argument(
        "--clear", action="store_true", help="Clear table first"
    )

    view_parser = subparsers.add_parser("view", help="View table contents")
    view_parser.add_argument("--summary", action="store_true", help="Show summary only")
    view_parser.add_argument("--limit", type=int, help="Limit records displayed")

    subparsers.add_parser("reset", help="Full reset: clear and seed table")

    return parser


def script_invocation(args: argparse.Namespace):
    """Map parsed arguments to (script name, script arguments)"""
    if args.command == "clear":
        return "clear_database", ["--force"] if args.force else []

    if args.command == "seed":
        return "seed_database", ["--clear"] if args.clear else []

    if args.command == "view":
        script_args = []
        if args.summary:
            script_args.append("--summary")
        if args.limit:
            script_args.extend(["--limit", str(args.limit)])
        return "view_database", script_args

    if args.command == "reset":
        return "seed_database", ["--clear"]

    return None, None


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    script_name, script_args = script_invocation(args)
    if args.command == "reset":
        print("🔄 Performing full database reset...")

    if not run_script(script_name, script_args):
        sys.exit(1)


if __name__ == "__main__":
    main()
