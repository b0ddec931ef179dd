#!/usr/bin/env python3
"""
Script to create an admin account, or reset the password of an existing one.

Admins never self-register; run this once per environment:

    python create_admin.py --name Admin --email admin@aarogya.com --phone 0000000000
"""
import argparse
import getpass
import sys

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from aarogya.database import SessionLocal, engine  # noqa: E402
from aarogya.models import Base  # noqa: E402
from aarogya.core.bootstrap import create_or_reset_admin  # noqa: E402


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create or reset an Aarogya admin account")
    parser.add_argument("--name", default="Admin", help="Admin login name")
    parser.add_argument("--email", default="admin@aarogya.com", help="Admin email")
    parser.add_argument("--phone", default="0000000000", help="Admin phone")
    parser.add_argument("--password", help="Admin password (prompted when omitted)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    password = args.password or getpass.getpass("Admin password: ")
    if not password:
        print("Password is required")
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        admin = create_or_reset_admin(db, name=args.name, email=args.email, phone=args.phone, password=password)
    except ValueError as e:
        print(f"Admin setup failed: {e}")
        return 1
    finally:
        db.close()

    print(f"Admin ready: {admin.name} (ID: {admin.id})")
    print(f"Log in at /api/auth/admin/login with username '{admin.name}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())
