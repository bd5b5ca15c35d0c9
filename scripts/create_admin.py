#!/usr/bin/env python3
"""
Bootstrap an admin account. Every other account is created by an admin through
POST /admin/create-user, so the first one has to come from here.

Run: python scripts/create_admin.py "Ada Admin" admin@example.com
     python scripts/create_admin.py "Ada Admin" admin@example.com --password s3cret --timezone Asia/Dubai
"""
from __future__ import annotations

import argparse
import getpass
import sys
from pathlib import Path

_project_root = Path(__file__).resolve().parent.parent
for _p in (_project_root, _project_root / "src"):
    if str(_p) not in sys.path:
        sys.path.insert(0, str(_p))


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an admin account.")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Login e-mail")
    parser.add_argument("--password", default=None, help="Password (prompted if omitted)")
    parser.add_argument("--timezone", default=None, help="IANA timezone (default Asia/Kolkata)")
    args = parser.parse_args()

    from api.config import SessionLocal, create_db
    from api.services.user_service import UserService

    password = args.password or getpass.getpass("Password: ")
    create_db()
    db = SessionLocal()
    try:
        result = UserService(db).create_user(
            name=args.name,
            email=args.email,
            password=password,
            role="admin",
            timezone=args.timezone,
        )
    finally:
        db.close()

    if not result.ok:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1
    print(f"Admin created uid={result.value.uid}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
