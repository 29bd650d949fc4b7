#!/usr/bin/env python3
"""
Create an admin account directly in the database.

Registration is closed after the first account unless REGISTRATION_OPEN is
set; this script is the way to add further admins on a closed deployment.

Usage: python3 create_admin.py --email editor@example.com --password '...'
"""

import argparse
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent / "backend"))

from blogcms.core.database import Base, SessionLocal, engine
from blogcms.core.errors import ValidationError
from blogcms.services.credentials import CredentialStore
import blogcms.models  # noqa: F401


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a BlogCMS admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument(
        "--no-admin", action="store_true", help="Create a regular account instead"
    )
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        user = CredentialStore(db).create_user(
            args.email, args.password, is_admin=not args.no_admin
        )
    except ValidationError as e:
        print(f"❌ {e.message}")
        return 1
    finally:
        db.close()

    print(f"✅ Created {'admin' if user.is_admin else 'user'} {user.email} ({user.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
