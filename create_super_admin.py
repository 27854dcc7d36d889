#!/usr/bin/env python3
"""
Script to create (or promote) the first super admin profile.
Run this after the database migration has been completed.

Usage:
    python create_super_admin.py <email> <name>

Example:
    python create_super_admin.py admin@example.com "Shift Admin"

Prints a development bearer token for the profile. In production tokens come
from the identity provider, not from this script.
"""

import sys
from pathlib import Path

# Add the apps/api directory to the path so we can import from shiftbook
api_dir = Path(__file__).parent / "apps" / "api"
sys.path.insert(0, str(api_dir))

from shiftbook.core.database import SessionLocal
from shiftbook.core.errors import SchedulingError
from shiftbook.routers.auth import create_access_token
from shiftbook.services.profiles import upsert_super_admin


def create_super_admin(email: str, name: str) -> bool:
    """Create or promote a super admin profile in the database."""
    db = SessionLocal()

    try:
        profile = upsert_super_admin(db, email, name)

        print(f"✅ Super admin ready!")
        print(f"   Profile ID: {profile.profile_id}")
        print(f"   Name: {profile.full_name}")
        print(f"   Email: {profile.email}")
        print(f"   Role: {profile.role}")
        print(f"   Dev token: {create_access_token({'sub': str(profile.profile_id)})}")

        return True
    except SchedulingError as e:
        print(f"❌ Error creating super admin: {e.detail}")
        return False
    finally:
        db.close()

if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python create_super_admin.py <email> <name>")
        print('Example: python create_super_admin.py admin@example.com "Shift Admin"')
        sys.exit(1)

    email = sys.argv[1]
    name = sys.argv[2]

    if not email or not name:
        print("❌ Email and name are required!")
        sys.exit(1)

    success = create_super_admin(email, name)
    sys.exit(0 if success else 1)
