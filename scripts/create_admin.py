import argparse
import asyncio
import getpass
import os
import sys

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.core.db import SessionLocal, commit_or_raise, init_models
from app.core.security import hash_password
from app.modules.staff.repository import StaffRepository
from app.modules.staff.service import MIN_PASSWORD_LENGTH


async def create_or_update_admin(name: str, email: str, password: str):
    """
    Creates a full-admin account, or promotes and re-keys an existing one with the same email.
    """
    await init_models()
    async with SessionLocal() as db:
        staff = StaffRepository(db)
        existing = await staff.get_by_email(email)
        if existing:
            print(f"  - Staff member '{email}' exists. Granting full admin and resetting password.")
            await staff.update(
                existing.id,
                name=name or existing.name,
                password_hash=hash_password(password),
                role="admin",
                is_active=True,
                is_full_admin=True,
            )
        else:
            print(f"  - Creating full admin '{email}'...")
            await staff.create(
                name=name,
                email=email.strip().lower(),
                password_hash=hash_password(password),
                role="admin",
                is_active=True,
                is_full_admin=True,
                permissions=[],
            )
        await commit_or_raise(db)
    print("Done. Existing sessions for this account stay valid until they expire.")


def main():
    parser = argparse.ArgumentParser(description="Create or update a full-admin staff account.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="Administrator")
    parser.add_argument("--password", help="prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        parser.error(f"password must be at least {MIN_PASSWORD_LENGTH} characters")

    asyncio.run(create_or_update_admin(args.name, args.email, password))


if __name__ == "__main__":
    main()
