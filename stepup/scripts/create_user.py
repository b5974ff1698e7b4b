"""
Create a user and print a bearer token for it (no registration UI). Run from project root:
  python -m stepup.scripts.create_user USERNAME [--email EMAIL] [--password PASSWORD]
Example:
  python -m stepup.scripts.create_user alice --email alice@example.com --password 'Abcd1234!'
"""
import argparse
import sys

from sqlalchemy import func

from stepup.core.database import SessionLocal
from stepup.core.security import create_access_token
from stepup.models.user import User
from stepup.schemas.account import password_meets_policy
from stepup.services.credentials import credential_changes
from stepup.services.passwords import encrypt_password


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a Stepup user.")
    parser.add_argument("username", help="Username (letters, digits, underscore)")
    parser.add_argument("--email", default=None, help="Primary email")
    parser.add_argument(
        "--password",
        default=None,
        help="Initial password; omit to create a user without one",
    )
    args = parser.parse_args()

    username = args.username.strip()
    if not username or len(username) > 128:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if args.password is not None and not password_meets_policy(args.password):
        print(
            "Password must be 8-72 characters (72 bytes) and mix letters, numbers, and symbols.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        existing = (
            db.query(User).filter(func.lower(User.username) == username.lower()).first()
        )
        if existing:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        user = User(username=username, primary_email=args.email, custom_data={})
        if args.password is not None:
            for key, value in credential_changes(encrypt_password(args.password)).items():
                setattr(user, key, value)
        db.add(user)
        db.commit()
        print(f"Created user '{username}' with id '{user.id}'.")
        print(f"Bearer token: {create_access_token(sub=user.id)}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
