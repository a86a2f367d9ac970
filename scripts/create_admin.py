"""
Create an admin user, or promote an existing user to admin.
Run: python scripts/create_admin.py --email admin@example.com [--name "Admin"]
The password is prompted for when a new account is created.
"""

import argparse
import os
import sys
import getpass

# Add parent directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from quotevault.config import get_settings
from quotevault.core.security import hash_password
from quotevault.crud.user import UserCRUD
from quotevault.models.user import UserModel
from quotevault.services.local_store import LocalStore
from quotevault.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 8


def create_admin(store: LocalStore, email: str, password: str, name: str = "") -> UserModel:
    """Create an admin account, or promote the user that already has this email."""
    users = UserCRUD(store)
    existing = users.get_by_email(email)
    if existing is not None:
        if existing.is_admin:
            logger.info(f"Admin user with email {email} already exists")
            return existing
        logger.info(f"User {email} updated to admin role")
        return users.set_role(existing.id, "admin")

    user = users.create_user(
        UserModel(
            email=email,
            password_hash=hash_password(password),
            display_name=name or email.split("@")[0],
            role="admin",
        )
    )
    logger.info(f"Admin user {email} created")
    return user


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Create a QuoteVault admin user")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="")
    parser.add_argument("--data-dir", default=settings.data_dir or "./data", help="Store directory")
    args = parser.parse_args()

    configure_logging(debug=settings.debug)
    store = LocalStore(args.data_dir)

    password = ""
    if UserCRUD(store).get_by_email(args.email) is None:
        password = getpass.getpass("Password: ")
        if len(password) < MIN_PASSWORD_LENGTH:
            parser.error(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    create_admin(store, args.email, password, args.name)


if __name__ == "__main__":
    main()
