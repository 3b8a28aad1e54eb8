"""
Create a user (e.g. the first admin; registration always assigns the user role). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user admin@example.com your-secure-password admin
"""
import argparse
import sys
import uuid
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.core.database import SessionLocal
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, generate_salt, hash_password
from app.models.enums import Role, UserStatus
from app.models.user import User
from app.repositories.user import UserRepository
from app.schemas.auth import normalize_email


def main(
    argv: Sequence[str] | None = None,
    session_factory: Callable[[], Session] = SessionLocal,
) -> int:
    parser = argparse.ArgumentParser(description="Create a Tasklane user.")
    parser.add_argument("email", help="Email address (login name)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    email = normalize_email(args.email)
    if "@" not in email or len(email) > 255:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = session_factory()
    try:
        repo = UserRepository(db)
        if repo.email_exists(email):
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        salt = generate_salt()
        now = datetime.now(timezone.utc)
        repo.create(
            User(
                id=uuid.uuid4(),
                email=email,
                password_hash=hash_password(args.password, salt),
                salt=salt,
                role=int(Role[args.role.upper()]),
                status=int(UserStatus.ACTIVE),
                created_at=now,
                updated_at=now,
            )
        )
        print(f"Created user '{email}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
