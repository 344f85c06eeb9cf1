"""
Create a user (e.g. an extra admin). Run from project root:
  python -m supportdesk.scripts.create_user EMAIL PASSWORD [role]
Example:
  python -m supportdesk.scripts.create_user ops@example.com your-secure-password admin
"""
import argparse
import sys

from supportdesk.core.config import get_settings
from supportdesk.core.database import Database
from supportdesk.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from supportdesk.services.users import CredentialStore, UserExistsError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a SupportDesk user.")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    email = args.email.strip()
    if not email or "@" not in email or len(email) > 255:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    settings = get_settings()
    database = Database(settings.DATABASE_URL)
    db = database.session()
    try:
        user = CredentialStore(db).create(email, args.password, args.role)
    except UserExistsError:
        print(f"User '{email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
        database.dispose()
    print(f"Created user '{user.email}' with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
