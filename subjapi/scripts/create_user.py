"""
Register an account from the command line, optionally granting a role. Run from project root:
  python -m subjapi.scripts.create_user USERNAME EMAIL PASSWORD NAME DATE_OF_BIRTH [--role Admin]
Example:
  python -m subjapi.scripts.create_user alice alice@example.com 'P@ssw0rd' 'Alice A.' 1999-04-01 --role User
"""
import argparse
import sys

from pydantic import ValidationError

from subjapi.core.database import SessionLocal
from subjapi.core.errors import ConflictError, StorageError
from subjapi.schemas.auth import RegisterRequest
from subjapi.services.accounts import AccountStore
from subjapi.services.bootstrap import SEED_ROLES, init_roles
from subjapi.services.registration import register


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Register a Subjects API account.")
    parser.add_argument("username", help="Unique username (letters, digits and -._@+)")
    parser.add_argument("email", help="Unique email address")
    parser.add_argument("password", help="Password (6-128 chars, upper, lower, digit, symbol)")
    parser.add_argument("name", help="Display name")
    parser.add_argument("date_of_birth", help="Date of birth (YYYY-MM-DD)")
    parser.add_argument("--neptun-code", default="", help="Institutional code")
    parser.add_argument("--department", default="", help="Department or affiliation")
    parser.add_argument("--base-user", action="store_true", help="Mark as an ordinary (base) user")
    parser.add_argument("--role", choices=SEED_ROLES, default=None, help="Role to grant")
    args = parser.parse_args(argv)

    try:
        data = RegisterRequest(
            username=args.username.strip(),
            email=args.email,
            password=args.password,
            name=args.name,
            date_of_birth=args.date_of_birth,
            neptun_code=args.neptun_code,
            department=args.department,
        )
    except ValidationError as e:
        for err in e.errors():
            print(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        store = AccountStore(db)
        try:
            account = register(store, data, is_base_user=args.base_user)
        except ConflictError as e:
            print(e.message, file=sys.stderr)
            return 1
        if args.role:
            init_roles(store)
            store.add_to_role(account, args.role)
        suffix = f" with role '{args.role}'." if args.role else "."
        print(f"Created account '{account.username}'{suffix}")
        return 0
    except StorageError as e:
        print(f"Storage error: {e.message}", file=sys.stderr)
        return 2
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
