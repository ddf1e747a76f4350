"""Credential store: account lookup, password verification, creation and role membership."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from subjapi.core.security import hash_password, verify_password
from subjapi.models import Account, Role
from subjapi.services.repository import GenericRepository, storage_errors

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Emails are compared and stored lowercase so the unique index is case-insensitive."""
    return email.strip().lower()


class AccountStore(GenericRepository[Account]):
    """
    Persistence for accounts and roles.

    Usernames are matched exactly (case-sensitive); emails case-insensitively.
    Passwords are only ever stored as bcrypt hashes. Soft-deleted accounts are
    invisible to every lookup.
    """

    def __init__(self, session: Session) -> None:
        super().__init__(session, Account)

    def find_by_username(self, username: str) -> Account | None:
        with self.errors():
            return self.query().filter(Account.username == username).first()

    def exists(self, username: str, email: str) -> bool:
        """True if any account (deleted ones included) holds this username or email."""
        with self.errors():
            match = (
                self.session.query(Account.id)
                .filter(
                    (Account.username == username)
                    | (func.lower(Account.email) == normalize_email(email))
                )
                .first()
            )
        return match is not None

    def create_account(self, account: Account, password: str) -> Account:
        """Hash the password and persist the account. Unique violations raise ConflictError."""
        account.email = normalize_email(account.email)
        account.password_hash = hash_password(password)
        return self.create(account)

    def check_password(self, account: Account, password: str) -> bool:
        return verify_password(password, account.password_hash)

    def get_roles(self, account: Account) -> list[str]:
        """Current role names of the account, sorted for stable output."""
        with self.errors():
            self.session.refresh(account)
            return sorted(role.name for role in account.roles)

    def find_role(self, name: str) -> Role | None:
        with self.errors():
            return self.session.query(Role).filter(Role.name == name).first()

    def role_exists(self, name: str) -> bool:
        return self.find_role(name) is not None

    def create_role(self, name: str) -> Role:
        role = Role(name=name)
        with storage_errors(self.session, Role.__tablename__):
            self.session.add(role)
            self.session.commit()
            self.session.refresh(role)
        logger.info("Created role", extra={"role": name})
        return role

    def add_to_role(self, account: Account, role_name: str) -> None:
        """Grant a role. No-op when the account already holds it."""
        role = self.find_role(role_name)
        if role is None:
            raise ValueError(f"Role {role_name!r} does not exist")
        if role in account.roles:
            return
        with self.errors():
            account.roles.append(role)
            self.session.commit()
        logger.info(
            "Assigned role",
            extra={"username": account.username, "role": role_name},
        )
