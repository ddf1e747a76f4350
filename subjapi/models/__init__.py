"""SQLAlchemy ORM models."""

from subjapi.models.account import Account
from subjapi.models.base import Base, SoftDeleteMixin
from subjapi.models.role import Role, account_roles

__all__ = ["Account", "Base", "Role", "SoftDeleteMixin", "account_roles"]
