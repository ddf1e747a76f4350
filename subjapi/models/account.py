"""ORM model for registrable accounts (authentication and RBAC)."""

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from subjapi.models.base import Base, SoftDeleteMixin
from subjapi.models.role import Role, account_roles


class Account(SoftDeleteMixin, Base):
    """
    Account for JWT authentication and role-based access control.

    username and email are each unique across all accounts; the database
    constraint is the final arbiter under concurrent registrations.
    is_base_user marks an ordinary account, as opposed to a privileged one.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(256), nullable=False, unique=True, index=True)
    email = Column(String(256), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False, default="")
    date_of_birth = Column(Date, nullable=True)
    neptun_code = Column(String(32), nullable=False, default="")
    department = Column(String(255), nullable=False, default="")
    is_base_user = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    roles = relationship(Role, secondary=account_roles, lazy="selectin")
