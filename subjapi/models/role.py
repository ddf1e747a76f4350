"""ORM models for authorization roles and account-role membership."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table

from subjapi.models.base import Base

account_roles = Table(
    "account_roles",
    Base.metadata,
    Column("account_id", Integer, ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """Named authorization group (e.g. 'Admin', 'User'). Names are unique."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False, unique=True, index=True)
