"""Shared fixtures for service and API tests: in-memory SQLite and fast bcrypt."""

from datetime import date, timedelta

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import subjapi.core.security as security
from subjapi.core.security import TokenConfig
from subjapi.models import Base
from subjapi.schemas.auth import RegisterRequest

# Minimum bcrypt cost keeps the suite fast; production uses the module default.
security.BCRYPT_ROUNDS = 4

TEST_SECRET = "unit-test-signing-secret-0123456789abcdef"
OTHER_SECRET = "another-signing-secret-fedcba9876543210xyz"


def make_sessionmaker() -> sessionmaker:
    """Fresh in-memory database with all tables, shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_session() -> Session:
    return make_sessionmaker()()


def make_token_config(
    secret: str = TEST_SECRET,
    issuer: str = "subjapi-test",
    audience: str = "subjapi-test-clients",
    validity: timedelta = timedelta(hours=4),
) -> TokenConfig:
    return TokenConfig.create(secret=secret, issuer=issuer, audience=audience, validity=validity)


def registration(
    username: str = "alice",
    email: str = "a@x.com",
    password: str = "P@ssw0rd",
    **kwargs: object,
) -> RegisterRequest:
    """Build a valid RegisterRequest for tests."""
    defaults = {
        "name": "Alice Example",
        "date_of_birth": date(1999, 4, 1),
        "neptun_code": "ABC123",
        "department": "Mathematics",
    }
    defaults.update(kwargs)
    return RegisterRequest(username=username, email=email, password=password, **defaults)
