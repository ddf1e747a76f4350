"""Bootstrap flow: idempotent seeding of roles and one sample account per role."""

import logging
from datetime import date
from typing import TYPE_CHECKING

from subjapi.core.errors import ConflictError
from subjapi.models import Account
from subjapi.schemas.auth import RegisterRequest
from subjapi.services.accounts import AccountStore, normalize_email
from subjapi.services.registration import register

if TYPE_CHECKING:
    from subjapi.core.config import Settings

logger = logging.getLogger(__name__)

ROLE_ADMIN = "Admin"
ROLE_USER = "User"
SEED_ROLES = (ROLE_ADMIN, ROLE_USER)


def init_roles(store: AccountStore) -> list[str]:
    """Create any missing seed role. Returns the names created (empty when all existed)."""
    created: list[str] = []
    for name in SEED_ROLES:
        if store.role_exists(name):
            continue
        try:
            store.create_role(name)
        except ConflictError:
            # Created concurrently by another bootstrap run.
            continue
        created.append(name)
    if created:
        logger.info("Seeded roles", extra={"roles": ",".join(created)})
    return created


def _seed_requests(settings: "Settings") -> list[tuple[RegisterRequest, str, bool]]:
    """(registration data, role, is_base_user) for each sample account."""
    return [
        (
            RegisterRequest(
                username="admin",
                email="admin@example.com",
                password=settings.SEED_ADMIN_PASSWORD.get_secret_value(),
                name="Sample Admin",
                date_of_birth=date(1980, 1, 1),
                neptun_code="ADMIN1",
                department="Administration",
            ),
            ROLE_ADMIN,
            False,
        ),
        (
            RegisterRequest(
                username="user",
                email="user@example.com",
                password=settings.SEED_USER_PASSWORD.get_secret_value(),
                name="Sample User",
                date_of_birth=date(1990, 1, 1),
                neptun_code="USER01",
                department="Teaching",
            ),
            ROLE_USER,
            True,
        ),
    ]


def _is_sample_account(store: AccountStore, account: Account, data: RegisterRequest) -> bool:
    """True when the existing account carries the sample email and seed password."""
    return account.email == normalize_email(data.email) and store.check_password(
        account, data.password
    )


def init_users(store: AccountStore, settings: "Settings") -> list[str]:
    """
    Ensure each seed role has its sample account holding that role.

    Seeds the roles first. An account already holding a sample username is only
    given its role when it is the sample account itself (sample email and seed
    password); any other holder is left untouched. Returns the usernames created.
    """
    init_roles(store)
    created: list[str] = []
    for data, role, is_base_user in _seed_requests(settings):
        account = store.find_by_username(data.username)
        if account is None:
            try:
                account = register(store, data, is_base_user=is_base_user)
                created.append(account.username)
            except ConflictError:
                account = store.find_by_username(data.username)
                if account is None:
                    logger.warning(
                        "Sample account email is taken by another account; skipping",
                        extra={"username": data.username},
                    )
                    continue
        if account.username not in created and not _is_sample_account(store, account, data):
            logger.warning(
                "Sample username is held by a non-sample account; not granting role",
                extra={"username": data.username, "role": role},
            )
            continue
        store.add_to_role(account, role)
    if created:
        logger.info("Seeded sample accounts", extra={"usernames": ",".join(created)})
    return created
