"""Login flow: verify credentials and issue a signed access token."""

import logging
from datetime import datetime

from subjapi.core.errors import UnauthenticatedError
from subjapi.core.security import (
    IssuedToken,
    TokenConfig,
    hash_password,
    issue_token,
    verify_password,
)
from subjapi.services.accounts import AccountStore
from subjapi.services.claims import build_claims

logger = logging.getLogger(__name__)

# Same message for unknown user and wrong password (no username enumeration).
INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."

# Verified against when the username is unknown so both failures cost one bcrypt check.
_DUMMY_HASH = hash_password("timing-equalization-placeholder")


def login(
    store: AccountStore,
    config: TokenConfig,
    username: str,
    password: str,
    now: datetime | None = None,
) -> IssuedToken:
    """
    Authenticate username/password and return a token issued at `now`.

    Roles are read at login time; the token carries them until it expires.
    Raises UnauthenticatedError for an unknown username or a wrong password.
    """
    account = store.find_by_username(username)
    if account is None:
        verify_password(password, _DUMMY_HASH)
        logger.info("Login failed", extra={"username": username})
        raise UnauthenticatedError(INVALID_CREDENTIALS_MESSAGE)
    if not store.check_password(account, password):
        logger.info("Login failed", extra={"username": username})
        raise UnauthenticatedError(INVALID_CREDENTIALS_MESSAGE)

    roles = store.get_roles(account)
    issued = issue_token(build_claims(account, roles), config, now=now)
    logger.info(
        "Login succeeded",
        extra={"username": username, "roles": ",".join(roles)},
    )
    return issued
