"""Registration flow: uniqueness check and account creation."""

import logging

from subjapi.core.errors import ConflictError
from subjapi.models import Account
from subjapi.schemas.auth import RegisterRequest
from subjapi.services.accounts import AccountStore

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "Username/Email already exists!"


def register(
    store: AccountStore,
    data: RegisterRequest,
    is_base_user: bool = False,
) -> Account:
    """
    Create an account unless the username or email is already taken.

    The pre-check avoids a doomed insert; the unique indexes on accounts decide
    concurrent duplicates, and a violation there is also reported as
    ConflictError. Any other storage failure propagates as StorageError.
    """
    if store.exists(data.username, data.email):
        logger.info("Registration conflict", extra={"username": data.username})
        raise ConflictError(CONFLICT_MESSAGE)

    account = Account(
        username=data.username,
        email=data.email,
        name=data.name,
        date_of_birth=data.date_of_birth,
        neptun_code=data.neptun_code,
        department=data.department,
        is_base_user=is_base_user,
    )
    try:
        account = store.create_account(account, data.password)
    except ConflictError as e:
        logger.info("Registration conflict at insert", extra={"username": data.username})
        raise ConflictError(CONFLICT_MESSAGE) from e
    logger.info("Registered account", extra={"username": account.username})
    return account
