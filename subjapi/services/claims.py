"""Claims builder: identity assertions embedded in an access token."""

import uuid
from collections.abc import Iterable

from subjapi.models import Account
from subjapi.schemas.auth import TokenClaims


def build_claims(account: Account, roles: Iterable[str]) -> TokenClaims:
    """
    Build the claims set for an authenticated account.

    Always carries the username, a fresh UUID4 token id and the is_base_user
    flag rendered as 'True'/'False'; one role claim per role held. Pure: no
    lookups and no side effects.
    """
    return TokenClaims(
        sub=account.username,
        jti=str(uuid.uuid4()),
        actor=str(bool(account.is_base_user)),
        roles=tuple(roles),
    )
