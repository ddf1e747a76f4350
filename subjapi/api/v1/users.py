"""Account listing for administrators."""

from typing import Annotated

from fastapi import APIRouter, Depends

from subjapi.api.deps import get_account_store, require_role
from subjapi.schemas.auth import TokenClaims, UserListItem, UsersListResponse
from subjapi.services.accounts import AccountStore
from subjapi.services.bootstrap import ROLE_ADMIN

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[TokenClaims, Depends(require_role(ROLE_ADMIN))],
    store: Annotated[AccountStore, Depends(get_account_store)],
) -> UsersListResponse:
    """List all accounts (Admin role only)."""
    return UsersListResponse(
        users=[
            UserListItem(
                id=a.id,
                username=a.username,
                email=a.email,
                name=a.name,
                department=a.department,
                is_base_user=a.is_base_user,
                roles=sorted(r.name for r in a.roles),
            )
            for a in store.get_all()
        ]
    )
