"""Schema for the health endpoint: database reachability and auth readiness."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    Health report for load balancers and operators.

    status is "degraded" when the database is unreachable or no signing
    config has been loaded, since login and the access gate cannot work then.
    """

    status: Literal["ok", "degraded"]
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected"]
    signing: Literal["loaded", "not_loaded"] = Field(
        description="Whether the token signing config was built at startup",
    )
    token_lifetime_minutes: int | None = Field(
        default=None,
        description="Validity of newly issued tokens; None until signing is loaded",
    )
    bootstrap_enabled: bool = Field(description="Whether init-roles/init-users are exposed")
