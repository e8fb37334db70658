"""Pydantic schemas for Shopify OAuth and GraphQL payloads."""

from pydantic import Field

from shopify_auth.schemas.common import BaseSchema


class AssociatedUser(BaseSchema):
    """Staff member an online access token is bound to."""

    id: int
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    email_verified: bool = False
    account_owner: bool = False
    locale: str | None = None
    collaborator: bool = False


class AccessTokenPayload(BaseSchema):
    """Body returned by ``POST /admin/oauth/access_token``."""

    access_token: str = Field(min_length=1)
    scope: str
    # Online access mode only
    expires_in: int | None = None
    associated_user_scope: str | None = None
    associated_user: AssociatedUser | None = None


class ThrottleStatus(BaseSchema):
    """GraphQL ``extensions.cost.throttleStatus``."""

    maximum_available: float = Field(alias="maximumAvailable")
    currently_available: float = Field(alias="currentlyAvailable")
    restore_rate: float | None = Field(default=None, alias="restoreRate")


class QueryCost(BaseSchema):
    """GraphQL ``extensions.cost``."""

    requested_query_cost: float | None = Field(default=None, alias="requestedQueryCost")
    actual_query_cost: float = Field(alias="actualQueryCost")
    throttle_status: ThrottleStatus = Field(alias="throttleStatus")
