"""Pydantic schemas for payload validation."""

from shopify_auth.schemas.common import BaseSchema
from shopify_auth.schemas.shopify import AccessTokenPayload, AssociatedUser, QueryCost, ThrottleStatus

__all__ = [
    "BaseSchema",
    "AccessTokenPayload",
    "AssociatedUser",
    "QueryCost",
    "ThrottleStatus",
]
