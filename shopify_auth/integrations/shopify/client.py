"""Shopify Admin API clients (REST and GraphQL) with call-budget tracking."""

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Self

from pydantic import ValidationError as PydanticValidationError

from shopify_auth.core.exceptions import ShopifyClientError, TransportError
from shopify_auth.credentials import ShopDomain
from shopify_auth.integrations.shopify.transport import Transport, TransportResponse
from shopify_auth.schemas.shopify import QueryCost

logger = logging.getLogger(__name__)

API_CALL_LIMIT_HEADER = "X-Shopify-Shop-Api-Call-Limit"
GRAPHQL_PATH = "/admin/api/graphql.json"
VERSIONED_GRAPHQL_PATH = "/admin/api/{version}/graphql.json"

_CALL_LIMIT_RE = re.compile(r"(\d+)/(\d+)")


@dataclass(frozen=True)
class ShopifyResponse:
    """An Admin API response plus the call budget it reported.

    ``calls_made``, ``call_limit`` and ``cost`` are all ``None`` for an
    unlimited response, and all set for a limited one.
    """

    status: int
    raw_body: bytes
    parsed_body: dict[str, Any] = field(default_factory=dict)
    calls_made: int | None = None
    call_limit: int | None = None
    cost: int | None = None

    @classmethod
    def unlimited(cls, status: int, raw_body: bytes, parsed_body: dict[str, Any]) -> Self:
        return cls(status, raw_body, parsed_body)

    @classmethod
    def limited(
        cls,
        status: int,
        raw_body: bytes,
        parsed_body: dict[str, Any],
        calls_made: int,
        call_limit: int,
        cost: int,
    ) -> Self:
        return cls(status, raw_body, parsed_body, calls_made, call_limit, cost)

    @property
    def is_limited(self) -> bool:
        return self.call_limit is not None

    @property
    def calls_remaining(self) -> int | None:
        if self.call_limit is None or self.calls_made is None:
            return None
        return self.call_limit - self.calls_made


def parse_rest_response(response: TransportResponse) -> ShopifyResponse:
    """Read the ``made/limit`` header of a REST response."""
    parsed_body = response.parsed_body or {}
    match = _CALL_LIMIT_RE.fullmatch(response.header(API_CALL_LIMIT_HEADER).strip())
    if not match:
        return ShopifyResponse.unlimited(response.status, response.raw_body, parsed_body)
    return ShopifyResponse.limited(
        response.status,
        response.raw_body,
        parsed_body,
        calls_made=int(match.group(1)),
        call_limit=int(match.group(2)),
        cost=1,
    )


def parse_graphql_response(response: TransportResponse) -> ShopifyResponse:
    """Unwrap ``data`` and read the query cost from ``extensions``.

    Raises:
        ShopifyClientError: If the body reports errors or carries no data.
    """
    body = response.parsed_body or {}
    if not isinstance(body, dict):
        raise ShopifyClientError("Shopify GraphQL response is not a JSON object")

    if body.get("errors"):
        raise ShopifyClientError(
            f"Shopify GraphQL request failed with errors: {json.dumps(body['errors'])}",
            status_code=response.status,
        )
    if "data" not in body:
        raise ShopifyClientError(
            "Shopify GraphQL client failed to recognize response data structure - missing data property"
        )

    data = body["data"] or {}
    cost_payload = (body.get("extensions") or {}).get("cost")
    if not cost_payload:
        return ShopifyResponse.unlimited(response.status, response.raw_body, data)

    try:
        cost = QueryCost.model_validate(cost_payload)
    except PydanticValidationError:
        logger.debug("Ignoring incomplete GraphQL cost extension: %s", cost_payload)
        return ShopifyResponse.unlimited(response.status, response.raw_body, data)

    call_limit = int(cost.throttle_status.maximum_available)
    remaining = int(cost.throttle_status.currently_available)
    return ShopifyResponse.limited(
        response.status,
        response.raw_body,
        data,
        calls_made=call_limit - remaining,
        call_limit=call_limit,
        cost=int(cost.actual_query_cost),
    )


class ShopifyClient:
    """Client for the Shopify Admin REST API."""

    def __init__(
        self, transport: Transport, shop_domain: ShopDomain, headers: Mapping[str, str]
    ) -> None:
        self.transport = transport
        self.shop_domain = shop_domain
        self.headers = {**headers, "content-type": "application/json"}

    def call(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        query: Mapping[str, Any] | None = None,
    ) -> ShopifyResponse:
        """Call ``endpoint`` (e.g. ``/admin/api/2025-01/shop.json``).

        Raises:
            ShopifyClientError: If the transport fails.
        """
        try:
            response = self.transport.call(
                self.shop_domain.shop_url, method, endpoint, query or {}, self.headers, body
            )
        except TransportError as exc:
            raise ShopifyClientError(exc.message, status_code=exc.status_code) from exc

        result = parse_rest_response(response)
        if result.is_limited:
            logger.debug(
                "API budget for %s: %s/%s", self.shop_domain, result.calls_made, result.call_limit
            )
        return result


class ShopifyGraphqlClient:
    """Client for the Shopify Admin GraphQL API.

    Without ``api_version`` the unversioned ``graphql.json`` endpoint is used.
    """

    def __init__(
        self,
        transport: Transport,
        shop_domain: ShopDomain,
        headers: Mapping[str, str],
        api_version: str | None = None,
    ) -> None:
        self.transport = transport
        self.shop_domain = shop_domain
        self.headers = dict(headers)
        self.path = VERSIONED_GRAPHQL_PATH.format(version=api_version) if api_version else GRAPHQL_PATH

    def query(self, query: str, variables: Mapping[str, Any] | None = None) -> ShopifyResponse:
        """Run a GraphQL query; the response's ``parsed_body`` is the ``data`` member.

        Raises:
            ShopifyClientError: If the transport fails or the response reports errors.
        """
        try:
            response = self.transport.call(
                self.shop_domain.shop_url,
                "POST",
                self.path,
                {},
                self.headers,
                {"query": query, "variables": dict(variables or {})},
            )
        except TransportError as exc:
            raise ShopifyClientError(exc.message, status_code=exc.status_code) from exc

        return parse_graphql_response(response)
