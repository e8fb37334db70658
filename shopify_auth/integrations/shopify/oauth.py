"""Shopify OAuth flow: authorization URLs, redirect verification and token exchange."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Self
from urllib.parse import urlencode

from pydantic import ValidationError as PydanticValidationError

from shopify_auth.core.config import Settings, get_settings
from shopify_auth.core.exceptions import (
    AuthorizationError,
    ScopeError,
    ShopDomainError,
    TransportError,
)
from shopify_auth.core.logging_config import shop_context
from shopify_auth.core.security import digests_match, sign_redirect_params
from shopify_auth.credentials import AccessToken, ApiCredentials, ApiKey, ShopDomain
from shopify_auth.integrations.shopify.client import ShopifyClient, ShopifyGraphqlClient
from shopify_auth.integrations.shopify.transport import HttpxTransport, Transport
from shopify_auth.schemas.shopify import AccessTokenPayload, AssociatedUser
from shopify_auth.scopes import MissingScopes, Scopes, ScopesSatisfied

logger = logging.getLogger(__name__)

AUTHORIZE_PATH = "/admin/oauth/authorize"
ACCESS_TOKEN_PATH = "/admin/oauth/access_token"
ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"


@dataclass(frozen=True)
class AuthorizationRequest:
    """A verified OAuth callback: the shop and its one-time grant code."""

    shop_domain: ShopDomain
    code: str


@dataclass(frozen=True)
class AuthorizationResponse:
    """Result of exchanging a grant code for an access token."""

    access_token: AccessToken
    scopes: Scopes
    expires_in: int | None = None
    associated_user_scope: Scopes | None = None
    associated_user: AssociatedUser | None = None

    @property
    def is_online(self) -> bool:
        """True for per-user (online access mode) tokens."""
        return self.associated_user is not None

    @classmethod
    def from_payload(cls, payload: Any) -> Self:
        """Build from the access token endpoint's JSON body.

        Raises:
            AuthorizationError: If the body is not a well-formed token response.
        """
        try:
            parsed = AccessTokenPayload.model_validate(payload)
        except PydanticValidationError as exc:
            raise AuthorizationError(f"Malformed access token response: {exc}") from exc

        try:
            scopes = Scopes.from_string(parsed.scope)
        except ScopeError as exc:
            raise AuthorizationError("Access token response granted no scopes") from exc

        user_scope = None
        if parsed.associated_user_scope:
            user_scope = Scopes.from_string(parsed.associated_user_scope)

        return cls(
            access_token=AccessToken(parsed.access_token),
            scopes=scopes,
            expires_in=parsed.expires_in,
            associated_user_scope=user_scope,
            associated_user=parsed.associated_user,
        )


def public_app_auth_headers(access_token: AccessToken) -> dict[str, str]:
    return {ACCESS_TOKEN_HEADER: str(access_token)}


def private_app_auth_headers(credentials: ApiCredentials) -> dict[str, str]:
    return {"Authorization": credentials.basic_auth_header()}


class Shopify:
    """OAuth handshake and client construction for one app's credentials.

    Request data passed to the ``validate_*`` methods is the callback's query
    parameters as a string mapping (e.g. ``dict(request.query_params)``).
    """

    def __init__(
        self,
        transport: Transport,
        credentials: ApiCredentials,
        api_version: str | None = None,
    ) -> None:
        self.transport = transport
        self.credentials = credentials
        self.api_version = api_version

    def get_api_key(self) -> ApiKey:
        return self.credentials.api_key

    def validate_shop_request(self, request_data: Mapping[str, Any]) -> ShopDomain:
        """Validate the ``shop`` parameter of an app launch or install request.

        Raises:
            ShopDomainError: If ``shop`` is missing or malformed.
        """
        return ShopDomain.create(request_data.get("shop"))

    def get_authorization_url(
        self,
        shop_domain: ShopDomain,
        scopes: Scopes,
        redirect_url: str,
        nonce: str = "",
        online_access_mode: bool = False,
    ) -> str:
        """Build the URL to redirect the merchant to for app approval."""
        args = {
            "client_id": str(self.credentials.api_key),
            "scope": str(scopes),
            "redirect_uri": redirect_url,
            "state": nonce,
        }
        if online_access_mode:
            args["grant_options[]"] = "per-user"

        return f"{shop_domain.shop_url}{AUTHORIZE_PATH}?{urlencode(args)}"

    def validate_secured_request(self, request_data: Mapping[str, Any]) -> ShopDomain:
        """Verify the ``hmac`` signature Shopify attached to a redirect.

        Raises:
            AuthorizationError: If the shop is invalid, ``hmac`` is missing,
                or the signature does not match.
        """
        try:
            shop_domain = self.validate_shop_request(request_data)
        except ShopDomainError as exc:
            raise AuthorizationError(f"The shop provided by Shopify is invalid: {exc}") from exc

        if "hmac" not in request_data:
            raise AuthorizationError(
                "The provided request data is missing one of the following keys: hmac"
            )

        params: dict[str, str] = {}
        for key, value in request_data.items():
            if not isinstance(value, str):
                raise AuthorizationError(f"Invalid value for request parameter {key!r}")
            params[key] = value

        supplied = params["hmac"]
        computed = sign_redirect_params(params, str(self.credentials.secret))
        if not digests_match(computed, supplied):
            logger.warning("Rejected redirect with invalid HMAC for %s", shop_domain)
            raise AuthorizationError(
                f"The HMAC provided by Shopify ({supplied}) doesn't match "
                f"the HMAC verification ({computed})."
            )

        return shop_domain

    def validate_authorization_request(
        self,
        request_data: Mapping[str, Any],
        nonce: str = "",
        shop_domain: ShopDomain | None = None,
    ) -> AuthorizationRequest:
        """Validate an OAuth callback: grant code, state, signature and shop.

        ``state`` must equal ``nonce`` exactly. Both default to empty, so a
        caller that does not issue nonces gets no CSRF protection.

        Raises:
            AuthorizationError: On the first check that fails.
        """
        code = request_data.get("code")
        if not isinstance(code, str) or not code:
            raise AuthorizationError("Invalid or missing grant code.")

        if request_data.get("state") != nonce:
            raise AuthorizationError("Invalid or missing nonce.")

        request_shop = self.validate_secured_request(request_data)

        if shop_domain is not None and shop_domain != request_shop:
            raise AuthorizationError(
                f"The shop provided by Shopify ({request_shop}) does not match "
                f"the shop provided to this API ({shop_domain})"
            )

        return AuthorizationRequest(request_shop, code)

    def authorize_application(self, request: AuthorizationRequest) -> AuthorizationResponse:
        """Exchange the grant code for an access token.

        Raises:
            AuthorizationError: If the exchange fails or returns a malformed body.
        """
        with shop_context(str(request.shop_domain)):
            try:
                response = self.transport.call(
                    request.shop_domain.shop_url,
                    "POST",
                    ACCESS_TOKEN_PATH,
                    {},
                    {},
                    {
                        "client_id": str(self.credentials.api_key),
                        "client_secret": str(self.credentials.secret),
                        "code": request.code,
                    },
                )
            except TransportError as exc:
                logger.warning("Access token exchange failed: %s", exc.message)
                raise AuthorizationError(
                    f"Authorization request failed: {exc.message}", status_code=exc.status_code
                ) from exc

            result = AuthorizationResponse.from_payload(response.parsed_body)
            logger.info("Obtained access token with scopes %s", result.scopes)
            return result

    def create_public_app_client(
        self, shop_domain: ShopDomain, access_token: AccessToken
    ) -> ShopifyClient:
        return ShopifyClient(self.transport, shop_domain, public_app_auth_headers(access_token))

    def create_private_app_client(self, shop_domain: ShopDomain) -> ShopifyClient:
        return ShopifyClient(self.transport, shop_domain, private_app_auth_headers(self.credentials))

    def create_public_app_graphql_client(
        self, shop_domain: ShopDomain, access_token: AccessToken
    ) -> ShopifyGraphqlClient:
        return ShopifyGraphqlClient(
            self.transport, shop_domain, public_app_auth_headers(access_token), self.api_version
        )

    def create_public_app(
        self,
        redirect_url: str,
        required_scopes: Scopes,
        optional_scopes: Scopes | None = None,
    ) -> "ShopifyPublicApp":
        return ShopifyPublicApp(self, redirect_url, required_scopes, optional_scopes)


class ShopifyPublicApp:
    """A public app: fixed redirect URL and scope sets on top of ``Shopify``.

    Requests ``required | optional`` scopes and rejects an authorization
    that did not grant every required scope.
    """

    def __init__(
        self,
        shopify: Shopify,
        redirect_url: str,
        required_scopes: Scopes,
        optional_scopes: Scopes | None = None,
    ) -> None:
        if optional_scopes is not None and required_scopes.has_any(optional_scopes):
            raise ScopeError(
                "Required and optional scopes must be disjoint sets "
                f"(required: {required_scopes}, optional: {optional_scopes})"
            )
        self.shopify = shopify
        self.redirect_url = redirect_url
        self.required_scopes = required_scopes
        self.optional_scopes = optional_scopes

    @property
    def requested_scopes(self) -> Scopes:
        if self.optional_scopes is None:
            return self.required_scopes
        return self.required_scopes.with_(self.optional_scopes)

    def get_api_key(self) -> ApiKey:
        return self.shopify.get_api_key()

    def validate_shop_request(self, request_data: Mapping[str, Any]) -> ShopDomain:
        return self.shopify.validate_shop_request(request_data)

    def get_authorization_url(
        self, shop_domain: ShopDomain, nonce: str = "", online_access_mode: bool = False
    ) -> str:
        return self.shopify.get_authorization_url(
            shop_domain, self.requested_scopes, self.redirect_url, nonce, online_access_mode
        )

    def validate_secured_request(self, request_data: Mapping[str, Any]) -> ShopDomain:
        return self.shopify.validate_secured_request(request_data)

    def validate_authorization_request(
        self,
        request_data: Mapping[str, Any],
        nonce: str = "",
        shop_domain: ShopDomain | None = None,
    ) -> AuthorizationRequest:
        return self.shopify.validate_authorization_request(request_data, nonce, shop_domain)

    def authorize_application(self, request: AuthorizationRequest) -> AuthorizationResponse:
        """Exchange the grant code and check every required scope was granted.

        Raises:
            AuthorizationError: If the exchange fails or required scopes are missing.
        """
        response = self.shopify.authorize_application(request)

        match self.required_scopes.without(response.scopes):
            case ScopesSatisfied():
                return response
            case MissingScopes(scopes=missing):
                logger.warning("Shop %s did not grant scopes %s", request.shop_domain, missing)
                raise AuthorizationError(
                    "The user did not grant all required scopes "
                    f"(required: {self.required_scopes}, not granted: {missing})"
                )

    def create_public_app_client(
        self, shop_domain: ShopDomain, access_token: AccessToken
    ) -> ShopifyClient:
        return self.shopify.create_public_app_client(shop_domain, access_token)

    def create_public_app_graphql_client(
        self, shop_domain: ShopDomain, access_token: AccessToken
    ) -> ShopifyGraphqlClient:
        return self.shopify.create_public_app_graphql_client(shop_domain, access_token)


def private_app_client(
    transport: Transport, shop_domain: ShopDomain, credentials: ApiCredentials
) -> ShopifyClient:
    """REST client authenticated with a private app's key and password."""
    return ShopifyClient(transport, shop_domain, private_app_auth_headers(credentials))


def public_app_client(
    transport: Transport, shop_domain: ShopDomain, access_token: AccessToken
) -> ShopifyClient:
    """REST client authenticated with an OAuth access token."""
    return ShopifyClient(transport, shop_domain, public_app_auth_headers(access_token))


def public_app(
    transport: Transport,
    credentials: ApiCredentials,
    redirect_url: str,
    required_scopes: Scopes,
    optional_scopes: Scopes | None = None,
) -> ShopifyPublicApp:
    return Shopify(transport, credentials).create_public_app(
        redirect_url, required_scopes, optional_scopes
    )


def public_app_from_settings(
    settings: Settings | None = None, transport: Transport | None = None
) -> ShopifyPublicApp:
    """Wire a ``ShopifyPublicApp`` from ``SHOPIFY_*`` settings."""
    settings = settings or get_settings()
    transport = transport or HttpxTransport(timeout=settings.timeout)
    shopify = Shopify(transport, settings.credentials(), settings.api_version)
    return shopify.create_public_app(
        settings.redirect_url, settings.required_scopes(), settings.optional_scopes_set()
    )
