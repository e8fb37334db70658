"""Authentication toolkit for Shopify apps: OAuth, HMAC verification and API call budgets."""

from shopify_auth.core.exceptions import (
    AuthorizationError,
    CredentialsError,
    ScopeError,
    ShopDomainError,
    ShopifyClientError,
    ShopifyError,
    TransportError,
    ValidationError,
    WebhookValidationError,
)
from shopify_auth.credentials import AccessToken, ApiCredentials, ApiKey, ApiSecretKey, ShopDomain
from shopify_auth.integrations.shopify import (
    AuthorizationRequest,
    AuthorizationResponse,
    HttpxTransport,
    Shopify,
    ShopifyClient,
    ShopifyGraphqlClient,
    ShopifyPublicApp,
    ShopifyResponse,
    Transport,
    TransportResponse,
    WebhookRequest,
    WebhookRequestFactory,
    private_app_client,
    public_app,
    public_app_client,
    public_app_from_settings,
)
from shopify_auth.scopes import MissingScopes, Scopes, ScopesSatisfied

__version__ = "0.1.0"

__all__ = [
    "AccessToken",
    "ApiCredentials",
    "ApiKey",
    "ApiSecretKey",
    "AuthorizationError",
    "AuthorizationRequest",
    "AuthorizationResponse",
    "CredentialsError",
    "HttpxTransport",
    "MissingScopes",
    "ScopeError",
    "Scopes",
    "ScopesSatisfied",
    "ShopDomain",
    "ShopDomainError",
    "Shopify",
    "ShopifyClient",
    "ShopifyClientError",
    "ShopifyError",
    "ShopifyGraphqlClient",
    "ShopifyPublicApp",
    "ShopifyResponse",
    "Transport",
    "TransportError",
    "TransportResponse",
    "ValidationError",
    "WebhookRequest",
    "WebhookRequestFactory",
    "WebhookValidationError",
    "private_app_client",
    "public_app",
    "public_app_client",
    "public_app_from_settings",
]
