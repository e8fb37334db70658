"""Shopify OAuth, webhook and Admin API integration."""

from shopify_auth.integrations.shopify.client import (
    ShopifyClient,
    ShopifyGraphqlClient,
    ShopifyResponse,
)
from shopify_auth.integrations.shopify.oauth import (
    AuthorizationRequest,
    AuthorizationResponse,
    Shopify,
    ShopifyPublicApp,
    private_app_client,
    public_app,
    public_app_client,
    public_app_from_settings,
)
from shopify_auth.integrations.shopify.transport import HttpxTransport, Transport, TransportResponse
from shopify_auth.integrations.shopify.webhooks import WebhookRequest, WebhookRequestFactory

__all__ = [
    "AuthorizationRequest",
    "AuthorizationResponse",
    "HttpxTransport",
    "Shopify",
    "ShopifyClient",
    "ShopifyGraphqlClient",
    "ShopifyPublicApp",
    "ShopifyResponse",
    "Transport",
    "TransportResponse",
    "WebhookRequest",
    "WebhookRequestFactory",
    "private_app_client",
    "public_app",
    "public_app_client",
    "public_app_from_settings",
]
