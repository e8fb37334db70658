"""FastAPI dependencies that verify inbound Shopify requests."""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from shopify_auth.core.config import get_settings
from shopify_auth.core.exceptions import AuthorizationError, WebhookValidationError
from shopify_auth.integrations.shopify.oauth import (
    AuthorizationRequest,
    ShopifyPublicApp,
    public_app_from_settings,
)
from shopify_auth.integrations.shopify.webhooks import WebhookRequest, WebhookRequestFactory

logger = logging.getLogger(__name__)


@lru_cache
def get_shopify_app() -> ShopifyPublicApp:
    """Get the public app configured from settings."""
    return public_app_from_settings(get_settings())


def get_webhook_factory() -> WebhookRequestFactory:
    return WebhookRequestFactory(get_settings().credentials().secret)


async def verified_webhook(
    request: Request,
    factory: WebhookRequestFactory = Depends(get_webhook_factory),
) -> WebhookRequest:
    """Authenticate the webhook delivery in the current request.

    Reads the raw body so the signature is checked against the exact bytes
    Shopify sent.
    """
    body = await request.body()
    try:
        return factory.create_webhook_request(request.headers, body)
    except WebhookValidationError as exc:
        logger.warning("Webhook rejected: %s", exc.message)
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid webhook") from exc


def authorization_request(
    request: Request,
    app: ShopifyPublicApp = Depends(get_shopify_app),
) -> AuthorizationRequest:
    """Validate the OAuth callback against the nonce stored in the state cookie."""
    nonce = request.cookies.get(get_settings().nonce_cookie_name, "")
    try:
        return app.validate_authorization_request(dict(request.query_params), nonce)
    except AuthorizationError as exc:
        logger.warning("OAuth callback rejected: %s", exc.message)
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Invalid OAuth callback") from exc


VerifiedWebhook = Annotated[WebhookRequest, Depends(verified_webhook)]
VerifiedAuthorization = Annotated[AuthorizationRequest, Depends(authorization_request)]
