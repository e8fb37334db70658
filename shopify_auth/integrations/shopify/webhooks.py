"""Shopify webhook authentication."""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from shopify_auth.core.exceptions import ShopDomainError, WebhookValidationError
from shopify_auth.core.security import digests_match, sign_webhook_body
from shopify_auth.credentials import ApiSecretKey, ShopDomain

logger = logging.getLogger(__name__)

SHOP_DOMAIN_HEADER = "X-Shopify-Shop-Domain"
TOPIC_HEADER = "X-Shopify-Topic"
HMAC_HEADER = "X-Shopify-Hmac-Sha256"
WEBHOOK_ID_HEADER = "X-Shopify-Webhook-Id"
API_VERSION_HEADER = "X-Shopify-API-Version"
CONTENT_TYPE_HEADER = "Content-Type"


@dataclass(frozen=True)
class WebhookRequest:
    """An authenticated webhook delivery."""

    shop_domain: ShopDomain
    topic: str
    data: dict[str, Any]
    webhook_id: str | None = None
    api_version: str | None = None


class WebhookRequestFactory:
    """Turns raw webhook deliveries into ``WebhookRequest`` objects.

    The body must be the exact bytes received; the signature is computed
    over them before any decoding.
    """

    def __init__(self, secret: ApiSecretKey) -> None:
        self.secret = secret

    def create_webhook_request(self, headers: Mapping[str, str], body: bytes) -> WebhookRequest:
        """Verify and decode one delivery.

        Args:
            headers: Request headers (any casing).
            body: Raw request body.

        Raises:
            WebhookValidationError: If a header is missing, the signature does
                not match, or the body is not a JSON object.
        """
        lowered = {key.lower(): value for key, value in headers.items()}

        def header(name: str) -> str:
            return lowered.get(name.lower(), "").strip()

        try:
            shop_domain = ShopDomain.create(header(SHOP_DOMAIN_HEADER))
        except ShopDomainError as exc:
            raise WebhookValidationError(f"Invalid shop domain: {exc}") from exc

        topic = header(TOPIC_HEADER)
        if not topic:
            raise WebhookValidationError("Missing webhook topic")

        supplied = header(HMAC_HEADER)
        if not supplied:
            raise WebhookValidationError("Missing webhook signature")

        content_type = header(CONTENT_TYPE_HEADER)
        if not content_type:
            raise WebhookValidationError("Missing webhook content type")

        computed = sign_webhook_body(body, str(self.secret))
        if not digests_match(computed, supplied):
            logger.warning("Rejected %s webhook with invalid HMAC for %s", topic, shop_domain)
            raise WebhookValidationError(
                f"The HMAC provided by Shopify ({supplied}) doesn't match "
                f"the HMAC verification ({computed})."
            )

        if "application/json" not in content_type:
            raise WebhookValidationError(f"Unsupported webhook content type {content_type}")

        try:
            data = json.loads(body)
        except ValueError as exc:
            raise WebhookValidationError("Failed to decode webhook body") from exc
        if not isinstance(data, dict):
            raise WebhookValidationError("Failed to decode webhook body")

        return WebhookRequest(
            shop_domain=shop_domain,
            topic=topic,
            data=data,
            webhook_id=header(WEBHOOK_ID_HEADER) or None,
            api_version=header(API_VERSION_HEADER) or None,
        )
