"""Pytest configuration and fixtures for the shopify_auth test suite.

Provides:
- Test credentials and settings (SHOPIFY_* environment)
- A mock Transport recording outbound calls
- Signature helpers for OAuth redirects and webhooks
"""

import base64
import hashlib
import hmac
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import MagicMock

import pytest

from shopify_auth.core.config import get_settings
from shopify_auth.credentials import ApiCredentials, ShopDomain
from shopify_auth.integrations.shopify.oauth import Shopify, ShopifyPublicApp
from shopify_auth.integrations.shopify.transport import Transport, TransportResponse
from shopify_auth.scopes import Scopes

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SHOPIFY_TEST_CLIENT_ID = "test-shopify-client-id"
SHOPIFY_TEST_CLIENT_SECRET = "test-shopify-client-secret"
SHOPIFY_TEST_SHOP = "test-store.myshopify.com"
SHOPIFY_TEST_REDIRECT_URL = "https://app.example.com/auth/callback"
SHOPIFY_TEST_ACCESS_TOKEN = "shpat_test_access_token_123"


@pytest.fixture(autouse=True)
def set_shopify_test_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Ensure Shopify settings are set for all tests.

    This is autouse=True so all tests have consistent Shopify config.
    """
    monkeypatch.setenv("SHOPIFY_API_KEY", SHOPIFY_TEST_CLIENT_ID)
    monkeypatch.setenv("SHOPIFY_API_SECRET", SHOPIFY_TEST_CLIENT_SECRET)
    monkeypatch.setenv("SHOPIFY_REDIRECT_URL", SHOPIFY_TEST_REDIRECT_URL)
    monkeypatch.setenv("SHOPIFY_SCOPES", "read_products,read_orders")
    monkeypatch.setenv("SHOPIFY_OPTIONAL_SCOPES", "")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Credentials & flow objects
# ---------------------------------------------------------------------------


@pytest.fixture
def credentials() -> ApiCredentials:
    return ApiCredentials.create(SHOPIFY_TEST_CLIENT_ID, SHOPIFY_TEST_CLIENT_SECRET)


@pytest.fixture
def shop_domain() -> ShopDomain:
    return ShopDomain.from_string(SHOPIFY_TEST_SHOP)


@pytest.fixture
def mock_transport() -> MagicMock:
    """A Transport double returning an empty 200 response by default.

    Set ``mock_transport.call.return_value`` (or ``side_effect``) per test.
    """
    transport = MagicMock(spec=Transport)
    transport.call.return_value = TransportResponse(status=200, raw_body=b"{}", parsed_body={})
    return transport


@pytest.fixture
def shopify(mock_transport: MagicMock, credentials: ApiCredentials) -> Shopify:
    return Shopify(mock_transport, credentials)


@pytest.fixture
def public_app(shopify: Shopify) -> ShopifyPublicApp:
    return shopify.create_public_app(
        SHOPIFY_TEST_REDIRECT_URL,
        Scopes(["read_products", "read_orders"]),
        Scopes(["write_orders"]),
    )


@pytest.fixture
def token_response() -> Callable[..., TransportResponse]:
    """Build an access token endpoint response.

    Usage:
        mock_transport.call.return_value = token_response(scope="read_products")
    """

    def _response(scope: str = "read_products,read_orders", **extra: Any) -> TransportResponse:
        body = {"access_token": SHOPIFY_TEST_ACCESS_TOKEN, "scope": scope, **extra}
        return TransportResponse(status=200, raw_body=b"{...}", parsed_body=body)

    return _response


# ---------------------------------------------------------------------------
# Signatures
# ---------------------------------------------------------------------------


@pytest.fixture
def shopify_webhook_signature() -> Callable[[bytes], str]:
    """Generate a valid Shopify webhook HMAC signature for a given body.

    Usage:
        signature = shopify_webhook_signature(b'{"id": 123}')
        headers = {"X-Shopify-Hmac-Sha256": signature, ...}
    """

    def _sign(body: bytes) -> str:
        return base64.b64encode(
            hmac.new(
                SHOPIFY_TEST_CLIENT_SECRET.encode(),
                body,
                hashlib.sha256,
            ).digest()
        ).decode()

    return _sign


@pytest.fixture
def shopify_webhook_headers(
    shopify_webhook_signature: Callable[[bytes], str],
) -> Callable[..., dict[str, str]]:
    """Generate complete Shopify webhook headers for a given body and shop.

    Usage:
        headers = shopify_webhook_headers(body)
        headers = shopify_webhook_headers(body, shop="other.myshopify.com")
    """

    def _headers(
        body: bytes, shop: str = SHOPIFY_TEST_SHOP, topic: str = "orders/create"
    ) -> dict[str, str]:
        return {
            "X-Shopify-Hmac-Sha256": shopify_webhook_signature(body),
            "X-Shopify-Shop-Domain": shop,
            "X-Shopify-Topic": topic,
            "Content-Type": "application/json",
        }

    return _headers


@pytest.fixture
def shopify_oauth_hmac() -> Callable[[dict[str, str]], str]:
    """Generate a valid Shopify OAuth callback HMAC for query params.

    Shopify signs the sorted ``key=value`` pairs (excluding ``hmac``) with
    ``%``/``&`` escaped in values and ``%``/``&``/``=`` escaped in keys.

    Usage:
        params = {"code": "abc", "shop": "store.myshopify.com", "state": "nonce123"}
        params["hmac"] = shopify_oauth_hmac(params)
    """

    def _escape(text: str, is_key: bool) -> str:
        text = text.replace("%", "%25").replace("&", "%26")
        return text.replace("=", "%3D") if is_key else text

    def _sign(params: dict[str, str]) -> str:
        message = "&".join(
            sorted(
                f"{_escape(k, True)}={_escape(v, False)}" for k, v in params.items() if k != "hmac"
            )
        )
        return hmac.new(
            SHOPIFY_TEST_CLIENT_SECRET.encode(),
            message.encode(),
            hashlib.sha256,
        ).hexdigest()

    return _sign
