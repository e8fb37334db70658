"""HMAC helpers shared by OAuth redirect and webhook verification."""

import base64
import hashlib
import hmac
from collections.abc import Mapping

# Shopify escapes these characters before signing redirect parameters.
_VALUE_ESCAPES = (("%", "%25"), ("&", "%26"))
_KEY_ESCAPES = (*_VALUE_ESCAPES, ("=", "%3D"))


def _escape(text: str, table: tuple[tuple[str, str], ...]) -> str:
    # '%' goes first so the escapes themselves are not re-escaped
    for char, replacement in table:
        text = text.replace(char, replacement)
    return text


def _to_bytes(value: str | bytes) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def hmac_sha256_hex(secret: str, message: str | bytes) -> str:
    """Return the hex encoded HMAC-SHA256 of ``message``."""
    return hmac.new(_to_bytes(secret), _to_bytes(message), hashlib.sha256).hexdigest()


def hmac_sha256_base64(secret: str, message: str | bytes) -> str:
    """Return the base64 encoded HMAC-SHA256 of ``message``."""
    digest = hmac.new(_to_bytes(secret), _to_bytes(message), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


def digests_match(expected: str, supplied: str) -> bool:
    """Compare two digests in constant time."""
    return hmac.compare_digest(_to_bytes(expected), _to_bytes(supplied))


def build_redirect_message(params: Mapping[str, str]) -> bytes:
    """Build the message Shopify signs for OAuth redirects and app proxy requests.

    The ``hmac`` parameter is dropped, ``&`` and ``%`` are escaped in keys and
    values, ``=`` is escaped in keys, and the ``key=value`` pairs are sorted
    as byte strings and joined with ``&``.

    Args:
        params: Query parameters as received (already URL-decoded).

    Returns:
        The message bytes to be signed.
    """
    pairs = sorted(
        f"{_escape(key, _KEY_ESCAPES)}={_escape(value, _VALUE_ESCAPES)}".encode()
        for key, value in params.items()
        if key != "hmac"
    )
    return b"&".join(pairs)


def sign_redirect_params(params: Mapping[str, str], secret: str) -> str:
    """Compute the hex signature Shopify attaches to a redirect."""
    return hmac_sha256_hex(secret, build_redirect_message(params))


def sign_webhook_body(body: bytes, secret: str) -> str:
    """Compute the base64 signature Shopify sends in ``X-Shopify-Hmac-Sha256``."""
    return hmac_sha256_base64(secret, body)
