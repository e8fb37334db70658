"""HMAC signing helper for simulating Shopify webhooks.

Reads a JSON body from stdin and prints the base64 HMAC-SHA256 signature
using SHOPIFY_API_SECRET from the environment (or .env file).

Usage:
    echo -n '{"id": 123}' | python -m scripts.sign_webhook

    # Full curl example:
    BODY='{"id":99001,"email":"test@example.com"}'
    HMAC=$(echo -n "$BODY" | python -m scripts.sign_webhook)
    curl -X POST http://localhost:8000/webhooks \\
      -H "Content-Type: application/json" \\
      -H "X-Shopify-Topic: orders/create" \\
      -H "X-Shopify-Hmac-Sha256: $HMAC" \\
      -H "X-Shopify-Shop-Domain: test-store.myshopify.com" \\
      -d "$BODY"
"""

import sys

from shopify_auth.core.config import get_settings
from shopify_auth.core.security import sign_webhook_body


def main() -> None:
    secret = get_settings().api_secret
    if not secret:
        print("ERROR: SHOPIFY_API_SECRET is not set in .env", file=sys.stderr)
        sys.exit(1)

    body = sys.stdin.buffer.read()
    if not body:
        print("ERROR: No input received on stdin", file=sys.stderr)
        sys.exit(1)

    print(sign_webhook_body(body, secret), end="")


if __name__ == "__main__":
    main()
