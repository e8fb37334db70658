"""Exception hierarchy for Shopify authentication and API access."""


class ShopifyError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(ShopifyError, ValueError):
    """A value object was constructed from invalid input."""


class ShopDomainError(ValidationError):
    """The shop domain or shop name is malformed."""


class CredentialsError(ValidationError):
    """An API key, secret or access token is malformed."""


class ScopeError(ValidationError):
    """A scope set is empty or otherwise invalid."""


class AuthorizationError(ShopifyError):
    """An OAuth redirect, nonce, signature or code exchange failed validation."""


class WebhookValidationError(ShopifyError):
    """An inbound webhook delivery is not authentic or not well-formed."""


class ShopifyClientError(ShopifyError):
    """An Admin API call failed."""


class TransportError(ShopifyError):
    """The HTTP transport failed to complete a request."""
