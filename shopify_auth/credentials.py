"""Validated value objects for shop domains and app credentials."""

import base64
import re
from dataclasses import dataclass, field
from typing import Any, ClassVar, Self

from shopify_auth.core.exceptions import CredentialsError, ShopDomainError

SHOP_DOMAIN_SUFFIX = ".myshopify.com"

_SHOP_NAME_RE = re.compile(r"\S+")
_SHOP_DOMAIN_RE = re.compile(r"(\S+)\.myshopify\.com")


@dataclass(frozen=True)
class ShopDomain:
    """A shop's canonical ``<name>.myshopify.com`` host.

    Equality is by shop name. Build one with ``create`` (untyped input),
    ``from_string`` (full domain) or ``from_shop_name`` (bare name).
    """

    shop_name: str

    def __post_init__(self) -> None:
        if not isinstance(self.shop_name, str) or not _SHOP_NAME_RE.fullmatch(self.shop_name):
            raise ShopDomainError(f'Invalid shop name: "{self.shop_name}".')

    @classmethod
    def create(cls, value: Any) -> Self:
        """Validate an untyped value (a query param, a header) as a shop domain."""
        if not isinstance(value, str):
            raise ShopDomainError(f"Expected shop domain, got {type(value).__name__}")
        return cls.from_string(value)

    @classmethod
    def from_string(cls, shop_domain: str) -> Self:
        """Parse ``<name>.myshopify.com``."""
        match = _SHOP_DOMAIN_RE.fullmatch(shop_domain)
        if not match:
            raise ShopDomainError(f'Invalid shop domain: "{shop_domain}".')
        return cls(match.group(1))

    @classmethod
    def from_shop_name(cls, shop_name: str) -> Self:
        """Build a domain from a bare shop name such as ``my-store``."""
        return cls(shop_name)

    @property
    def shop_url(self) -> str:
        """HTTPS origin used for every Admin API call."""
        return f"https://{self}"

    def __str__(self) -> str:
        return f"{self.shop_name}{SHOP_DOMAIN_SUFFIX}"


@dataclass(frozen=True)
class Credential:
    """Base for opaque, non-empty credential strings."""

    value: str = field(repr=False)

    not_string_error: ClassVar[str] = "Credential must be a string."
    empty_error: ClassVar[str] = "Empty credential."
    masked: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise CredentialsError(self.not_string_error)
        if not self.value:
            raise CredentialsError(self.empty_error)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        shown = "***" if self.masked else self.value
        return f"{type(self).__name__}({shown!r})"


@dataclass(frozen=True, repr=False)
class ApiKey(Credential):
    """Public app identifier (OAuth ``client_id``)."""

    not_string_error: ClassVar[str] = "API key must be a string."
    empty_error: ClassVar[str] = "Empty API key."
    masked: ClassVar[bool] = False


@dataclass(frozen=True, repr=False)
class ApiSecretKey(Credential):
    """App secret used to sign OAuth exchanges and verify HMACs."""

    not_string_error: ClassVar[str] = "API secret must be a string."
    empty_error: ClassVar[str] = "Empty API secret."


@dataclass(frozen=True, repr=False)
class AccessToken(Credential):
    """Admin API access token issued by the OAuth exchange."""

    not_string_error: ClassVar[str] = "Access token must be a string."
    empty_error: ClassVar[str] = "Empty access token."


@dataclass(frozen=True)
class ApiCredentials:
    """API key and secret pair."""

    api_key: ApiKey
    secret: ApiSecretKey

    @classmethod
    def create(cls, api_key: str, secret: str) -> Self:
        return cls(ApiKey(api_key), ApiSecretKey(secret))

    def basic_auth_header(self) -> str:
        """``Authorization`` header value for private app calls."""
        token = base64.b64encode(f"{self.api_key}:{self.secret}".encode()).decode("utf-8")
        return f"Basic {token}"
