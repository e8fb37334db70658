"""Structured JSON logging configuration."""

import contextvars
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from pythonjsonlogger.json import JsonFormatter

shop_domain_var: contextvars.ContextVar[str] = contextvars.ContextVar("shop_domain", default="")


class ShopDomainFilter(logging.Filter):
    """Inject shop_domain into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.shop_domain = shop_domain_var.get("")  # type: ignore[attr-defined]
        return True


def setup_logging(*, debug: bool = False) -> None:
    """Configure root logger with JSON formatter and shop-domain filter."""
    handler = logging.StreamHandler()
    formatter = JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s %(shop_domain)s",
        rename_fields={"asctime": "timestamp", "levelname": "level"},
    )
    handler.setFormatter(formatter)
    handler.addFilter(ShopDomainFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)


@contextmanager
def shop_context(shop_domain: str) -> Iterator[None]:
    """Tag log records emitted inside the block with ``shop_domain``."""
    token = shop_domain_var.set(shop_domain)
    try:
        yield
    finally:
        shop_domain_var.reset(token)
