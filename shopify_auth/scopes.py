"""Access scope sets and the result of comparing them."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Self

from shopify_auth.core.exceptions import ScopeError


@dataclass(frozen=True)
class Scopes:
    """A non-empty, immutable set of access scope names.

    Scope names are case-sensitive. The canonical string form is the sorted
    names joined with commas, which is what Shopify expects in the
    ``scope`` authorize parameter.
    """

    names: frozenset[str]

    def __init__(self, names: Iterable[str]) -> None:
        if isinstance(names, str):
            raise ScopeError("Scopes must be an iterable of scope names, not a string.")
        normalized = frozenset(names)
        for name in normalized:
            if not isinstance(name, str) or not name or name != name.strip():
                raise ScopeError(f"Invalid scope name: {name!r}.")
        if not normalized:
            raise ScopeError("Scopes cannot be empty.")
        object.__setattr__(self, "names", normalized)

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Parse a comma separated list such as ``"read_orders, write_orders"``."""
        return cls(part.strip() for part in value.split(",") if part.strip())

    def with_(self, other: "Scopes") -> "Scopes":
        """Union of both sets."""
        return Scopes(self.names | other.names)

    def without(self, other: "Scopes") -> "ScopesSatisfied | MissingScopes":
        """Scopes in this set that ``other`` does not cover."""
        remaining = self.names - other.names
        if not remaining:
            return ScopesSatisfied()
        return MissingScopes(Scopes(remaining))

    def has_any(self, other: "Scopes") -> bool:
        """True if the two sets share at least one scope."""
        return not self.names.isdisjoint(other.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.names))

    def __len__(self) -> int:
        return len(self.names)

    def __str__(self) -> str:
        return ",".join(sorted(self.names))


@dataclass(frozen=True)
class ScopesSatisfied:
    """Every requested scope is covered."""


@dataclass(frozen=True)
class MissingScopes:
    """Requested scopes that were not covered."""

    scopes: Scopes
