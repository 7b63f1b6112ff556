"""Typed lookup outcome for the bucket metadata fallback chain.

Motivation
----------
Payload and description resolution try several sources in a fixed order
(the active bucket, the definition, the caller's fallback bucket). Each
source reports either a hit or the reason it missed, so the chain stays
explicit and each step can be tested on its own:

- `Found(value)` / `Missing(reason)` variants,
- combinators: `map`, `filter`, `or_else`,
- helpers: `unwrap`, `get_or`.

Example
-------
>>> from proctor_groups.core.lookup import found, missing
>>> missing("no definition").or_else(lambda _: found(3)).unwrap()
3
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, cast

T = TypeVar("T")
U = TypeVar("U")


class Lookup(Generic[T]):
    """Sum type representing either a hit (`Found[T]`) or a miss (`Missing`)."""

    # ----- Introspection -----------------------------------------------------
    def is_found(self) -> bool:
        """Return ``True`` if this is a :class:`Found` value."""
        return isinstance(self, Found)

    def is_missing(self) -> bool:
        """Return ``True`` if this is a :class:`Missing` value."""
        return isinstance(self, Missing)

    # ----- Unwraps -----------------------------------------------------------
    def unwrap(self) -> T:
        """Return the found value, or raise ``LookupError`` with the miss reason."""
        if isinstance(self, Found):
            return cast(Found[T], self).value
        raise LookupError(cast(Missing[T], self).reason)

    def get_or(self, default: T) -> T:
        """Return the found value or ``default`` on a miss."""
        if isinstance(self, Found):
            return cast(Found[T], self).value
        return default

    # ----- Combinators -------------------------------------------------------
    def map(self, fn: Callable[[T], U]) -> Lookup[U]:
        """Apply ``fn`` to a found value; propagate a miss unchanged."""
        if isinstance(self, Found):
            return Found(fn(cast(Found[T], self).value))
        return cast(Lookup[U], self)

    def filter(self, predicate: Callable[[T], bool], reason: str) -> Lookup[T]:
        """Turn a hit into ``Missing(reason)`` when ``predicate`` rejects it."""
        if isinstance(self, Found) and not predicate(cast(Found[T], self).value):
            return Missing(reason)
        return self

    def or_else(self, fallback: Callable[[str], Lookup[T]]) -> Lookup[T]:
        """On a miss, call ``fallback(reason)``; otherwise return ``self``."""
        if isinstance(self, Missing):
            return fallback(cast(Missing[T], self).reason)
        return self


@dataclass(frozen=True)
class Found(Lookup[T]):
    """Successful lookup wrapping a value of type ``T``."""

    value: T


@dataclass(frozen=True)
class Missing(Lookup[T]):
    """Failed lookup carrying a short, human-readable reason."""

    reason: str


# ----- Convenience constructors ----------------------------------------------
def found(value: T) -> Lookup[T]:
    """Construct :class:`Found` with better type inference at call sites."""
    return Found(value)


def missing(reason: str) -> Lookup[T]:
    """Construct :class:`Missing` with better type inference at call sites."""
    return Missing(reason)


__all__ = ["Found", "Lookup", "Missing", "found", "missing"]
