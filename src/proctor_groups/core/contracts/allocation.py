"""Allocation contracts: how a user was routed to a bucket.

Only :attr:`Allocation.id` is read by the groups core (it prefixes entries of
the logging string). Rules and ranges are carried through untouched so a
projected snapshot stays a faithful copy.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

from ._base import Contract


class Range(Contract):
    """A share of traffic assigned to one bucket value."""

    bucket_value: int
    length: Annotated[float, Field(ge=0.0, le=1.0)]


class Allocation(Contract):
    """Allocation selected for a test, identified by e.g. ``"#A1"``."""

    rule: str | None = None
    ranges: list[Range] = Field(default_factory=list)
    id: str = Field(default="", description="Allocation identifier used in logs.")


__all__ = ["Allocation", "Range"]
