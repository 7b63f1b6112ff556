"""ConsumableTestDefinition: the catalogue of legal buckets for a test.

The groups core reads ``buckets`` only, to find the description and payload
of a bucket value that differs from the determined one. The remaining fields
are metadata carried through projections unchanged.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from ._base import Contract
from .allocation import Allocation
from .bucket import TestBucket


class ConsumableTestDefinition(Contract):
    """Definition of one test as consumed by applications."""

    version: str = ""
    salt: str = ""
    test_type: str | None = None
    description: str | None = None
    rule: str | None = None
    constants: dict[str, Any] = Field(default_factory=dict)
    buckets: list[TestBucket] = Field(default_factory=list)
    allocations: list[Allocation] = Field(default_factory=list)

    def find_bucket(self, value: int) -> TestBucket | None:
        """Return the first bucket declaring ``value``, or ``None``."""
        return next((b for b in self.buckets if b.value == value), None)

    def min_bucket(self) -> TestBucket | None:
        """Return the bucket with the smallest value, or ``None`` if there are none."""
        return min(self.buckets, key=lambda b: b.value, default=None)


__all__ = ["ConsumableTestDefinition"]
