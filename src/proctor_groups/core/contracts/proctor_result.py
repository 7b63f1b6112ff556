"""ProctorResult: the immutable allocation snapshot consumed by the groups core.

The snapshot bundles, for every evaluated test, the determined bucket and the
allocation that produced it, plus the optional test definitions. A bucket may
exist without a definition; that degenerate shape is legal and only shows up
in tests or hand-built snapshots.
"""

from __future__ import annotations

from pydantic import Field

from ._base import Contract
from .allocation import Allocation
from .bucket import TestBucket
from .definition import ConsumableTestDefinition


class ProctorResult(Contract):
    """Buckets, allocations and definitions for one evaluation."""

    matrix_version: str = Field(default="", description="Opaque test-matrix version tag.")
    buckets: dict[str, TestBucket] = Field(default_factory=dict)
    allocations: dict[str, Allocation] = Field(default_factory=dict)
    test_definitions: dict[str, ConsumableTestDefinition] = Field(default_factory=dict)


__all__ = ["ProctorResult"]
