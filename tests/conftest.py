"""Shared fixtures: one snapshot exercising every resolution path.

Tests in the snapshot
---------------------
- ``holdout_tst``          hold-out test, determined value 2
- ``bgtst``                control (0) with payload
- ``abtst``                active (1) with payload
- ``groupwithfallbacktst`` value 2 without payload; definition has bucket 42
- ``btntst``               inactive (-1)
- ``no_definition_tst``    bucket and allocation, but no definition
- ``nobucketfallbacktst``  definition only, no bucket in the snapshot
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from proctor_groups.core.contracts import (
    Allocation,
    ConsumableTestDefinition,
    Payload,
    ProctorResult,
    Range,
    TestBucket,
)
from proctor_groups.groups import Groups
from proctor_groups.overrides import forced_override, holdout_override

HOLDOUT = "holdout_tst"
CONTROL = "bgtst"
ACTIVE = "abtst"
GROUP_WITH_FALLBACK = "groupwithfallbacktst"
INACTIVE = "btntst"
NO_DEFINITION = "no_definition_tst"
NO_BUCKETS_WITH_FALLBACK = "nobucketfallbacktst"


@dataclass(frozen=True)
class ModelBucket:
    """Generated-code style bucket: it only knows its value."""

    value: int


INACTIVE_BUCKET = TestBucket(name="inactive", value=-1, description="inactive")
CONTROL_BUCKET = TestBucket(
    name="control", value=0, description="control", payload=Payload(string_value="controlPayload")
)
ACTIVE_PAYLOAD_BUCKET = TestBucket(
    name="active", value=1, description="active", payload=Payload(string_value="activePayload")
)
ACTIVE_BUCKET = TestBucket(name="active", value=2, description="active")
FALLBACK_DEFINITION_BUCKET = TestBucket(
    name="fallbackBucket", value=42, description="fallbackDesc", payload=Payload(string_value="fallback")
)


def _allocation(bucket: TestBucket, allocation_id: str) -> Allocation:
    return Allocation(ranges=[Range(bucket_value=bucket.value, length=1.0)], id=allocation_id)


def _definition(*buckets: TestBucket) -> ConsumableTestDefinition:
    return ConsumableTestDefinition(buckets=list(buckets))


@pytest.fixture
def proctor_result() -> ProctorResult:
    """The shared snapshot described in the module docstring."""
    return ProctorResult(
        matrix_version="0",
        buckets={
            HOLDOUT: ACTIVE_BUCKET,
            CONTROL: CONTROL_BUCKET,
            ACTIVE: ACTIVE_PAYLOAD_BUCKET,
            GROUP_WITH_FALLBACK: ACTIVE_BUCKET,
            INACTIVE: INACTIVE_BUCKET,
            NO_DEFINITION: ACTIVE_BUCKET,
        },
        allocations={
            HOLDOUT: _allocation(ACTIVE_BUCKET, "#A1"),
            CONTROL: _allocation(CONTROL_BUCKET, "#A1"),
            ACTIVE: _allocation(ACTIVE_PAYLOAD_BUCKET, "#B2"),
            GROUP_WITH_FALLBACK: _allocation(ACTIVE_BUCKET, "#B2"),
            INACTIVE: _allocation(INACTIVE_BUCKET, "#C3"),
            NO_DEFINITION: _allocation(ACTIVE_BUCKET, "#A5"),
        },
        test_definitions={
            HOLDOUT: _definition(INACTIVE_BUCKET, ACTIVE_BUCKET),
            CONTROL: _definition(INACTIVE_BUCKET, CONTROL_BUCKET, ACTIVE_PAYLOAD_BUCKET),
            ACTIVE: _definition(INACTIVE_BUCKET, CONTROL_BUCKET, ACTIVE_PAYLOAD_BUCKET),
            INACTIVE: _definition(INACTIVE_BUCKET, ACTIVE_BUCKET),
            GROUP_WITH_FALLBACK: _definition(
                FALLBACK_DEFINITION_BUCKET, INACTIVE_BUCKET, ACTIVE_BUCKET
            ),
            NO_BUCKETS_WITH_FALLBACK: _definition(
                FALLBACK_DEFINITION_BUCKET, INACTIVE_BUCKET, ACTIVE_BUCKET
            ),
        },
    )


@pytest.fixture
def empty_groups() -> Groups:
    """Groups bound to a snapshot without any test."""
    return Groups(ProctorResult(matrix_version="0"))


@pytest.fixture
def groups(proctor_result: ProctorResult) -> Groups:
    """Groups without overrides."""
    return Groups(proctor_result)


@pytest.fixture
def groups_with_forced(proctor_result: ProctorResult) -> Groups:
    """Groups pinning ``abtst`` to its control bucket."""
    return Groups(proctor_result, override=forced_override({ACTIVE: 0}))


@pytest.fixture
def groups_with_holdout(proctor_result: ProctorResult) -> Groups:
    """Groups where an active ``holdout_tst`` (value 2) sends other tests to their lowest bucket."""
    return Groups(proctor_result, override=holdout_override(HOLDOUT, active_value=2))


@pytest.fixture
def fallback_bucket() -> ModelBucket:
    """Fallback whose value (42) exists in some definitions."""
    return ModelBucket(42)


@pytest.fixture
def fallback_nopayload_bucket() -> ModelBucket:
    """Fallback whose value (66) exists in no definition."""
    return ModelBucket(66)
