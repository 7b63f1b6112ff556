"""Contract tests for the snapshot models.

Covers:
- `Payload` slot validation, `fetch_a_value` and the `EMPTY_PAYLOAD` sentinel.
- camelCase wire aliases when validating a snapshot from JSON.
- Definition helpers used by the override policies.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from proctor_groups.core.contracts import (
    EMPTY_PAYLOAD,
    Bucket,
    ConsumableTestDefinition,
    ConsumerTest,
    Payload,
    ProctorResult,
    RequestedTest,
    TestBucket,
    is_empty_payload,
)


def test_payload_allows_at_most_one_value() -> None:
    """Populating two slots is rejected; one slot is fetched back as-is."""
    with pytest.raises(ValidationError):
        Payload(string_value="a", long_value=1)

    assert Payload(long_array=(1, 2)).fetch_a_value() == (1, 2)
    assert Payload(map={"k": "v"}).fetch_a_value() == {"k": "v"}


def test_empty_payload_sentinel() -> None:
    """`EMPTY_PAYLOAD` equals any payload without a value and differs from a filled one."""
    assert EMPTY_PAYLOAD == Payload()
    assert EMPTY_PAYLOAD.is_empty() and EMPTY_PAYLOAD.fetch_a_value() is None
    assert EMPTY_PAYLOAD != Payload(string_value="x")
    assert is_empty_payload(None) and is_empty_payload(EMPTY_PAYLOAD)
    assert not is_empty_payload(Payload(double_value=0.0))


def test_snapshot_validates_from_wire_json() -> None:
    """A snapshot in the camelCase wire format validates into frozen models."""
    raw = """
    {
      "matrixVersion": "17",
      "buckets": {"bgtst": {"name": "control", "value": 0, "description": "control",
                            "payload": {"stringValue": "controlPayload"}}},
      "allocations": {"bgtst": {"id": "#A1", "ranges": [{"bucketValue": 0, "length": 1.0}]}},
      "testDefinitions": {"bgtst": {"testType": "USER", "buckets": [
          {"name": "inactive", "value": -1},
          {"name": "control", "value": 0}]}}
    }
    """
    result = ProctorResult.model_validate_json(raw)

    assert result.matrix_version == "17"
    assert result.buckets["bgtst"].payload == Payload(string_value="controlPayload")
    assert result.allocations["bgtst"].ranges[0].bucket_value == 0
    assert result.test_definitions["bgtst"].test_type == "USER"
    with pytest.raises(ValidationError):
        result.buckets["bgtst"].value = 3  # type: ignore[misc]


def test_to_wire_round_trips_aliases() -> None:
    """`to_wire` emits camelCase keys and drops unset optionals."""
    bucket = TestBucket(name="control", value=0, payload=Payload(string_value="p"))
    assert bucket.to_wire() == {
        "name": "control",
        "value": 0,
        "description": "",
        "payload": {"stringValue": "p"},
    }


def test_definition_bucket_helpers() -> None:
    """`find_bucket` matches by value; `min_bucket` picks the smallest value."""
    definition = ConsumableTestDefinition(
        buckets=[TestBucket(name="a", value=1), TestBucket(name="i", value=-1)]
    )
    assert definition.find_bucket(1) == TestBucket(name="a", value=1)
    assert definition.find_bucket(5) is None
    assert definition.min_bucket() == TestBucket(name="i", value=-1)
    assert ConsumableTestDefinition().min_bucket() is None


def test_protocols_are_structural() -> None:
    """Buckets and requested tests are recognised by shape."""
    assert isinstance(TestBucket(name="a", value=1), Bucket)
    assert isinstance(RequestedTest("abtst", 4), ConsumerTest)
