"""Snapshot contracts shared by the groups facade, the CLI and the API."""

from __future__ import annotations

from .allocation import Allocation, Range
from .bucket import Bucket, ConsumerTest, RequestedTest, TestBucket
from .definition import ConsumableTestDefinition
from .payload import EMPTY_PAYLOAD, Payload, is_empty_payload
from .proctor_result import ProctorResult

__all__ = [
    "Allocation",
    "Bucket",
    "ConsumableTestDefinition",
    "ConsumerTest",
    "EMPTY_PAYLOAD",
    "Payload",
    "ProctorResult",
    "Range",
    "RequestedTest",
    "TestBucket",
    "is_empty_payload",
]
