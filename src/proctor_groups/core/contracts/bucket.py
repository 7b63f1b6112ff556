"""Bucket contracts: determined buckets and the caller-side test protocols.

- :class:`TestBucket`: a named variant of a test with its integer selector.
- :class:`Bucket`: anything exposing a ``value`` (e.g. generated bucket
  enums) that callers pass as a fallback.
- :class:`ConsumerTest` / :class:`RequestedTest`: a test name with the value
  to use when the snapshot does not contain the test.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from pydantic import Field

from ._base import Contract
from .payload import Payload


class TestBucket(Contract):
    """A bucket of a test, as determined by the allocation engine."""

    __test__ = False  # keep pytest from collecting this model

    name: str = Field(description="Short bucket label, e.g. 'control'.")
    value: int = Field(description="Selector value; negative values mean inactive.")
    description: str = Field(default="", description="Human-readable bucket description.")
    payload: Payload | None = Field(default=None, description="Optional bucket payload.")


@runtime_checkable
class Bucket(Protocol):
    """Minimal bucket shape accepted as a fallback: only ``value`` is required."""

    @property
    def value(self) -> int: ...


@runtime_checkable
class ConsumerTest(Protocol):
    """A test requested by a client, with its fallback value."""

    @property
    def name(self) -> str: ...

    @property
    def fallback_value(self) -> int: ...


@dataclass(frozen=True, slots=True)
class RequestedTest:
    """Plain implementation of :class:`ConsumerTest`."""

    name: str
    fallback_value: int


__all__ = ["Bucket", "ConsumerTest", "RequestedTest", "TestBucket"]
