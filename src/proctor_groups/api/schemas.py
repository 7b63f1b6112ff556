"""
Request and response models for the groups API.

The snapshot is embedded as a :class:`~proctor_groups.core.contracts.ProctorResult`
and therefore accepts the camelCase wire keys. Override options mirror the
CLI flags.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from proctor_groups.core.contracts import ProctorResult


class RequestedTestModel(BaseModel):
    """A test requested for the ordered JavaScript config."""

    name: str = Field(min_length=1)
    fallback_value: int = Field(description="Value used when the snapshot lacks the test.")


class ResolveRequest(BaseModel):
    """Snapshot plus optional overrides to resolve."""

    snapshot: ProctorResult
    holdout_test: str | None = Field(
        default=None, description="Hold-out test; when active, other tests use their lowest bucket."
    )
    holdout_value: int = Field(default=1, description="Bucket value activating the hold-out.")
    forced: dict[str, int] = Field(
        default_factory=dict, description="Tests pinned to bucket values."
    )
    requested_tests: list[RequestedTestModel] = Field(default_factory=list)


class ResolveResponse(BaseModel):
    """All serializations of the resolved groups."""

    long_string: str
    logging_string: str
    javascript_config: dict[str, int]
    requested_config: list[list[Any]] = Field(
        default_factory=list, description="One [value, payload] pair per requested test."
    )
    proctor_result: ProctorResult = Field(description="Snapshot with overrides applied.")


__all__ = ["RequestedTestModel", "ResolveRequest", "ResolveResponse"]
