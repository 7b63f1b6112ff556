"""
Ready-made override hooks for :class:`~proctor_groups.groups.Groups`.

- :func:`holdout_override`: while a hold-out test is in its active bucket,
  every other test falls back to the smallest bucket of its own definition.
- :func:`forced_override`: pin named tests to given bucket values.
- :func:`chain_overrides`: apply several hooks in order.

Every hook leaves the determined value untouched when the definition it
needs is missing, so snapshots without definitions still resolve.

Usage
-----
>>> groups = Groups(result, override=holdout_override("holdout_tst", active_value=2))
>>> groups.get_value("bgtst", 42)
-1
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from proctor_groups.core.contracts import TestBucket
from proctor_groups.groups import Groups, OverrideHook


def identity_override(test_name: str, determined_bucket: TestBucket, groups: Groups) -> int:
    """Hook that keeps the determined value."""
    return determined_bucket.value


def holdout_override(holdout_test: str, active_value: int) -> OverrideHook:
    """
    Build a hook that puts every other test in its lowest bucket during a hold-out.

    Parameters
    ----------
    holdout_test : str
        Name of the hold-out test. Its own value is never changed.
    active_value : int
        Bucket value of ``holdout_test`` that activates the hold-out.
    """

    def hook(test_name: str, determined_bucket: TestBucket, groups: Groups) -> int:
        if test_name == holdout_test or not groups.is_bucket_active(
            holdout_test, active_value
        ):
            return determined_bucket.value
        definition = groups.get_proctor_result().test_definitions.get(test_name)
        smallest = definition.min_bucket() if definition is not None else None
        return smallest.value if smallest is not None else determined_bucket.value

    return hook


def forced_override(forced_values: Mapping[str, int]) -> OverrideHook:
    """
    Build a hook that pins tests to the given bucket values.

    A forced value is only applied when the test's definition declares a
    bucket with that value.
    """
    pinned = dict(forced_values)

    def hook(test_name: str, determined_bucket: TestBucket, groups: Groups) -> int:
        if test_name not in pinned:
            return determined_bucket.value
        definition = groups.get_proctor_result().test_definitions.get(test_name)
        if definition is None or definition.find_bucket(pinned[test_name]) is None:
            return determined_bucket.value
        return pinned[test_name]

    return hook


def chain_overrides(*hooks: OverrideHook) -> OverrideHook:
    """Compose hooks left to right; each one sees the value of the previous."""

    def hook(test_name: str, determined_bucket: TestBucket, groups: Groups) -> int:
        bucket = determined_bucket
        for step in hooks:
            value = step(test_name, bucket, groups)
            if value != bucket.value:
                bucket = bucket.model_copy(update={"value": value})
        return bucket.value

    return hook


def parse_forced_groups(items: Iterable[str]) -> dict[str, int]:
    """
    Parse ``TEST=VALUE`` strings into a mapping for :func:`forced_override`.

    Raises
    ------
    ValueError
        If an item has no ``=``, an empty test name or a non-integer value.
    """
    forced: dict[str, int] = {}
    for item in items:
        test_name, sep, raw_value = item.partition("=")
        test_name = test_name.strip()
        if not sep or not test_name:
            raise ValueError(f"expected TEST=VALUE, got {item!r}")
        try:
            forced[test_name] = int(raw_value.strip())
        except ValueError as e:
            raise ValueError(f"bucket value for {test_name!r} must be an integer") from e
    return forced


def build_override(
    holdout_test: str | None = None,
    holdout_value: int = 1,
    forced_values: Mapping[str, int] | None = None,
) -> OverrideHook | None:
    """
    Assemble the hook for the CLI and API options, or ``None`` for no override.

    Forced groups are applied after the hold-out.
    """
    hooks: list[OverrideHook] = []
    if holdout_test:
        hooks.append(holdout_override(holdout_test, holdout_value))
    if forced_values:
        hooks.append(forced_override(forced_values))
    if not hooks:
        return None
    return hooks[0] if len(hooks) == 1 else chain_overrides(*hooks)


__all__ = [
    "build_override",
    "chain_overrides",
    "forced_override",
    "holdout_override",
    "identity_override",
    "parse_forced_groups",
]
