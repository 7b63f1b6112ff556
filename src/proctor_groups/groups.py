"""
Groups facade: effective bucket values, payloads and their serializations.

A :class:`Groups` instance is bound to one immutable
:class:`~proctor_groups.core.contracts.ProctorResult` and one optional
override hook. It never mutates the snapshot and keeps no cache, so a single
instance may be shared between threads.

Responsibilities
----------------
- **Bucket resolution**: the effective value of a test is whatever the
  override hook returns for the determined bucket (identity by default).
- **Payload resolution**: payload and description of the effective bucket,
  found through an ordered chain of lookups (see :meth:`Groups._lookup_steps`).
- **Serialization**: logging strings, the long debug string and the
  JavaScript configuration handed to browsers.
- **Projection**: rebuilt snapshots with overridden buckets in place.

Extension
---------
Pass ``override=`` a function ``(test_name, determined_bucket, groups) -> int``
or subclass and redefine :meth:`Groups.override_determined_bucket_value`.
The hook may query other tests on ``groups`` (hold-outs do exactly that) but
must be deterministic for a given snapshot: several outputs call it
independently for the same test.

Negative values follow the "inactive" convention: such tests are skipped by
:meth:`Groups.get_logging_test_names` and everything built from it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any, Protocol, cast, overload

from pydantic import TypeAdapter

from proctor_groups.core.contracts import (
    EMPTY_PAYLOAD,
    Bucket,
    ConsumerTest,
    Payload,
    ProctorResult,
    TestBucket,
    is_empty_payload,
)
from proctor_groups.core.lookup import Lookup, Missing, found, missing
from proctor_groups.core.settings import get_logger

logger = get_logger(__name__)

_JSON_CONFIG = TypeAdapter(Any)

#: Override hook signature: ``(test_name, determined_bucket, groups) -> value``.
OverrideHook = Callable[[str, TestBucket, "Groups"], int]

#: One step of the metadata fallback chain.
LookupStep = Callable[[str, int | None, Bucket | None], Lookup[Bucket]]


class TextSink(Protocol):
    """Growable text buffer, e.g. :class:`io.StringIO`."""

    def write(self, s: str, /) -> Any: ...


def _payload_of(bucket: Bucket) -> Payload | None:
    payload = getattr(bucket, "payload", None)
    return payload if isinstance(payload, Payload) else None


def _description_of(bucket: Bucket) -> str:
    return getattr(bucket, "description", None) or ""


class Groups:
    """Read-only view of a snapshot with the override hook applied."""

    __slots__ = ("_proctor_result", "_override")

    def __init__(
        self, proctor_result: ProctorResult, override: OverrideHook | None = None
    ) -> None:
        self._proctor_result = proctor_result
        self._override = override

    # ------------------------------- Override hook --------------------------

    def override_determined_bucket_value(
        self, test_name: str, determined_bucket: TestBucket
    ) -> int:
        """
        Return the effective value for ``test_name``.

        The default delegates to the ``override`` hook given at construction
        and falls back to ``determined_bucket.value``. Only called for tests
        present in the snapshot.
        """
        if self._override is None:
            return determined_bucket.value
        return self._override(test_name, determined_bucket, self)

    def _effective_value(self, test_name: str) -> int | None:
        """Effective value of a test, or ``None`` when the snapshot lacks it."""
        determined = self._proctor_result.buckets.get(test_name)
        if determined is None:
            return None
        value = self.override_determined_bucket_value(test_name, determined)
        if value != determined.value:
            logger.debug("override %s: %d -> %d", test_name, determined.value, value)
        return value

    # ------------------------------- Bucket resolution ----------------------

    def is_empty(self) -> bool:
        """Return True when the snapshot holds no buckets at all."""
        return not self._proctor_result.buckets

    def is_bucket_active(
        self, test_name: str, value: int, default_value: int | None = None
    ) -> bool:
        """
        Return whether ``test_name`` resolves to ``value``.

        Parameters
        ----------
        test_name : str
            Name of the test to check.
        value : int
            Bucket value to compare against the effective value.
        default_value : int | None
            Value assumed for a test missing from the snapshot. It is never
            consulted for a present test, even if the hook changed its value.
        """
        effective = self._effective_value(test_name)
        if effective is None:
            return default_value is not None and default_value == value
        return effective == value

    def get_value(self, test_name: str, default_value: int) -> int:
        """Return the effective value of ``test_name``, or ``default_value``."""
        effective = self._effective_value(test_name)
        return default_value if effective is None else effective

    def get_active_bucket(self, test_name: str) -> TestBucket | None:
        """
        Return the bucket carrying the effective value of ``test_name``.

        That is the determined bucket when the hook left it alone, otherwise
        the definition's bucket with the overridden value. ``None`` when the
        test is missing or the overridden value has no bucket to describe it.
        """
        hit = self._active_bucket_lookup(test_name, self._effective_value(test_name), None)
        return cast(TestBucket, hit.unwrap()) if hit.is_found() else None

    # ------------------------------- Payload resolution ---------------------

    def _definition_bucket(self, test_name: str, value: int) -> Lookup[Bucket]:
        definition = self._proctor_result.test_definitions.get(test_name)
        if definition is None:
            return missing(f"{test_name} has no definition")
        bucket = definition.find_bucket(value)
        if bucket is None:
            return missing(f"{test_name} defines no bucket {value}")
        return found(bucket)

    def _active_bucket_lookup(
        self, test_name: str, effective: int | None, fallback_bucket: Bucket | None
    ) -> Lookup[Bucket]:
        determined = self._proctor_result.buckets.get(test_name)
        if determined is None or effective is None:
            return missing(f"{test_name} is not in the snapshot")
        return (
            found(cast(Bucket, determined))
            .filter(lambda b: b.value == effective, f"{test_name} was overridden")
            .or_else(lambda _: self._definition_bucket(test_name, effective))
        )

    def _fallback_definition_lookup(
        self, test_name: str, effective: int | None, fallback_bucket: Bucket | None
    ) -> Lookup[Bucket]:
        if fallback_bucket is None:
            return missing("no fallback bucket")
        return self._definition_bucket(test_name, fallback_bucket.value)

    def _fallback_bucket_lookup(
        self, test_name: str, effective: int | None, fallback_bucket: Bucket | None
    ) -> Lookup[Bucket]:
        if fallback_bucket is None:
            return missing("no fallback bucket")
        if effective is not None and fallback_bucket.value != effective:
            return missing(f"fallback value {fallback_bucket.value} is not {effective}")
        return found(fallback_bucket)

    def _lookup_steps(self) -> tuple[LookupStep, ...]:
        """
        Ordered sources for bucket metadata; the first usable hit wins.

        1. the active bucket (determined bucket, or definition bucket for an
           overridden value);
        2. the definition bucket matching the fallback bucket's value;
        3. the fallback bucket itself, when its value is the effective one
           (always the case for a test missing from the snapshot).
        """
        return (
            self._active_bucket_lookup,
            self._fallback_definition_lookup,
            self._fallback_bucket_lookup,
        )

    def _resolve(
        self,
        test_name: str,
        fallback_bucket: Bucket | None,
        usable: Callable[[Bucket], bool],
        what: str,
    ) -> Lookup[Bucket]:
        effective = self._effective_value(test_name)
        reasons: list[str] = []
        for step in self._lookup_steps():
            hit = step(test_name, effective, fallback_bucket).filter(usable, f"no {what}")
            if hit.is_found():
                return hit
            reasons.append(cast(Missing[Bucket], hit).reason)
        logger.debug("no %s for %s: %s", what, test_name, "; ".join(reasons))
        return missing("; ".join(reasons))

    def get_payload(self, test_name: str, fallback_bucket: Bucket | None = None) -> Payload:
        """
        Return the payload of the effective bucket of ``test_name``.

        Never returns ``None``: when no source carries a payload the result is
        :data:`~proctor_groups.core.contracts.EMPTY_PAYLOAD`.
        """
        hit = self._resolve(
            test_name, fallback_bucket, lambda b: not is_empty_payload(_payload_of(b)), "payload"
        )
        return hit.map(_payload_of).get_or(None) or EMPTY_PAYLOAD

    def get_description(self, test_name: str, fallback_bucket: Bucket | None = None) -> str:
        """Return the description of the effective bucket, or ``""``."""
        hit = self._resolve(
            test_name, fallback_bucket, lambda b: bool(_description_of(b)), "description"
        )
        return hit.map(_description_of).get_or("")

    # ------------------------------- Serialization --------------------------

    def get_logging_test_names(self) -> set[str]:
        """
        Return the names of present tests whose effective value is not negative.

        A negative value (``-1``) means inactive, so the logging strings and
        the JavaScript config map cover these names rather than every bucket.
        """
        return {
            name
            for name in self._proctor_result.buckets
            if self.get_value(name, -1) >= 0
        }

    def _entries(self, test_names: Iterable[str], with_allocations: bool) -> list[str]:
        entries: list[str] = []
        for test_name in test_names:
            effective = self._effective_value(test_name)
            if effective is None:
                continue
            if not with_allocations:
                entries.append(f"{test_name}{effective}")
                continue
            allocation = self._proctor_result.allocations.get(test_name)
            if allocation is not None and allocation.id:
                entries.append(f"{allocation.id}:{test_name}{effective}")
        return entries

    def append_test_groups_without_allocations(
        self, buffer: TextSink, separator: str, test_names: Iterable[str]
    ) -> int:
        """
        Write ``name<value>`` for each requested test present in the snapshot.

        Entries keep the order of ``test_names`` and are joined by
        ``separator``; absent tests are skipped. Returns the entry count.
        """
        entries = self._entries(test_names, with_allocations=False)
        buffer.write(separator.join(entries))
        return len(entries)

    def append_test_groups_with_allocations(
        self, buffer: TextSink, separator: str, test_names: Iterable[str]
    ) -> int:
        """Like :meth:`append_test_groups_without_allocations`, prefixed ``<allocation id>:``."""
        entries = self._entries(test_names, with_allocations=True)
        buffer.write(separator.join(entries))
        return len(entries)

    def append_test_groups(self, buffer: TextSink, separator: str = ",") -> None:
        """
        Write both entry forms for every logged test.

        The order of entries is not part of the contract.
        """
        test_names = list(self.get_logging_test_names())
        plain = self._entries(test_names, with_allocations=False)
        allocated = self._entries(test_names, with_allocations=True)
        buffer.write(separator.join(plain + allocated))

    def to_logging_string(self) -> str:
        """
        Return the canonical logging string, e.g. ``"bgtst0,#A1:bgtst0"``.

        Both segments are sorted by test name.
        """
        test_names = sorted(self.get_logging_test_names())
        plain = self._entries(test_names, with_allocations=False)
        allocated = self._entries(test_names, with_allocations=True)
        return ",".join(plain + allocated)

    def to_long_string(self) -> str:
        """Return ``name-description`` for every test, sorted by name."""
        parts: list[str] = []
        for test_name in sorted(self._proctor_result.buckets):
            description = self.get_description(test_name)
            parts.append(f"{test_name}-{description}" if description else test_name)
        return ",".join(parts)

    @overload
    def get_javascript_config(self) -> dict[str, int]: ...
    @overload
    def get_javascript_config(
        self, requested_tests: Sequence[ConsumerTest]
    ) -> list[list[Any]]: ...

    def get_javascript_config(
        self, requested_tests: Sequence[ConsumerTest] | None = None
    ) -> dict[str, int] | list[list[Any]]:
        """
        Return the configuration handed to client-side code.

        Without arguments: ``{test_name: value}`` for every logged test.
        With ``requested_tests``: one ``[value, payload_value]`` pair per
        requested test, in request order. The value falls back to the test's
        ``fallback_value``; ``payload_value`` is ``None`` without a payload.
        """
        if requested_tests is None:
            return {name: self.get_value(name, -1) for name in self.get_logging_test_names()}
        return [
            [
                self.get_value(test.name, test.fallback_value),
                self.get_payload(test.name).fetch_a_value(),
            ]
            for test in requested_tests
        ]

    def to_json_config(self, requested_tests: Sequence[ConsumerTest] | None = None) -> str:
        """Return :meth:`get_javascript_config` encoded as compact JSON text."""
        if requested_tests is None:
            return _JSON_CONFIG.dump_json(self.get_javascript_config()).decode("utf-8")
        return _JSON_CONFIG.dump_json(self.get_javascript_config(requested_tests)).decode("utf-8")

    # ------------------------------- Projection -----------------------------

    def get_proctor_result(self) -> ProctorResult:
        """Return the bound snapshot object itself."""
        return self._proctor_result

    def get_raw_proctor_result(self) -> ProctorResult:
        """Return a fresh, value-equal copy of the bound snapshot without overrides."""
        source = self._proctor_result
        return ProctorResult(
            matrix_version=source.matrix_version,
            buckets=dict(source.buckets),
            allocations=dict(source.allocations),
            test_definitions=dict(source.test_definitions),
        )

    def get_as_proctor_result(self) -> ProctorResult:
        """
        Return a fresh snapshot whose buckets carry the effective values.

        Buckets left alone by the hook are kept as they are. Overridden ones
        are replaced by the definition's bucket for the new value; if the
        definition cannot describe it, a bare bucket with that value and no
        name, description or payload is used.
        """
        source = self._proctor_result
        buckets: dict[str, TestBucket] = {}
        for test_name, determined in source.buckets.items():
            effective = self.override_determined_bucket_value(test_name, determined)
            hit = self._active_bucket_lookup(test_name, effective, None)
            if hit.is_found():
                buckets[test_name] = cast(TestBucket, hit.unwrap())
            else:
                buckets[test_name] = TestBucket(name="", value=effective)
        return ProctorResult(
            matrix_version=source.matrix_version,
            buckets=buckets,
            allocations=dict(source.allocations),
            test_definitions=dict(source.test_definitions),
        )


__all__ = ["Groups", "OverrideHook", "TextSink"]
