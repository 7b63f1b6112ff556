"""Payload: typed per-bucket data delivered to the application.

A payload holds at most one populated value slot. The slots mirror what
test definitions can declare: floating point and integer scalars or arrays,
strings or string arrays, and a free-form map.

``EMPTY_PAYLOAD`` is the shared "no payload" sentinel. Resolution code
returns it instead of ``None`` so callers can format output without
presence checks.
"""

from __future__ import annotations

from typing import Any

from pydantic import model_validator

from ._base import Contract

_VALUE_SLOTS: tuple[str, ...] = (
    "double_value",
    "double_array",
    "long_value",
    "long_array",
    "string_value",
    "string_array",
    "map",
)


class Payload(Contract):
    """Opaque value holder attached to a bucket."""

    double_value: float | None = None
    double_array: tuple[float, ...] | None = None
    long_value: int | None = None
    long_array: tuple[int, ...] | None = None
    string_value: str | None = None
    string_array: tuple[str, ...] | None = None
    map: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _at_most_one_slot(self) -> Payload:
        """Reject payloads that populate more than one value slot."""
        populated = [slot for slot in _VALUE_SLOTS if getattr(self, slot) is not None]
        if len(populated) > 1:
            raise ValueError(
                f"payload must have at most one value, got {', '.join(populated)}"
            )
        return self

    def fetch_a_value(self) -> Any:
        """Return the populated value, or ``None`` for an empty payload."""
        for slot in _VALUE_SLOTS:
            value = getattr(self, slot)
            if value is not None:
                return value
        return None

    def is_empty(self) -> bool:
        """Return True when no value slot is populated."""
        return self.fetch_a_value() is None


EMPTY_PAYLOAD: Payload = Payload()


def is_empty_payload(payload: Payload | None) -> bool:
    """Return True for ``None`` and for payloads without a value."""
    return payload is None or payload.is_empty()


__all__ = ["EMPTY_PAYLOAD", "Payload", "is_empty_payload"]
