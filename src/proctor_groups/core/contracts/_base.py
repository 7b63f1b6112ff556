"""Shared model configuration for the snapshot contracts.

Every contract is immutable once validated and accepts both the Python field
names and the camelCase keys used by the JSON wire format, e.g.
``matrixVersion`` / ``matrix_version``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Contract(BaseModel):
    """Frozen base model with camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, object]:
        """Dump to the camelCase JSON shape, dropping unset optional values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = ["Contract"]
