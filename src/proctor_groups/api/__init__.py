"""HTTP surface for proctor-groups (FastAPI)."""

from __future__ import annotations

__all__ = ["__doc__"]
