"""proctor-groups: resolve, override and present experiment group assignments.

The package turns an already-allocated :class:`~proctor_groups.core.contracts.ProctorResult`
snapshot into effective group values, payloads, logging strings and client
configuration. The high-level entry point is :class:`proctor_groups.groups.Groups`.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
