"""Core package initializer for proctor-groups.

Holds the snapshot contracts, the lookup result type and the settings module:
    from proctor_groups.core.settings import load_settings, Settings, get_logger
"""

from __future__ import annotations

__all__ = ["__doc__"]
