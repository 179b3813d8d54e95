"""
Process configuration for gridstore.
"""

from .config import Settings, load_settings, settings

__all__ = [
    "Settings",
    "load_settings",
    "settings",
]
