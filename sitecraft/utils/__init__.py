"""Utility modules for the SiteCraft results client."""

from .config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
