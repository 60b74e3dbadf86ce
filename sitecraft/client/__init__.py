"""
SiteCraft Backend Client

Async access to the auditing backend: analyses, tiered reports, PDF export,
scan/quota endpoints and account deletion.
"""

from .api import (
    SiteCraftClient,
    SiteCraftAPIError,
    AccountError,
    error_message_for_status,
)

__all__ = [
    "SiteCraftClient",
    "SiteCraftAPIError",
    "AccountError",
    "error_message_for_status",
]
