"""Account actions for the signed-in user."""

from .account import AccountManager

__all__ = ["AccountManager"]
