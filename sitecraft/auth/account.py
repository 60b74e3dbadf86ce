"""
Account Actions

Account deletion for the signed-in user. Sign-in, password reset and profile
management belong to the identity provider and are not handled here.
"""

import logging
from typing import Optional

from sitecraft.client import AccountError
from sitecraft.persistence import SessionStore
from sitecraft.reporter import Notifier

logger = logging.getLogger(__name__)

MSG_ACCOUNT_DELETED = "Account deleted successfully"
MSG_ACCOUNT_DELETE_FAILED = "Failed to delete account. Please try again."


class AccountManager:
    """Runs account actions and reports the result as notices."""

    def __init__(self, client, notifier: Optional[Notifier] = None, store: Optional[SessionStore] = None):
        self.client = client
        self.notifier = notifier or Notifier()
        self.store = store

    async def delete_account(self, access_token: Optional[str] = None) -> bool:
        """
        Delete the account. Not retried.

        On success the session store is cleared. On failure the backend's
        message (or a generic one) is posted as an error notice.
        """
        try:
            await self.client.delete_account(access_token)
        except AccountError as e:
            logger.warning(f"Account deletion failed: {e}")
            self.notifier.error(str(e) or MSG_ACCOUNT_DELETE_FAILED)
            return False

        if self.store is not None:
            await self.store.clear()

        self.notifier.success(MSG_ACCOUNT_DELETED)
        return True
