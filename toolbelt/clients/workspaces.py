"""Client for workspace management."""

import logging

from .base import ApiClient

logger = logging.getLogger(__name__)


class WorkspacesClient(ApiClient):
    """Workspaces API, rooted at the account rather than a workspace."""

    def __init__(self, config, session=None):
        account = config.get_account()
        super().__init__(
            config,
            base_url=f"https://{account}.{config.get_api_host()}/api/workspaces",
            session=session
        )

    def delete(self, account: str, name: str):
        """
        Delete a workspace.

        Raises:
            ApiError: If the platform refused the deletion
        """
        self.request('DELETE', f"/{account}/{name}")
        logger.debug(f"Deleted workspace {account}/{name}")
