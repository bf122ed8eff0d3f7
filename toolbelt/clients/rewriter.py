"""Client for the redirect rewriter app."""

import logging
from typing import Any, Dict, List, Optional

from .base import ApiClient
from ..errors import ApiError

logger = logging.getLogger(__name__)

REWRITER_APP = 'vtex.rewriter@1.x'

IMPORT_REDIRECTS = """
mutation SaveMany($routes: [RedirectInput!]!) {
  redirect {
    saveMany(routes: $routes)
  }
}
"""

ROUTES_INDEX = """
query RoutesIndex {
  redirect {
    index {
      id
      lastChangeDate
    }
  }
}
"""

CREATE_ROUTES_INDEX = """
mutation CreateRoutesIndex {
  redirect {
    createIndex
  }
}
"""


class RewriterClient(ApiClient):
    """
    Redirect rewriter API.

    Implements ``submit(batch)`` so it can be used directly as the sink of a
    BatchImporter.
    """

    def import_redirects(self, redirects: List[Dict[str, Any]]) -> bool:
        """
        Save a list of redirects.

        Args:
            redirects: Redirect dicts with from, to, type and optional endDate

        Returns:
            True when the platform accepted the redirects
        """
        data = self.post_graphql(REWRITER_APP, IMPORT_REDIRECTS, {'routes': redirects})
        saved = (data.get('redirect') or {}).get('saveMany')
        logger.debug(f"Imported {len(redirects)} redirects into {self.account}/{self.workspace}")
        return bool(saved)

    def submit(self, batch: List[Dict[str, Any]]):
        """
        Import a batch, failing unless the platform saved all of it.

        Raises:
            ApiError: If the platform did not confirm the save
        """
        if not self.import_redirects(batch):
            raise ApiError(f"Rewriter did not save a batch of {len(batch)} redirects")

    def routes_index(self) -> Optional[Dict[str, Any]]:
        """Get the redirects index, or None if it does not exist yet."""
        data = self.post_graphql(REWRITER_APP, ROUTES_INDEX)
        return (data.get('redirect') or {}).get('index')

    def create_routes_index(self) -> bool:
        """Ask the rewriter to build the redirects index."""
        data = self.post_graphql(REWRITER_APP, CREATE_ROUTES_INDEX)
        logger.info(f"Requested creation of the redirects index for {self.account}/{self.workspace}")
        return bool((data.get('redirect') or {}).get('createIndex'))
