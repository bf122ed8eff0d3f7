"""Authenticated HTTP access to the platform APIs."""

import logging
from typing import Any, Dict, Optional

import requests

from ..conf import Config
from ..errors import ApiError, ToolbeltError

logger = logging.getLogger(__name__)

USER_AGENT = 'toolbelt-python'


class ApiClient:
    """
    Thin wrapper over a requests session.

    HTTP failures come out as ApiError carrying the status, reason and the
    message returned by the platform.
    """

    TIMEOUT = 30

    def __init__(self, config: Config, base_url: Optional[str] = None, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            config: Toolbelt configuration (account, workspace, token)
            base_url: Override for the API root
                (default: https://{workspace}--{account}.{api_host})
            session: Optional preconfigured session
        """
        self.account = config.get_account()
        self.workspace = config.get_workspace()
        if not self.account:
            raise ToolbeltError("No account configured. Log in to an account first.")

        self.base_url = base_url or f"https://{self.workspace}--{self.account}.{config.get_api_host()}"
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': USER_AGENT})
        token = config.get_token()
        if token:
            self.session.headers.update({'Authorization': f'Bearer {token}'})

    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Send a request relative to base_url.

        Raises:
            ApiError: On connection failure or an error status
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")
        kwargs.setdefault('timeout', self.TIMEOUT)

        try:
            response = self.session.request(method, url, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as e:
            raise self._to_api_error(e.response) from e
        except requests.RequestException as e:
            raise ApiError(f"Request to {url} failed: {e}") from e

        return response

    def post_graphql(self, app: str, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run a GraphQL operation against an app.

        Args:
            app: App serving the GraphQL schema (e.g. 'vtex.rewriter@1.x')
            query: GraphQL document
            variables: Operation variables

        Returns:
            The ``data`` member of the response

        Raises:
            ApiError: On HTTP errors or when the response carries GraphQL errors
        """
        response = self.request(
            'POST',
            f"/_v/private/{app}/graphql",
            json={'query': query, 'variables': variables or {}}
        )
        payload = response.json()

        errors = payload.get('errors')
        if errors:
            message = '; '.join(error.get('message', str(error)) for error in errors)
            raise ApiError(message, status=response.status_code, reason='GraphQL error')

        return payload.get('data') or {}

    @staticmethod
    def _to_api_error(response: requests.Response) -> ApiError:
        """Build an ApiError from an error response."""
        message = response.text
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get('message'):
            message = body['message']

        return ApiError(message, status=response.status_code, reason=response.reason)
