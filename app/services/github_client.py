"""GitHub GraphQL API client"""

import httpx
import logging
from typing import Any, Dict, Optional

from ..utils import GitHubApiError

logger = logging.getLogger(__name__)

# Upper bound of rows per data request; search results are not paginated
SEARCH_PAGE_SIZE = 100

REPOSITORY_SEARCH_QUERY = """
query ($repoSearchQuery: String!, $first: Int = %d) {
  search(type: REPOSITORY, query: $repoSearchQuery, first: $first) {
    nodes {
      ... on Repository {
        name
        description
        url
        createdAt
        updatedAt
        stargazerCount
      }
    }
  }
}
""" % SEARCH_PAGE_SIZE

VIEWER_QUERY = "query { viewer { login } }"


class GitHubGraphQLClient:
    """Single-shot client for the GitHub GraphQL API. No retries, no pagination."""

    GRAPHQL_ENDPOINT = "https://api.github.com/graphql"

    def __init__(
        self,
        endpoint: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            endpoint: GraphQL endpoint (default: public GitHub API)
            transport: Optional httpx transport, used to stub the API in tests
        """
        self.endpoint = endpoint or self.GRAPHQL_ENDPOINT
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=None, transport=self._transport)

    @staticmethod
    def _headers(api_key: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"bearer {api_key}",
        }

    async def _post(self, api_key: str, payload: Dict[str, Any]) -> httpx.Response:
        async with self._client() as client:
            return await client.post(self.endpoint, headers=self._headers(api_key), json=payload)

    async def search_repositories(self, api_key: str, repo_search_query: str) -> Dict[str, Any]:
        """
        Run the repository search query.

        Args:
            api_key: GitHub token sent as bearer credential (may be empty)
            repo_search_query: GitHub search syntax, forwarded verbatim

        Returns:
            The `data` member of the GraphQL response

        Raises:
            GitHubApiError: On HTTP error status, malformed JSON or a response without data
            httpx.RequestError: On network failure
        """
        payload = {
            "query": REPOSITORY_SEARCH_QUERY,
            "variables": {"repoSearchQuery": repo_search_query},
        }
        response = await self._post(api_key, payload)
        body = self._parse(response)

        data = body.get("data") if isinstance(body, dict) else None
        if not data:
            errors = body.get("errors", []) if isinstance(body, dict) else []
            messages = [err.get("message", "") for err in errors]
            raise GitHubApiError(f"GraphQL errors: {messages}")

        return data

    async def check_key(self, api_key: str) -> bool:
        """
        Return True if GitHub accepts the key for a viewer query

        Raises:
            GitHubApiError: On a non-auth HTTP error status or malformed JSON
        """
        response = await self._post(api_key, {"query": VIEWER_QUERY})

        if response.status_code in (401, 403):
            return False
        body = self._parse(response)

        if not isinstance(body, dict):
            raise GitHubApiError("Unexpected response body for viewer query")
        return "errors" not in body and bool((body.get("data") or {}).get("viewer"))

    @staticmethod
    def _parse(response: httpx.Response) -> Any:
        """Decoded JSON body; HTTP error statuses and malformed JSON become GitHubApiError"""
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"❌ GitHub returned HTTP {response.status_code}")
            raise GitHubApiError(
                f"HTTP {response.status_code}: {response.text}",
                upstream_status=response.status_code,
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise GitHubApiError(f"Malformed JSON response: {e}") from e
