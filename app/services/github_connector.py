"""Connector callbacks: authentication, configuration, schema and data"""

import logging
from typing import Any, Dict, List, Optional

from ..models.connectorRequest import (
    AuthType, AuthTypeResponse,
    ConfigEntry, ConfigEntryType, ConfigResponse,
    DataRow, GetDataRequest, GetDataResponse,
    GetSchemaRequest, GetSchemaResponse,
    SetCredentialsErrorCode, SetCredentialsResponse,
)
from .credential_store import BaseCredentialStore
from .field_schema import fields_for_ids, get_fields, project_node
from .github_client import GitHubGraphQLClient

logger = logging.getLogger(__name__)

SEARCH_SYNTAX_HELP_URL = (
    "https://docs.github.com/en/search-github/getting-started-with-searching-on-github/"
    "understanding-the-search-syntax"
)


class GitHubRepoConnector:
    """Repository search connector. Every method is one callback of the reporting platform."""

    def __init__(
        self,
        store: BaseCredentialStore,
        client: GitHubGraphQLClient,
        api_key_property: str = "githubConnector.key",
        validate_credentials: bool = False,
        auth_help_url: Optional[str] = None,
        date_range_required: bool = False,
    ):
        self.store = store
        self.client = client
        self.api_key_property = api_key_property
        self.validate_credentials = validate_credentials
        self.auth_help_url = auth_help_url
        self.date_range_required = date_range_required

    # Authentication

    def get_auth_type(self) -> AuthTypeResponse:
        return AuthTypeResponse(type=AuthType.KEY, help_url=self.auth_help_url)

    def reset_auth(self, user_id: str) -> None:
        self.store.delete_property(user_id, self.api_key_property)
        logger.info(f"🔓 Reset credentials for user {user_id}")

    def is_auth_valid(self, user_id: str) -> bool:
        api_key = self.store.get_property(user_id, self.api_key_property)
        return api_key is not None and api_key != ""

    async def set_credentials(self, user_id: str, key: str) -> SetCredentialsResponse:
        """Store the key verbatim. Only checked against GitHub when validation is enabled."""
        if self.validate_credentials and not await self.client.check_key(key):
            logger.warning(f"⚠️ Rejected invalid GitHub key for user {user_id}")
            return SetCredentialsResponse(error_code=SetCredentialsErrorCode.INVALID_CREDENTIALS)

        self.store.set_property(user_id, self.api_key_property, key)
        logger.info(f"🔐 Stored credentials for user {user_id}")
        return SetCredentialsResponse(error_code=SetCredentialsErrorCode.NONE)

    # Configuration

    def get_config(self) -> ConfigResponse:
        return ConfigResponse(
            config_params=[
                ConfigEntry(
                    type=ConfigEntryType.INFO,
                    name="instructions",
                    text="Enter the repositories to fetch as a GitHub search query.",
                ),
                ConfigEntry(
                    type=ConfigEntryType.TEXTINPUT,
                    name="repoSearchQuery",
                    display_name="GitHub repository search query",
                    help_text=SEARCH_SYNTAX_HELP_URL,
                    placeholder="owner:lagenorhynque sort:updated",
                ),
            ],
            date_range_required=self.date_range_required,
        )

    # Schema

    def get_schema(self, request: Optional[GetSchemaRequest] = None) -> GetSchemaResponse:
        if request is None or request.fields is None:
            return GetSchemaResponse(schema_fields=get_fields())
        return GetSchemaResponse(
            schema_fields=fields_for_ids([field.name for field in request.fields])
        )

    # Data

    async def get_data(self, user_id: str, request: GetDataRequest) -> GetDataResponse:
        field_ids = request.field_ids
        api_key = self.store.get_property(user_id, self.api_key_property) or ""
        repo_search_query = (request.config_params or {}).get("repoSearchQuery") or ""

        logger.info(f"📥 Fetching {field_ids} for query {repo_search_query!r}")
        data = await self.client.search_repositories(api_key, repo_search_query)

        # Rows follow field_ids as requested, so an unknown id adds a "" column
        # that fields_for_ids leaves out of the schema
        rows = self.response_to_rows(field_ids, data)
        logger.info(f"✅ Returned {len(rows)} rows")
        return GetDataResponse(schema_fields=fields_for_ids(field_ids), rows=rows)

    @staticmethod
    def response_to_rows(field_ids: List[str], data: Dict[str, Any]) -> List[DataRow]:
        """Project each search node onto field_ids, keeping upstream order"""
        nodes = data["search"]["nodes"]
        return [DataRow(values=project_node(node, field_ids)) for node in nodes]
