import json

import httpx
import pytest

from app.models.connectorRequest import (
    GetDataRequest,
    GetSchemaRequest,
    RequestedField,
    SetCredentialsErrorCode,
)
from app.services.credential_store import InMemoryCredentialStore
from app.services.github_client import REPOSITORY_SEARCH_QUERY, SEARCH_PAGE_SIZE, GitHubGraphQLClient
from app.services.github_connector import GitHubRepoConnector
from app.utils import GitHubApiError

KEY_PROPERTY = "githubConnector.key"

NODES = [
    {
        "name": "dolphin",
        "description": "Swims",
        "url": "https://github.com/octo/dolphin",
        "createdAt": "2020-01-01T00:00:00Z",
        "updatedAt": "2024-05-01T00:00:00Z",
        "stargazerCount": 42,
    },
    {
        "name": "orca",
        "description": None,
        "url": "https://github.com/octo/orca",
        "createdAt": "2021-02-03T00:00:00Z",
        "updatedAt": "2024-06-01T00:00:00Z",
        "stargazerCount": 7,
        "forkCount": 3,
    },
    {
        "name": "narwhal",
        "description": "Tusk",
        "url": "https://github.com/octo/narwhal",
        "createdAt": "2022-03-04T00:00:00Z",
        "updatedAt": "2024-07-01T00:00:00Z",
        "stargazerCount": 0,
    },
]


def _search_response(nodes=NODES):
    return httpx.Response(200, json={"data": {"search": {"nodes": nodes}}})


def _connector(handler, store=None, **kwargs):
    client = GitHubGraphQLClient(transport=httpx.MockTransport(handler))
    return GitHubRepoConnector(
        store=store or InMemoryCredentialStore(),
        client=client,
        api_key_property=KEY_PROPERTY,
        **kwargs,
    )


def _data_request(field_ids, query="owner:octo"):
    return GetDataRequest(
        fields=[RequestedField(name=f) for f in field_ids],
        config_params={"repoSearchQuery": query},
    )


def test_auth_type_is_key_without_help_url():
    connector = _connector(lambda request: _search_response())

    response = connector.get_auth_type()

    assert response.type == "KEY"
    assert response.help_url is None


def test_reset_then_auth_is_invalid():
    store = InMemoryCredentialStore()
    store.set_property("alice", KEY_PROPERTY, "ghp_secret")
    connector = _connector(lambda request: _search_response(), store=store)

    connector.reset_auth("alice")

    assert connector.is_auth_valid("alice") is False
    assert store.get_property("alice", KEY_PROPERTY) is None


def test_empty_key_is_not_valid():
    store = InMemoryCredentialStore()
    store.set_property("alice", KEY_PROPERTY, "")
    connector = _connector(lambda request: _search_response(), store=store)

    assert connector.is_auth_valid("alice") is False


@pytest.mark.anyio
async def test_set_credentials_stores_key_and_reports_none():
    calls = []

    def handler(request):
        calls.append(request)
        return _search_response()

    connector = _connector(handler)

    response = await connector.set_credentials("alice", "ghp_secret")

    assert response.error_code == SetCredentialsErrorCode.NONE
    assert connector.is_auth_valid("alice") is True
    assert connector.is_auth_valid("bob") is False
    # no upstream verification by default
    assert calls == []


@pytest.mark.anyio
async def test_set_credentials_rejects_key_when_validation_enabled():
    def handler(request):
        return httpx.Response(401, json={"message": "Bad credentials"})

    connector = _connector(handler, validate_credentials=True)

    response = await connector.set_credentials("alice", "ghp_wrong")

    assert response.error_code == SetCredentialsErrorCode.INVALID_CREDENTIALS
    assert connector.is_auth_valid("alice") is False


@pytest.mark.anyio
async def test_set_credentials_accepts_key_when_validation_passes():
    def handler(request):
        assert json.loads(request.content)["query"] == "query { viewer { login } }"
        return httpx.Response(200, json={"data": {"viewer": {"login": "octocat"}}})

    connector = _connector(handler, validate_credentials=True)

    response = await connector.set_credentials("alice", "ghp_secret")

    assert response.error_code == SetCredentialsErrorCode.NONE
    assert connector.is_auth_valid("alice") is True


def test_config_declares_instructions_and_search_query():
    connector = _connector(lambda request: _search_response())

    config = connector.get_config()

    assert [entry.name for entry in config.config_params] == ["instructions", "repoSearchQuery"]
    assert config.config_params[1].placeholder == "owner:lagenorhynque sort:updated"
    assert config.date_range_required is False


def test_get_schema_without_fields_returns_full_schema():
    connector = _connector(lambda request: _search_response())

    assert len(connector.get_schema().schema_fields) == 6
    assert len(connector.get_schema(GetSchemaRequest()).schema_fields) == 6


def test_get_schema_with_fields_returns_requested_order():
    connector = _connector(lambda request: _search_response())

    request = GetSchemaRequest(fields=[RequestedField(name="stargazerCount"), RequestedField(name="name")])

    assert [f.name for f in connector.get_schema(request).schema_fields] == ["stargazerCount", "name"]


@pytest.mark.anyio
async def test_get_data_sends_fixed_query_with_bearer_key():
    seen = []

    def handler(request):
        seen.append(request)
        return _search_response()

    store = InMemoryCredentialStore()
    store.set_property("alice", KEY_PROPERTY, "ghp_secret")
    connector = _connector(handler, store=store)

    await connector.get_data("alice", _data_request(["name"], query="owner:octo sort:updated"))

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.github.com/graphql"
    assert request.headers["authorization"] == "bearer ghp_secret"
    body = json.loads(request.content)
    assert body == {
        "query": REPOSITORY_SEARCH_QUERY,
        "variables": {"repoSearchQuery": "owner:octo sort:updated"},
    }


@pytest.mark.anyio
async def test_get_data_projects_rows_in_requested_order():
    connector = _connector(lambda request: _search_response())

    response = await connector.get_data("alice", _data_request(["url", "name"]))

    assert [f.name for f in response.schema_fields] == ["url", "name"]
    assert [row.values for row in response.rows] == [
        ["https://github.com/octo/dolphin", "dolphin"],
        ["https://github.com/octo/orca", "orca"],
        ["https://github.com/octo/narwhal", "narwhal"],
    ]


@pytest.mark.anyio
async def test_get_data_does_not_leak_unrequested_attributes():
    connector = _connector(lambda request: _search_response())

    response = await connector.get_data("alice", _data_request(["stargazerCount"]))

    assert [row.values for row in response.rows] == [[42], [7], [0]]


@pytest.mark.anyio
async def test_get_data_unknown_field_yields_empty_string():
    connector = _connector(lambda request: _search_response())

    response = await connector.get_data("alice", _data_request(["name", "forkCount"]))

    assert [f.name for f in response.schema_fields] == ["name"]
    assert response.rows[1].values == ["orca", ""]


@pytest.mark.anyio
async def test_get_data_without_stored_key_sends_empty_bearer():
    seen = []

    def handler(request):
        seen.append(request)
        return _search_response([])

    connector = _connector(handler)

    response = await connector.get_data("nobody", GetDataRequest(fields=[RequestedField(name="name")]))

    assert response.rows == []
    assert seen[0].headers["authorization"].strip() == "bearer"
    assert json.loads(seen[0].content)["variables"] == {"repoSearchQuery": ""}


@pytest.mark.anyio
async def test_get_data_upstream_http_error_propagates():
    connector = _connector(lambda request: httpx.Response(401, json={"message": "Bad credentials"}))

    with pytest.raises(GitHubApiError) as excinfo:
        await connector.get_data("alice", _data_request(["name"]))

    assert excinfo.value.upstream_status == 401
    assert excinfo.value.status_code == 502


@pytest.mark.anyio
async def test_get_data_graphql_errors_propagate():
    def handler(request):
        return httpx.Response(200, json={"data": None, "errors": [{"message": "Something went wrong"}]})

    connector = _connector(handler)

    with pytest.raises(GitHubApiError) as excinfo:
        await connector.get_data("alice", _data_request(["name"]))

    assert "Something went wrong" in excinfo.value.detail


@pytest.mark.anyio
async def test_get_data_malformed_json_propagates():
    connector = _connector(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(GitHubApiError):
        await connector.get_data("alice", _data_request(["name"]))


@pytest.mark.anyio
async def test_set_credentials_validation_upstream_outage_is_github_error():
    connector = _connector(lambda request: httpx.Response(503, text="unavailable"), validate_credentials=True)

    with pytest.raises(GitHubApiError) as excinfo:
        await connector.set_credentials("alice", "ghp_secret")

    assert excinfo.value.upstream_status == 503
    assert excinfo.value.status_code == 502
    assert connector.is_auth_valid("alice") is False


@pytest.mark.anyio
async def test_set_credentials_validation_malformed_json_is_github_error():
    connector = _connector(lambda request: httpx.Response(200, text="<html>"), validate_credentials=True)

    with pytest.raises(GitHubApiError) as excinfo:
        await connector.set_credentials("alice", "ghp_secret")

    assert excinfo.value.status_code == 502
    assert connector.is_auth_valid("alice") is False


def test_search_query_requests_one_page_of_results():
    assert "$first: Int = %d" % SEARCH_PAGE_SIZE in REPOSITORY_SEARCH_QUERY
