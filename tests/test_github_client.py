"""
Tests for GitHub API client
"""

import json

import httpx
import pytest

from webhook_tracker.models.events import StatusState
from webhook_tracker.models.tracker import TrackerConfig
from webhook_tracker.services.github_client import (
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubClient,
    verify_access_token,
)


def _blocking_client(status_code, **kwargs):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(status_code, **kwargs)

    return httpx.Client(transport=httpx.MockTransport(handler)), calls


class TestVerifyAccessToken:
    """Test cases for access token verification"""

    def test_valid_token_returned_unchanged(self):
        client, calls = _blocking_client(200, json={"current_user_url": "https://api.github.com/user"})

        assert verify_access_token("test_token", client=client) == "test_token"
        assert len(calls) == 1
        assert calls[0].method == "GET"
        assert str(calls[0].url).startswith("https://api.github.com/")
        assert calls[0].url.params["access_token"] == "test_token"

    def test_rejected_token_raises_with_status_and_body(self):
        client, _ = _blocking_client(401, json={"message": "Bad credentials"})

        with pytest.raises(GitHubAuthenticationError) as exc_info:
            verify_access_token("bad_token", client=client)

        error = exc_info.value
        assert error.status_code == 401
        assert error.response_data == {"message": "Bad credentials"}
        assert "401" in str(error)
        assert "Bad credentials" in str(error)

    def test_non_json_error_body_kept_as_text(self):
        client, _ = _blocking_client(503, text="Service Unavailable")

        with pytest.raises(GitHubAuthenticationError) as exc_info:
            verify_access_token("test_token", client=client)

        assert exc_info.value.response_data == "Service Unavailable"
        assert "Service Unavailable" in str(exc_info.value)

    def test_redirect_status_is_not_success(self):
        client, _ = _blocking_client(304)

        with pytest.raises(GitHubAuthenticationError):
            verify_access_token("test_token", client=client)

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))

        with pytest.raises(GitHubAuthenticationError, match="connection refused"):
            verify_access_token("test_token", client=client)

    def test_custom_api_url(self):
        client, calls = _blocking_client(200, json={})

        verify_access_token("test_token", "https://github.example.com/api/v3/", client=client)

        assert calls[0].url.host == "github.example.com"

    def test_authentication_error_is_api_error(self):
        assert issubclass(GitHubAuthenticationError, GitHubAPIError)


class TestGitHubClient:
    """Test cases for GitHub API client"""

    @pytest.fixture
    def recorded(self):
        return []

    @pytest.fixture
    def http_client(self, recorded):
        def handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return httpx.Response(201, json={"id": 1, "state": "success"})

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    def test_client_initialization(self):
        """Test client initialization"""
        client = GitHubClient(token="test_token")

        assert client.token == "test_token"
        assert client.params == {"access_token": "test_token"}
        assert client.headers["User-Agent"] == "GitHub-Webhook-Tracker/1.0"

    def test_client_no_token_raises_error(self):
        """Test that missing token raises ValueError"""
        with pytest.raises(ValueError, match="GitHub token is required"):
            GitHubClient(token="")

    @pytest.mark.asyncio
    async def test_create_status(self, http_client, recorded):
        """Test status is posted to endpoint + sha"""
        async with GitHubClient(token="test_token", client=http_client) as client:
            response = await client.create_status(
                TrackerConfig("test_token", "secret", "org", "repoA").statuses_url,
                "abc123",
                StatusState.SUCCESS,
                description="done",
                context="ci",
                target_url="https://ci.example.com/1",
            )

        assert response.status_code == 201
        request = recorded[0]
        assert str(request.url).startswith("https://api.github.com/repos/org/repoA/statuses/abc123")
        assert request.url.params["access_token"] == "test_token"
        body = json.loads(request.content)
        assert body["state"] == "success"
        assert body == {
            "state": "success",
            "target_url": "https://ci.example.com/1",
            "description": "done",
            "context": "ci",
        }

    @pytest.mark.asyncio
    async def test_create_status_accepts_wire_value(self, http_client, recorded):
        async with GitHubClient(token="test_token", client=http_client) as client:
            await client.create_status("https://api.github.com/repos/o/r/statuses/", "f00", "failure")

        assert json.loads(recorded[0].content)["state"] == "failure"

    @pytest.mark.asyncio
    async def test_create_status_returns_error_responses(self):
        """Test a 422 from GitHub is handed back, not raised"""
        def handler(request):
            return httpx.Response(422, json={"message": "No commit found for SHA: abc123"})

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        async with GitHubClient(token="test_token", client=http_client) as client:
            response = await client.create_status(
                "https://api.github.com/repos/o/r/statuses/", "abc123", StatusState.ERROR
            )

        assert response.status_code == 422
        assert response.json()["message"].startswith("No commit found")

    @pytest.mark.asyncio
    async def test_create_status_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = GitHubClient(token="test_token", client=http_client)

        with pytest.raises(GitHubAPIError, match="Request failed"):
            await client.create_status(
                "https://api.github.com/repos/o/r/statuses/", "abc123", StatusState.PENDING
            )

    @pytest.mark.asyncio
    async def test_injected_client_left_open(self, http_client):
        """Test the context manager does not close a client it did not create"""
        async with GitHubClient(token="test_token", client=http_client):
            pass

        assert not http_client.is_closed
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_context_manager_closes_own_client(self):
        """Test client as context manager"""
        async with GitHubClient(token="test_token") as client:
            assert client.token == "test_token"

        assert client.client.is_closed
