"""
GitHub API client for credential checks and commit statuses
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from webhook_tracker.models.events import StatusState
from webhook_tracker.models.tracker import API_ENDPOINT

logger = structlog.get_logger()


class GitHubAPIError(Exception):
    """Custom exception for GitHub API errors"""
    def __init__(self, message: str, status_code: int = None, response_data: Any = None):
        self.message = message
        self.status_code = status_code
        self.response_data = response_data
        super().__init__(message)


class GitHubAuthenticationError(GitHubAPIError):
    """The access token was rejected while the tracker was starting up"""


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def verify_access_token(access_token: str, api_url: str = API_ENDPOINT,
                        client: Optional[httpx.Client] = None) -> str:
    """
    Check an access token against the GitHub API root.

    Args:
        access_token: GitHub access token
        api_url: Base URL of the GitHub API
        client: Optional blocking httpx client

    Returns:
        str: The same access token, once GitHub has accepted it

    Raises:
        GitHubAuthenticationError: GitHub answered with a non-2xx status or
            could not be reached
    """
    params = {"access_token": access_token}
    try:
        if client is None:
            response = httpx.get(api_url, params=params)
        else:
            response = client.get(api_url, params=params)
    except httpx.RequestError as e:
        logger.error("GitHub API request failed", error=str(e), url=api_url)
        raise GitHubAuthenticationError(
            f"Attempt to authenticate with GitHub API failed: {e}"
        ) from e

    if not (200 <= response.status_code < 300):
        body = _response_body(response)
        logger.error("GitHub rejected access token", status_code=response.status_code)
        raise GitHubAuthenticationError(
            "Attempt to authenticate with GitHub API failed.\n"
            f"Response Code: {response.status_code}\n"
            f"Response Message: {body}",
            status_code=response.status_code,
            response_data=body,
        )

    logger.info("GitHub access token verified", api_url=api_url)
    return access_token


class GitHubClient:
    """GitHub API client used to post commit statuses"""

    def __init__(self, token: str, client: Optional[httpx.AsyncClient] = None):
        if not token:
            raise ValueError("GitHub token is required")

        self.token = token
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "GitHub-Webhook-Tracker/1.0"
        }
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(headers=self.headers)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    @property
    def params(self) -> Dict[str, str]:
        return {"access_token": self.token}

    async def create_status(self, endpoint: str, sha: str, state: StatusState,
                            description: str = "", context: str = "default",
                            target_url: str = "") -> httpx.Response:
        """
        Create a commit status.

        The response is returned as-is; a non-2xx answer from GitHub is for
        the caller to inspect, not an error here.
        """
        url = endpoint + sha
        status = {
            "state": StatusState(state).value,
            "target_url": target_url,
            "description": description,
            "context": context,
        }

        try:
            response = await self.client.post(
                url, params=self.params, json=status, headers=self.headers
            )
        except httpx.RequestError as e:
            logger.error("GitHub API request failed", error=str(e), url=url)
            raise GitHubAPIError(f"Request failed: {str(e)}") from e

        logger.info(
            "Commit status posted",
            sha=sha,
            state=status["state"],
            context=context,
            status_code=response.status_code
        )
        return response
