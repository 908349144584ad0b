"""
Webhook event kinds, commit status states and the Event value handed to handlers
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

import httpx

from webhook_tracker.utils.webhook_validator import extract_github_event_type


@dataclass(frozen=True)
class EventKind:
    """
    A GitHub event type, as sent in the X-GitHub-Event header.

    Any string is a valid kind so that event types GitHub adds later still
    flow through; the constants below only cover the ones known today.
    """

    header: str

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> Optional["EventKind"]:
        """Build a kind from request headers, None if the event header is missing"""
        header = extract_github_event_type(headers)
        if header is None:
            return None
        return cls(header)

    @property
    def is_known(self) -> bool:
        return self in KNOWN_EVENT_KINDS

    def __str__(self) -> str:
        return self.header


CommitCommentEvent = EventKind("commit_comment")
CreateEvent = EventKind("create")
DeleteEvent = EventKind("delete")
DeploymentEvent = EventKind("deployment")
DeploymentStatusEvent = EventKind("deployment_status")
DownloadEvent = EventKind("download")
FollowEvent = EventKind("follow")
ForkEvent = EventKind("fork")
ForkApplyEvent = EventKind("fork_apply")
GistEvent = EventKind("gist")
GollumEvent = EventKind("gollum")
IssueCommentEvent = EventKind("issue_comment")
IssuesEvent = EventKind("issues")
MemberEvent = EventKind("member")
MembershipEvent = EventKind("membership")
PageBuildEvent = EventKind("page_build")
PublicEvent = EventKind("public")
PullRequestEvent = EventKind("pull_request")
PullRequestReviewCommentEvent = EventKind("pull_request_review_comment")
PushEvent = EventKind("push")
ReleaseEvent = EventKind("release")
RepositoryEvent = EventKind("repository")
StatusEvent = EventKind("status")
TeamAddEvent = EventKind("team_add")
WatchEvent = EventKind("watch")

KNOWN_EVENT_KINDS: Tuple[EventKind, ...] = (
    CommitCommentEvent,
    CreateEvent,
    DeleteEvent,
    DeploymentEvent,
    DeploymentStatusEvent,
    DownloadEvent,
    FollowEvent,
    ForkEvent,
    ForkApplyEvent,
    GistEvent,
    GollumEvent,
    IssueCommentEvent,
    IssuesEvent,
    MemberEvent,
    MembershipEvent,
    PageBuildEvent,
    PublicEvent,
    PullRequestEvent,
    PullRequestReviewCommentEvent,
    PushEvent,
    ReleaseEvent,
    RepositoryEvent,
    StatusEvent,
    TeamAddEvent,
    WatchEvent,
)


class StatusState(str, Enum):
    """Commit status states accepted by the GitHub Status API"""

    PENDING = "pending"
    ERROR = "error"
    FAILURE = "failure"
    SUCCESS = "success"


@dataclass(frozen=True)
class Event:
    """
    A validated webhook delivery, handed to the tracker's handler.

    Only built once the signature, event kind and repository checks have
    passed, so `payload["repository"]["full_name"]` always names the tracked
    repository.

    Attributes:
        kind: Kind of the event (e.g. PushEvent, PullRequestEvent)
        payload: Decoded JSON payload
        endpoint: Statuses URL of the tracked repository, ending in "/"
        access_token: Token used to post statuses back to GitHub
    """

    kind: EventKind
    payload: Mapping[str, Any]
    endpoint: str
    access_token: str = field(repr=False)

    @property
    def repository(self) -> str:
        return self.payload["repository"]["full_name"]

    async def respond(
        self,
        sha: str,
        state: StatusState,
        description: str = "",
        context: str = "default",
        target_url: str = "",
        client: Optional[httpx.AsyncClient] = None,
    ) -> httpx.Response:
        """
        Respond to the event with a commit status.

        Args:
            sha: Commit the status is attached to
            state: One of StatusState.PENDING, SUCCESS, FAILURE or ERROR
            description: Short description shown next to the status
            context: Label that differentiates this status from others
            target_url: Link shown with the status
            client: Optional httpx client to send the request with

        Returns:
            httpx.Response: GitHub's raw response, whatever its status code
        """
        from webhook_tracker.services.github_client import GitHubClient

        async with GitHubClient(self.access_token, client=client) as github:
            return await github.create_status(
                self.endpoint,
                sha,
                state,
                description=description,
                context=context,
                target_url=target_url,
            )
