"""
GitHub Webhook Tracker

Validates GitHub webhook deliveries for one repository and routes them to a
handler, which can post commit statuses back through `Event.respond`.
"""

from .models.events import (
    Event,
    EventKind,
    StatusState,
    KNOWN_EVENT_KINDS,
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
from .services.github_client import GitHubAPIError, GitHubAuthenticationError
from .services.tracker import TrackerServer, WebhookTracker

PENDING = StatusState.PENDING
ERROR = StatusState.ERROR
FAILURE = StatusState.FAILURE
SUCCESS = StatusState.SUCCESS

__all__ = [
    "WebhookTracker",
    "TrackerServer",
    "Event",
    "EventKind",
    "StatusState",
    "PENDING",
    "ERROR",
    "FAILURE",
    "SUCCESS",
    "KNOWN_EVENT_KINDS",
    "GitHubAPIError",
    "GitHubAuthenticationError",
    "CommitCommentEvent",
    "CreateEvent",
    "DeleteEvent",
    "DeploymentEvent",
    "DeploymentStatusEvent",
    "DownloadEvent",
    "FollowEvent",
    "ForkEvent",
    "ForkApplyEvent",
    "GistEvent",
    "GollumEvent",
    "IssueCommentEvent",
    "IssuesEvent",
    "MemberEvent",
    "MembershipEvent",
    "PageBuildEvent",
    "PublicEvent",
    "PullRequestEvent",
    "PullRequestReviewCommentEvent",
    "PushEvent",
    "ReleaseEvent",
    "RepositoryEvent",
    "StatusEvent",
    "TeamAddEvent",
    "WatchEvent",
]
