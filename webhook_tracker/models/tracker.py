"""
Tracker configuration model
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .events import EventKind

API_ENDPOINT = "https://api.github.com/"


@dataclass(frozen=True)
class TrackerConfig:
    """Read-only configuration shared by every request a tracker handles"""

    access_token: str = field(repr=False)
    secret: str = field(repr=False)
    owner: str
    repo: str
    events: Tuple[EventKind, ...] = ()
    api_url: str = API_ENDPOINT

    def __post_init__(self):
        # Frozen dataclass, so normalise through object.__setattr__
        object.__setattr__(self, "events", tuple(self.events))
        if not self.api_url.endswith("/"):
            object.__setattr__(self, "api_url", self.api_url + "/")

    @property
    def repo_full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def statuses_url(self) -> str:
        """Base URL statuses are posted to; the commit SHA is appended"""
        return f"{self.api_url}repos/{self.repo_full_name}/statuses/"

    def accepts(self, kind: EventKind) -> bool:
        """An empty allow-list accepts every kind"""
        return not self.events or kind in self.events

    def describe(self) -> Dict[str, Any]:
        """Log-safe view of the configuration"""
        return {
            "repository": self.repo_full_name,
            "events": [kind.header for kind in self.events] or ["*"],
            "api_url": self.api_url,
        }
