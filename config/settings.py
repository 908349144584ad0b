"""
Application settings and configuration
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Server Configuration
    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_JSON: bool = Field(default=True, description="Render logs as JSON lines")

    # GitHub Configuration
    GITHUB_WEBHOOK_SECRET: str = Field(..., description="GitHub webhook secret")
    GITHUB_TOKEN: str = Field(..., description="GitHub personal access token")
    GITHUB_API_URL: str = Field(
        default="https://api.github.com/", description="GitHub API URL"
    )

    # Repository Configuration
    REPO_OWNER: str = Field(..., description="GitHub repository owner")
    REPO_NAME: str = Field(..., description="GitHub repository name")

    # Webhook Configuration
    TRACKED_EVENTS: str = Field(
        default="", description="Comma-separated list of tracked event kinds, empty for all"
    )
    WEBHOOK_HANDLER: str = Field(
        default="webhook_tracker.services.handlers:acknowledge",
        description="Handler import path, as 'module:function'"
    )

    @property
    def tracked_events_list(self) -> List[str]:
        """Get tracked events as a list"""
        if not self.TRACKED_EVENTS:
            return []
        return [event.strip() for event in self.TRACKED_EVENTS.split(",") if event.strip()]

    @property
    def repo_full_name(self) -> str:
        return f"{self.REPO_OWNER}/{self.REPO_NAME}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Settings are read from the environment once, on first use"""
    return Settings()
