#!/usr/bin/env python3
"""
GitHub Webhook Tracker
Main application entry point
"""

import sys

import structlog

from config.settings import get_settings
from webhook_tracker.services.github_client import GitHubAuthenticationError
from webhook_tracker.services.handlers import HandlerLoadError, load_handler
from webhook_tracker.services.tracker import WebhookTracker
from webhook_tracker.utils.logging_config import configure_logging

logger = structlog.get_logger()


def main() -> int:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    logger.info(
        "Starting GitHub Webhook Tracker",
        host=settings.HOST,
        port=settings.PORT,
        repository=settings.repo_full_name,
        handler=settings.WEBHOOK_HANDLER
    )

    try:
        handler = load_handler(settings.WEBHOOK_HANDLER)
        tracker = WebhookTracker.from_settings(settings, handler)
    except (HandlerLoadError, GitHubAuthenticationError) as e:
        logger.error("Webhook tracker failed to start", error=str(e))
        return 1

    tracker.run(
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
