"""
Webhook tracker: validated GitHub deliveries routed to a handler
"""

import threading
import time
from contextlib import asynccontextmanager
from typing import Iterable, Optional

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from webhook_tracker.api.health import create_health_router
from webhook_tracker.api.webhooks import create_webhook_router
from webhook_tracker.models.events import EventKind
from webhook_tracker.models.tracker import API_ENDPOINT, TrackerConfig
from webhook_tracker.services.event_dispatcher import EventHandler, WebhookDispatcher
from webhook_tracker.services.github_client import verify_access_token

logger = structlog.get_logger()


class TrackerServer:
    """Handle on a tracker served by uvicorn in a background thread"""

    def __init__(self, server: uvicorn.Server, thread: threading.Thread):
        self.server = server
        self.thread = thread

    @property
    def running(self) -> bool:
        return self.thread.is_alive() and self.server.started

    @property
    def port(self) -> Optional[int]:
        """Bound port, useful when started with port=0"""
        for listener in getattr(self.server, "servers", None) or []:
            for sock in listener.sockets:
                return sock.getsockname()[1]
        return None

    def wait_until_started(self, timeout: float = 10.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if self.server.started:
                return True
            if not self.thread.is_alive():
                return False
            time.sleep(0.05)
        return self.server.started

    def shutdown(self, timeout: Optional[float] = 10.0) -> None:
        """Stop accepting connections and wait for the server thread to exit"""
        self.server.should_exit = True
        self.thread.join(timeout)
        if self.thread.is_alive():
            logger.warning("Webhook tracker did not stop in time", timeout=timeout)
            return
        logger.info("Webhook tracker stopped")


class WebhookTracker:
    """
    A server that handles events received from GitHub webhooks.

    When the tracked repository's webhook delivers an event, the tracker
    checks its signature, event kind and repository, wraps it in an Event and
    passes it to `handle`. Whatever `handle` returns is sent back to GitHub.

    Example:
        async def handle(event):
            if event.kind == PushEvent:
                await event.respond(event.payload["after"], StatusState.SUCCESS,
                                    context="ci/tracker")
            return Response(status_code=200)

        tracker = WebhookTracker(handle, token, secret, "user", "repo",
                                 events=[PushEvent])
        tracker.run(port=8000)

    The access token is checked against the GitHub API on construction; a
    rejected token raises GitHubAuthenticationError and no tracker is built.
    """

    def __init__(self, handle: EventHandler, access_token: str, secret: str,
                 owner: str, repo: str, events: Iterable[EventKind] = (),
                 api_url: str = API_ENDPOINT,
                 http_client: Optional[httpx.Client] = None):
        self.config = TrackerConfig(
            access_token=access_token,
            secret=secret,
            owner=owner,
            repo=repo,
            events=tuple(events),
            api_url=api_url,
        )

        verify_access_token(access_token, self.config.api_url, client=http_client)

        self.dispatcher = WebhookDispatcher(self.config, handle)
        self.app = self._create_app()

    @classmethod
    def from_settings(cls, settings, handle: EventHandler,
                      http_client: Optional[httpx.Client] = None) -> "WebhookTracker":
        """Build a tracker from application settings"""
        return cls(
            handle,
            settings.GITHUB_TOKEN,
            settings.GITHUB_WEBHOOK_SECRET,
            settings.REPO_OWNER,
            settings.REPO_NAME,
            events=[EventKind(name) for name in settings.tracked_events_list],
            api_url=settings.GITHUB_API_URL,
            http_client=http_client,
        )

    def _create_app(self) -> FastAPI:
        config = self.config

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            logger.info(
                "Tracking webhook",
                port=getattr(app.state, "port", None),
                **config.describe()
            )
            yield
            logger.info("Shutting down webhook tracker", repository=config.repo_full_name)

        app = FastAPI(
            title="GitHub Webhook Tracker",
            description=f"Webhook tracker for {config.repo_full_name}",
            version="1.0.0",
            lifespan=lifespan,
        )
        app.include_router(create_health_router(config), prefix="/health", tags=["health"])
        app.include_router(create_webhook_router(self.dispatcher), tags=["webhooks"])
        return app

    def _server(self, host: str, port: int, log_level: str) -> uvicorn.Server:
        self.app.state.port = port
        server_config = uvicorn.Config(
            self.app,
            host=host,
            port=port,
            log_level=log_level,
        )
        return uvicorn.Server(server_config)

    def start(self, host: str = "0.0.0.0", port: int = 8000,
              log_level: str = "info") -> TrackerServer:
        """
        Serve in a background thread and return a handle to stop it.

        Raises RuntimeError when the server does not come up, for example
        when the port is already in use.
        """
        server = self._server(host, port, log_level)
        thread = threading.Thread(
            target=server.run,
            name=f"webhook-tracker-{port}",
            daemon=True,
        )
        thread.start()
        handle = TrackerServer(server, thread)
        if not handle.wait_until_started():
            server.should_exit = True
            thread.join()
            raise RuntimeError(f"webhook tracker failed to start on {host}:{port}")
        return handle

    def run(self, host: str = "0.0.0.0", port: int = 8000, log_level: str = "info") -> None:
        """Serve in the current thread until interrupted"""
        self._server(host, port, log_level).run()
