"""
Validation and dispatch of GitHub webhook deliveries
"""

import inspect
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

import structlog
from fastapi.responses import PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from webhook_tracker.models.events import Event, EventKind
from webhook_tracker.models.tracker import TrackerConfig
from webhook_tracker.utils.webhook_validator import (
    extract_delivery_id,
    extract_signature,
    validate_github_webhook,
)

logger = structlog.get_logger()

EventHandler = Callable[[Event], Union[Any, Awaitable[Any]]]


class RequestStage(str, Enum):
    RECEIVED = "received"
    SIGNATURE_CHECKED = "signature_checked"
    KIND_CHECKED = "kind_checked"
    REPO_CHECKED = "repo_checked"
    EVENT_BUILT = "event_built"
    HANDLED = "handled"
    RESPONDED = "responded"


class RejectionReason(str, Enum):
    """Reasons sent back, as plain text, with a 400 response"""

    INVALID_SIGNATURE = "invalid signature"
    INVALID_EVENT = "invalid event"
    INVALID_REPO = "invalid repo"


class WebhookRejected(Exception):
    """A delivery failed one of the validation checks"""
    def __init__(self, reason: RejectionReason, detail: Optional[str] = None):
        self.reason = reason
        self.detail = detail
        super().__init__(reason.value)


class PayloadDecodingError(Exception):
    """The delivery body is not the JSON object GitHub is expected to send"""


@dataclass
class HandlerOutcome:
    """Result of running the caller's handler: a response or the error it raised"""

    response: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def classify_event(headers: Mapping[str, str], config: TrackerConfig) -> EventKind:
    """Read the event kind and check it against the allow-list"""
    kind = EventKind.from_headers(headers)
    if kind is None:
        raise WebhookRejected(RejectionReason.INVALID_EVENT, "missing X-GitHub-Event header")
    if not config.accepts(kind):
        raise WebhookRejected(RejectionReason.INVALID_EVENT, f"event '{kind}' not tracked")
    return kind


def decode_payload(body: bytes) -> Dict[str, Any]:
    """Decode the authenticated body; no re-encoding happens in between"""
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PayloadDecodingError(f"Invalid JSON payload: {e}") from e

    if not isinstance(payload, dict):
        raise PayloadDecodingError(
            f"Expected a JSON object, got {type(payload).__name__}"
        )
    return payload


def repo_full_name(payload: Mapping[str, Any]) -> str:
    try:
        return payload["repository"]["full_name"]
    except (KeyError, TypeError) as e:
        raise PayloadDecodingError("Payload has no repository.full_name") from e


def match_repository(payload: Mapping[str, Any], expected: str) -> str:
    """Check the payload comes from the tracked repository"""
    full_name = repo_full_name(payload)
    if full_name != expected:
        raise WebhookRejected(RejectionReason.INVALID_REPO, f"repository '{full_name}'")
    return full_name


async def invoke_handler(handler: EventHandler, event: Event) -> HandlerOutcome:
    """
    Run the handler once and capture its response or exception.

    Coroutine functions are awaited; plain callables run in the threadpool so
    they do not block the event loop.
    """
    try:
        if inspect.iscoroutinefunction(handler):
            result = await handler(event)
        else:
            result = await run_in_threadpool(handler, event)
            if inspect.isawaitable(result):
                result = await result
    except Exception as e:
        return HandlerOutcome(error=e)
    return HandlerOutcome(response=result)


class WebhookDispatcher:
    """
    Validates deliveries and routes them to the handler.

    Each delivery goes through signature, event kind and repository checks in
    that order and stops at the first failure.
    """

    def __init__(self, config: TrackerConfig, handler: EventHandler):
        self.config = config
        self.handler = handler

    async def dispatch(self, body: bytes, headers: Mapping[str, str]) -> Any:
        """
        Handle one delivery.

        Args:
            body: Raw request body, exactly as received
            headers: Request headers

        Returns:
            400 with a reason when a check fails, 500 on decoding or handler
            errors, otherwise whatever the handler returned
        """
        delivery_id = extract_delivery_id(headers)
        log = logger.bind(delivery_id=delivery_id, repository=self.config.repo_full_name)
        stage = RequestStage.RECEIVED

        try:
            if not validate_github_webhook(body, extract_signature(headers), self.config.secret):
                raise WebhookRejected(RejectionReason.INVALID_SIGNATURE)
            stage = RequestStage.SIGNATURE_CHECKED

            kind = classify_event(headers, self.config)
            stage = RequestStage.KIND_CHECKED

            payload = decode_payload(body)
            match_repository(payload, self.config.repo_full_name)
            stage = RequestStage.REPO_CHECKED

            event = Event(
                kind=kind,
                payload=payload,
                endpoint=self.config.statuses_url,
                access_token=self.config.access_token,
            )
            stage = RequestStage.EVENT_BUILT
        except WebhookRejected as e:
            log.warning(
                "Webhook rejected",
                reason=e.reason.value,
                detail=e.detail,
                stage=stage.value
            )
            return PlainTextResponse(e.reason.value, status_code=400)
        except Exception as e:
            log.error(
                "Webhook processing failed",
                error=str(e),
                error_type=type(e).__name__,
                stage=stage.value,
                exc_info=True
            )
            return Response(status_code=500)

        log.info("Dispatching webhook event", event_type=kind.header, stage=stage.value)

        outcome = await invoke_handler(self.handler, event)
        if not outcome.ok:
            log.error(
                "Webhook handler failed",
                event_type=kind.header,
                error=str(outcome.error),
                error_type=type(outcome.error).__name__,
                stage=RequestStage.HANDLED.value,
                exc_info=outcome.error
            )
            return Response(status_code=500)

        log.info(
            "Webhook event processed",
            event_type=kind.header,
            stage=RequestStage.RESPONDED.value
        )
        return outcome.response
