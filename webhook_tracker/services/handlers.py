"""
Built-in handler and loading of user handlers from an import path
"""

import importlib
from typing import Callable

import structlog
from fastapi.responses import Response

from webhook_tracker.models.events import Event

logger = structlog.get_logger()


class HandlerLoadError(Exception):
    """The configured handler path does not point at a callable"""


async def acknowledge(event: Event) -> Response:
    """Default handler: log the event and answer 200"""
    logger.info(
        "Webhook event acknowledged",
        event_type=event.kind.header,
        action=event.payload.get("action"),
        repository=event.repository
    )
    return Response(status_code=200)


def load_handler(path: str) -> Callable:
    """
    Import a handler from a "package.module:function" path

    Args:
        path: Module and attribute separated by a colon

    Returns:
        Callable: The handler

    Raises:
        HandlerLoadError: The path is malformed, the module cannot be
            imported, or the attribute is missing or not callable
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise HandlerLoadError(f"Handler path must look like 'module:function', got '{path}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise HandlerLoadError(f"Cannot import handler module '{module_name}': {e}") from e

    handler = module
    for part in attr.split("."):
        try:
            handler = getattr(handler, part)
        except AttributeError as e:
            raise HandlerLoadError(f"'{module_name}' has no attribute '{attr}'") from e

    if not callable(handler):
        raise HandlerLoadError(f"Handler '{path}' is not callable")

    logger.info("Webhook handler loaded", handler=path)
    return handler
