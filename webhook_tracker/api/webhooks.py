"""
GitHub webhook endpoint
"""

from fastapi import APIRouter, Request

from webhook_tracker.services.event_dispatcher import WebhookDispatcher


def create_webhook_router(dispatcher: WebhookDispatcher) -> APIRouter:
    """Router that accepts deliveries POSTed to any path"""
    router = APIRouter()

    @router.post("/{path:path}", include_in_schema=False)
    async def github_webhook(request: Request, path: str):
        """
        Receive a GitHub webhook delivery
        """
        # Read once; the same bytes are authenticated and decoded
        body = await request.body()
        return await dispatcher.dispatch(body, request.headers)

    return router
