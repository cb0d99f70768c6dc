"""
Webhook endpoint for GitHub pull request events.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import PlainTextResponse
from fastapi.concurrency import run_in_threadpool

from plan_relay.services.webhook_relay import WebhookRelay, get_webhook_relay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/github/pr", response_class=PlainTextResponse)
async def handle_pr_webhook(
    request: Request,
    x_hub_signature: Optional[str] = Header(None, alias="X-Hub-Signature"),
    relay: WebhookRelay = Depends(get_webhook_relay),
) -> PlainTextResponse:
    """
    Receive a GitHub pull request webhook and trigger the matching Bamboo plan.

    Always answers with a short plain-text body: 403 when the secret header is
    missing or wrong, 500 when the payload cannot be decoded, 200 otherwise.

    Args:
        request: FastAPI request object
        x_hub_signature: Shared secret header
        relay: Relay that handles the delivery

    Returns:
        Plain-text response describing the outcome
    """
    payload = await request.body()
    # The Bamboo call blocks; keep it off the event loop
    result = await run_in_threadpool(relay.handle, x_hub_signature, payload)
    logger.info(f"Webhook delivery finished: {result.outcome.value} ({result.status_code})")
    return PlainTextResponse(result.body, status_code=result.status_code)
