#!/usr/bin/env python3
"""
Notification webhook endpoint - emails newly inserted notifications.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from notification import DispatchResult, NotificationDispatcher
from ..dependencies import get_dispatcher
from ..models.responses import ErrorResponse, SendEmailResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

# Bare OPTIONS requests (no Origin or Access-Control-Request-Method) bypass
# CORSMiddleware and land on the route below
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
}

_RESPONSES = {
    200: {"model": SendEmailResponse, "description": "Delivered, ignored or suppressed"},
    400: {"description": "Recipient email or preferences missing (plain text)"},
    500: {"model": ErrorResponse, "description": "Unexpected failure"},
}


def to_response(result: DispatchResult) -> Response:
    """Map a dispatch result onto the webhook's HTTP contract."""
    if result.is_json:
        return JSONResponse(status_code=result.http_status, content=result.content)
    return PlainTextResponse(result.content, status_code=result.http_status)


async def read_payload(request: Request) -> Any:
    """Decode the JSON body; undecodable bodies become None and are ignored downstream."""
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        logger.warning(f"Webhook body on {request.url.path} is not valid JSON")
        return None


@router.post("/functions/v1/send-email", responses=_RESPONSES)
@router.post("/webhooks/notifications", responses=_RESPONSES)
async def send_email(
    request: Request,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
):
    """
    Database webhook for inserts into the notifications table.

    Checks the recipient's preferences, renders the template and sends the
    email (or simulates it when no gateway key is configured).
    """
    payload = await read_payload(request)
    # Store and gateway calls block
    result = await run_in_threadpool(dispatcher.dispatch, payload)
    logger.info(f"Webhook handled: {result.status.value} ({result.http_status})")
    return to_response(result)


@router.options("/functions/v1/send-email", include_in_schema=False)
@router.options("/webhooks/notifications", include_in_schema=False)
def preflight() -> Response:
    """Answer any OPTIONS request on the webhook."""
    return PlainTextResponse("ok", headers=CORS_HEADERS)
