"""FastAPI application factory for the webhook endpoints.

Routes only parse, resolve the account, and hand the normalized event to a
relay; every decision about what to post lives in the core.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from adapters.accounts import AccountResolver
from adapters.slack_mapper import SlackChallenge, SlackEventCallback, parse_slack_payload
from adapters.trello_mapper import build_tracker_event
from core.errors import (
    CoreError,
    LookupFailedError,
    SendError,
    UnknownTenantError,
    ValidationError,
)
from core.relay import ChatEventRelay, TrackerEventRelay

LOGGER = logging.getLogger(__name__)

ERROR_STATUS = (
    (UnknownTenantError, 404),
    (ValidationError, 400),
    (LookupFailedError, 503),
    (SendError, 502),
)


def status_for(exc: CoreError) -> int:
    """Map a core error to the HTTP status returned to the webhook sender."""

    for error_type, status in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise ValidationError(f"Request body is not valid JSON: {e}") from e


def create_app(
    resolver: AccountResolver,
    chat_relay: ChatEventRelay,
    tracker_relay: TrackerEventRelay,
) -> FastAPI:
    """Build the webhook app around already-wired relays."""

    app = FastAPI(title="threadlink", docs_url=None, redoc_url=None)

    @app.exception_handler(CoreError)
    async def core_error_handler(request: Request, exc: CoreError):
        status = status_for(exc)
        if status >= 500:
            LOGGER.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            LOGGER.warning("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status, content={"status": status, "message": str(exc)})

    @app.get("/")
    async def default() -> PlainTextResponse:
        return PlainTextResponse("Default")

    @app.head("/trello-webhook/{account_id}")
    async def trello_webhook_setup(account_id: str) -> Response:
        # Trello sends HEAD when a webhook is registered and expects a 200.
        resolver.resolve(account_id)
        return Response(status_code=200)

    @app.post("/trello-webhook/{account_id}")
    async def trello_webhook(account_id: str, request: Request) -> PlainTextResponse:
        tenant = resolver.resolve(account_id)
        event = build_tracker_event(await _read_json(request))
        await tracker_relay.translate_and_dispatch(event, tenant)
        return PlainTextResponse("Success")

    @app.post("/slack-webhook/{account_id}")
    async def slack_webhook(account_id: str, request: Request) -> PlainTextResponse:
        tenant = resolver.resolve(account_id)
        payload = parse_slack_payload(await _read_json(request))
        if isinstance(payload, SlackChallenge):
            return PlainTextResponse(payload.challenge)
        if isinstance(payload, SlackEventCallback):
            await chat_relay.translate_and_dispatch(payload.event, tenant)
            return PlainTextResponse("Success")
        raise ValidationError(f"Unsupported Slack payload type {payload.type}")

    return app
