"""Chat relay endpoints.

POST /api/chat streams the assistant reply as plain text.
GET /api/sessions/{session_id} returns a session's stored history.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import PlainTextResponse, StreamingResponse
from pydantic import ValidationError
from starlette.background import BackgroundTask

from chat_relay.models.schemas import ChatRequest, SessionInfo
from chat_relay.relay.exceptions import InvalidMessageError, ProviderError
from chat_relay.relay.service import ChatRelay, RelayStream

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

INVALID_MESSAGE = "Invalid message"
BAD_REQUEST = "Bad request"
PROVIDER_FAILURE = "Provider error"


def get_relay(request: Request) -> ChatRelay:
    """Return the relay built by the application factory."""
    return request.app.state.relay


def _bad_request(reason: str) -> PlainTextResponse:
    return PlainTextResponse(reason, status_code=status.HTTP_400_BAD_REQUEST)


async def _parse_chat_request(request: Request) -> ChatRequest | PlainTextResponse:
    """Parse the JSON body, returning a 400 response on failure."""
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Rejected chat request: body is not valid JSON")
        return _bad_request(BAD_REQUEST)

    if not isinstance(payload, dict):
        logger.warning("Rejected chat request: body is not a JSON object")
        return _bad_request(BAD_REQUEST)

    try:
        return ChatRequest.model_validate(payload)
    except ValidationError as e:
        if any(error["loc"][:1] == ("message",) for error in e.errors()):
            logger.warning("Rejected chat request: invalid message")
            return _bad_request(INVALID_MESSAGE)
        logger.warning(f"Rejected chat request: {e.error_count()} invalid field(s)")
        return _bad_request(BAD_REQUEST)


async def _stream_fragments(stream: RelayStream) -> AsyncGenerator[str]:
    """Forward relay fragments to the response body.

    The status line is already sent, so a mid-stream provider failure can
    only end the body early.
    """
    try:
        async for fragment in stream:
            yield fragment
    except ProviderError:
        logger.error(f"Reply stream for session {stream.session_id} failed", exc_info=True)
    finally:
        await stream.aclose()


@router.post("/chat", response_model=None)
async def chat(request: Request, relay: ChatRelay = Depends(get_relay)) -> Response:
    """Relay a message and stream the assistant reply.

    Request body: ``{"message": str, "sessionId"?: str}``.

    Returns:
        200 with a ``text/plain`` streamed body of raw assistant text.

    Raises:
        400: Invalid JSON, missing/empty/non-string message, bad session id.
        502: Model provider failed before streaming started.
    """
    parsed = await _parse_chat_request(request)
    if isinstance(parsed, PlainTextResponse):
        return parsed

    try:
        stream = await relay.send_message(parsed.message, parsed.session_id)
    except InvalidMessageError:
        return _bad_request(INVALID_MESSAGE)
    except ProviderError:
        logger.error("Model provider failed before streaming", exc_info=True)
        return PlainTextResponse(PROVIDER_FAILURE, status_code=status.HTTP_502_BAD_GATEWAY)

    return StreamingResponse(
        _stream_fragments(stream),
        media_type="text/plain; charset=utf-8",
        background=BackgroundTask(stream.aclose),
    )


@router.get("/sessions/{session_id}", response_model=SessionInfo)
async def get_session(session_id: str, relay: ChatRelay = Depends(get_relay)) -> SessionInfo:
    """Return the stored turns of a session.

    Raises:
        404: Session has never been seen (or was evicted).
    """
    if session_id not in relay.store:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )

    turns = relay.store.get(session_id)
    return SessionInfo(session_id=session_id, message_count=len(turns), messages=turns)
