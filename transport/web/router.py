"""
Web Chat Receiver

FastAPI router behind the browser chat widget.
Decodes {message, threadId, reset}, runs the pipeline, returns the reply and
the full updated transcript.
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from agent.errors import BadRequestError
from agent.pipeline import ConversationPipeline
from agent.state_schema import TurnRequest
from infra.bootstrap import get_pipeline

from .schemas import (
    MessagePayload,
    WebChatRequest,
    WebChatResponse,
    WebErrorResponse,
    WebResetResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Web Chat"])


async def read_json_payload(request: Request) -> Dict[str, Any]:
    """
    Read the JSON body. Anything that is not a JSON object decodes to {},
    which the pipeline then rejects for its missing thread id.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def decode_request(payload: Dict[str, Any]) -> TurnRequest:
    """
    Decode the widget payload into a TurnRequest.

    Raises:
        BadRequestError: field has the wrong type
    """
    try:
        body = WebChatRequest.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise BadRequestError("invalid_payload", f"invalid request body: {fields}")

    return TurnRequest(
        thread_id=body.thread_id,
        text=body.message,
        reset=bool(body.reset),
        channel="web",
    )


def error_response(error: BadRequestError) -> JSONResponse:
    return JSONResponse(
        content=WebErrorResponse(error=error.message, code=error.code).model_dump(),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@router.post("/agent")
async def web_chat(
    request: Request,
    pipeline: ConversationPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """
    Handle one widget request.

    Returns:
        200 {"reply", "history"} on a turn
        200 {"ok": true, "history": []} on reset
        400 {"error", "code"} when threadId or message is missing
    """
    try:
        turn = decode_request(await read_json_payload(request))
        result = await pipeline.handle(turn)
    except BadRequestError as e:
        logger.info(f"Web request rejected: {e.code}")
        return error_response(e)

    if result.status == "reset":
        return JSONResponse(content=WebResetResponse().model_dump())

    response = WebChatResponse(
        reply=result.reply,
        history=[MessagePayload.from_message(m) for m in result.history],
    )
    return JSONResponse(content=response.model_dump())
