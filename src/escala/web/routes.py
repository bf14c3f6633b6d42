"""HTTP route handlers for the schedule board JSON API.

Routes:
- GET  /api/health  → Service status and current lock state
- GET  /api/state   → Full schedule document (JSON)
- POST /api/update  → Apply a batch of cell edits
- POST /api/ciente  → Record the deputy's acknowledgement

All failures share the shape ``{"ok": false, "error": <code>, "details": <text>}``.
File I/O runs in a worker thread so slow disks don't stall the event loop.
"""

import asyncio
import json
import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from escala.board.errors import BoardError, InvalidRequestError
from escala.board.service import ScheduleBoard
from escala.core.config import SERVICE_NAME, utc_timestamp

logger = logging.getLogger(__name__)

ADMIN_KEY_HEADER = "x-admin-key"
CIENTE_KEY_HEADER = "x-major-key"


def _board(request: Request) -> ScheduleBoard:
    return request.app.state.board


def _error_response(error: BoardError) -> JSONResponse:
    if error.status_code >= 500:
        logger.error("%s: %s", error.code, error.details)
    else:
        logger.info("Rejected request (%s): %s", error.code, error.details)
    return JSONResponse(error.to_dict(), status_code=error.status_code)


async def _json_body(request: Request) -> dict:
    """Parse the request body as a JSON object; an empty body is ``{}``."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidRequestError(f"JSON inválido: {e}") from e
    if not isinstance(body, dict):
        raise InvalidRequestError("o corpo deve ser um objeto JSON")
    return body


async def health(request: Request) -> JSONResponse:
    """Health check endpoint."""
    board = _board(request)
    return JSONResponse(
        {
            "ok": True,
            "service": SERVICE_NAME,
            "time": utc_timestamp(),
            "locked": board.is_locked(),
        }
    )


async def get_state(request: Request) -> JSONResponse:
    """Return the current schedule document and lock state."""
    board = _board(request)
    try:
        document = await asyncio.to_thread(board.get_state)
    except BoardError as e:
        return _error_response(e)

    return JSONResponse({"ok": True, "state": document.to_json(), "locked": board.is_locked()})


async def post_update(request: Request) -> JSONResponse:
    """Apply a batch of edits.

    Body: ``{"user": str, "reason": str, "updates": [{"officerId", "date", "code"}]}``.
    An empty body counts as ``{}``, so the lock and field checks decide the
    response. The ``x-admin-key`` header bypasses the weekly lock.
    """
    board = _board(request)
    admin_key = request.headers.get(ADMIN_KEY_HEADER, "")
    try:
        body = await _json_body(request)
        result = await asyncio.to_thread(
            board.update,
            body.get("user"),
            body.get("reason"),
            body.get("updates"),
            admin_key,
        )
    except BoardError as e:
        return _error_response(e)

    response: dict = {"ok": True}
    if result.message:
        response["message"] = result.message
    response["locked"] = board.is_locked()
    return JSONResponse(response)


async def post_ciente(request: Request) -> JSONResponse:
    """Record an acknowledgement.

    Either a valid ``x-major-key`` or a valid ``x-admin-key`` is enough;
    both headers are checked. The optional body is ``{"note": str}``.
    """
    board = _board(request)
    key = request.headers.get(CIENTE_KEY_HEADER, "")
    admin_key = request.headers.get(ADMIN_KEY_HEADER, "")
    try:
        body = await _json_body(request)
    except InvalidRequestError:
        body = {}
    try:
        ciente = await asyncio.to_thread(board.acknowledge, key, body.get("note", ""), admin_key)
    except BoardError as e:
        return _error_response(e)

    return JSONResponse(
        {"ok": True, "ciente": ciente.model_dump(mode="json"), "locked": board.is_locked()}
    )
