from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import Response

logger = logging.getLogger(__name__)

MSG_ACCESS_TOKEN_EXISTS = "Access Token existiert bereits"
MSG_RUNNER_EXISTS = "Startnummer existiert bereits"
MSG_RUNNER_NOT_FOUND = "Läufer nicht gefunden"


@dataclass
class APIError(Exception):
    """An error the API turns into a status code and an optional message body."""

    status_code: int
    message: Optional[str] = None


def error_response(*, status_code: int, message: Optional[str] = None) -> Response:
    if message is None:
        return Response(status_code=status_code)
    return JSONResponse(status_code=status_code, content={"message": message})


async def api_error_handler(_req: Request, exc: APIError) -> Response:
    return error_response(status_code=exc.status_code, message=exc.message)


async def store_error_handler(req: Request, exc: SQLAlchemyError) -> Response:
    # Body withheld; details only go to the server log.
    logger.error("store error on %s %s", req.method, req.url.path, exc_info=exc)
    return error_response(status_code=500)
