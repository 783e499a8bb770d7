# File: academy/core/errors.py
import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class FunctionCallError(Exception):
    """
    Failure of one of the AI function endpoints. Rendered as ``{"error": ...}``
    (plus ``"success": false`` when ``with_success_flag``) with HTTP 500.
    """

    def __init__(self, message: str, *, with_success_flag: bool = False):
        super().__init__(message)
        self.message = message
        self.with_success_flag = with_success_flag


async def function_call_error_handler(request: Request, exc: FunctionCallError) -> JSONResponse:
    logger.error("Error in %s: %s", request.url.path, exc.message)
    body = {"success": False, "error": exc.message} if exc.with_success_flag else {"error": exc.message}
    return JSONResponse(status_code=500, content=body)
