import logging

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from shared.core.exceptions import HotelError
from shared.core.schemas import JsonOutResult
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)


def _failure(message: str, status_code: str, http_status: int) -> JSONResponse:
    wrapped = JsonOutResult(
        data=None,
        status="Failure",
        status_code=str(status_code),
        message=message
    ).model_dump()
    return JSONResponse(content=wrapped, status_code=http_status)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())
                            if item not in ("body", "query", "path"))
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Invalid input"


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(HotelError)
    async def hotel_exception_handler(request: Request, exc: HotelError):
        logger.info("%s %s failed: %s", request.method,
                    request.url.path, exc.message)
        return _failure(exc.message, exc.status_code, exc.http_status)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # error_response() puts a ready-made envelope in detail
        if isinstance(exc.detail, dict):
            return _failure(
                exc.detail.get("message", ""),
                exc.detail.get("status_code") or AppStatusCode.OPERATION_FAILED,
                exc.status_code or 400,
            )
        return _failure(str(exc.detail), str(exc.status_code), exc.status_code or 400)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _failure(_validation_message(exc), AppStatusCode.INVALID_INPUT, 422)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s",
                         request.method, request.url.path)
        return _failure("Internal server error", AppStatusCode.OPERATION_FAILED, 500)
