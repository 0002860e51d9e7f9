import json
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shared.core.schemas import JsonOutResult

ENVELOPE_KEYS = {"status", "status_code", "message"}


class JsonResponseMiddleware(BaseHTTPMiddleware):
    """Wraps every successful JSON body in the JsonOutResult envelope."""

    async def dispatch(self, request: Request, call_next: Callable):
        # Skip docs/openapi endpoints
        if request.url.path.startswith(("/openapi", "/docs", "/redoc")):
            return await call_next(request)

        response = await call_next(request)

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            return response

        body_bytes = b""
        async for chunk in response.body_iterator:
            body_bytes += chunk

        try:
            data = json.loads(body_bytes.decode("utf-8")) if body_bytes else None
        except ValueError:
            data = None

        headers = {k: v for k, v in response.headers.items()
                   if k.lower() != "content-length"}

        # Errors are wrapped by the exception handlers; success bodies may already be wrapped
        already_wrapped = isinstance(data, dict) and ENVELOPE_KEYS.issubset(data.keys())
        if already_wrapped or not (200 <= response.status_code < 400):
            return JSONResponse(content=data, status_code=response.status_code,
                            headers=headers)

        wrapped = JsonOutResult(
            data=data,
            status="Success",
            status_code=str(response.status_code),
            message="Data retrieved successfully"
        ).model_dump()

        return JSONResponse(content=wrapped, status_code=response.status_code,
                            headers=headers)
