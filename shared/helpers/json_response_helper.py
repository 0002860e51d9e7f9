from fastapi import HTTPException, status

from shared.utils.app_status_code import AppStatusCode
from shared.core.schemas import JsonOutResult


def error_response(message: str, status_code: str = AppStatusCode.OPERATION_FAILED,
                   http_status: int = status.HTTP_400_BAD_REQUEST):
    """Abort the request with a Failure envelope; used by the auth dependencies."""
    raise HTTPException(
        status_code=http_status,
        detail=JsonOutResult(
            data=None,
            status="Failure",
            status_code=status_code,
            message=message
        ).model_dump()
    )
