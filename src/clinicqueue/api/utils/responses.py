from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from ..schemas.common import ApiResponse, ErrorResponse


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or ""


def ok(request: Request, data: Any = None, message: str = "") -> ApiResponse[Any]:
    return ApiResponse(success=True, message=message, request_id=_request_id(request), data=data)


def fail(request: Request, error: str, message: str, details: Optional[dict] = None) -> ErrorResponse:
    return ErrorResponse(
        error=error, message=message, request_id=_request_id(request), details=details or {}
    )


def error_response(
    request: Request, status_code: int, error: str, message: str, details: Optional[dict] = None
) -> JSONResponse:
    """Error envelope as a JSONResponse, for exception handlers."""
    body = fail(request, error, message, details)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
