"""Handler middleware to extract and validate X-Handler-ID per request."""

import logging
import re

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..api.utils.responses import error_response
from ..core.config import get_settings
from ..domain.value_objects.queue_scope import Actor

logger = logging.getLogger(__name__)

STATE_CHANGING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


class HandlerMiddleware(BaseHTTPMiddleware):
    """Attach the acting handler to ``request.state.handler``.

    The header is trusted as-is; verifying who the handler is belongs to the
    auth layer in front of this service.
    """

    PUBLIC_PATHS = {
        "/",
        "/favicon.ico",
        "/docs",
        "/redoc",
        "/openapi.json",
        "/health",
        "/health/ready",
    }

    def is_public_endpoint(self, path: str) -> bool:
        normalized_path = path.rstrip("/") or "/"
        if normalized_path in self.PUBLIC_PATHS:
            return True
        return path.startswith("/docs/") or path.startswith("/redoc/")

    def _validate_handler_id(self, handler_id: str) -> bool:
        if not handler_id or len(handler_id) > 100:
            return False
        return bool(re.match(r"^[A-Za-z0-9_.@-]+$", handler_id))

    async def dispatch(self, request: Request, call_next):
        if self.is_public_endpoint(request.url.path):
            return await call_next(request)

        settings = get_settings().handler
        handler_id = (request.headers.get("X-Handler-ID") or "").strip()
        handler_name = (request.headers.get("X-Handler-Name") or "").strip()

        if not handler_id:
            if settings.require_header and request.method in STATE_CHANGING_METHODS:
                logger.warning(f"Missing X-Handler-ID on {request.method} {request.url.path}")
                return error_response(
                    request, 401, "UNAUTHORIZED", "X-Handler-ID header is required"
                )
            request.state.handler = Actor(settings.default_id, settings.default_name)
            return await call_next(request)

        if not self._validate_handler_id(handler_id):
            return error_response(
                request,
                400,
                "INVALID_HANDLER_ID",
                "X-Handler-ID must be 1-100 characters of letters, digits, '_', '-', '.', '@'",
                {"handler_id": handler_id[:100]},
            )

        request.state.handler = Actor(handler_id, handler_name or handler_id)
        return await call_next(request)
