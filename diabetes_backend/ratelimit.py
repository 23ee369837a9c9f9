from contextvars import ContextVar

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

DEFAULT_DIAGNOSIS_LIMIT = "30/minute"

limiter = Limiter(key_func=get_remote_address, default_limits=[])

# Limit of the app serving the current request
DIAGNOSIS_LIMIT_CTX_VAR: ContextVar[str] = ContextVar("diagnosis_limit", default=DEFAULT_DIAGNOSIS_LIMIT)


class DiagnosisLimitMiddleware(BaseHTTPMiddleware):
    """Expose the app's ``DIAGNOSIS_RATE_LIMIT`` to the shared limiter for each request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        settings = getattr(request.app.state, "settings", None)
        value = getattr(settings, "DIAGNOSIS_RATE_LIMIT", None) or DEFAULT_DIAGNOSIS_LIMIT
        token = DIAGNOSIS_LIMIT_CTX_VAR.set(value)
        try:
            return await call_next(request)
        finally:
            DIAGNOSIS_LIMIT_CTX_VAR.reset(token)


def diagnosis_limit() -> str:
    return DIAGNOSIS_LIMIT_CTX_VAR.get()
