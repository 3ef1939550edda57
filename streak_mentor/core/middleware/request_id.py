import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware

from streak_mentor.core.logging import log_event, request_id_ctx_var

REQUEST_ID_HEADER = "x-request-id"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request_id for the duration of a request and echo it back."""

    def __init__(self, app, header_name: str = REQUEST_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request, call_next):
        rid = request.headers.get(self.header_name) or uuid4().hex
        request.state.request_id = rid
        token = request_id_ctx_var.set(rid)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[self.header_name] = rid
            log_event(
                "info",
                f"{request.method} {request.url.path}",
                event_type="request.complete",
                extra={
                    "status": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                },
            )
            return response
        finally:
            request_id_ctx_var.reset(token)
