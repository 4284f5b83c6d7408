"""
Request context middleware.

- Accepts X-Request-ID from the client or generates one
- Stores it in request.state.trace_id for error payloads
- Echoes it in the response header and optionally logs the request
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def trace_id_of(request: Request) -> str:
    """Trace id of the current request, minted on first use if missing"""
    trace_id = getattr(request.state, "trace_id", None)
    if trace_id is None:
        trace_id = str(uuid.uuid4())
        request.state.trace_id = trace_id
    return trace_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, log_requests: bool = True):
        super().__init__(app)
        self.log_requests = log_requests

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER)
        request.state.trace_id = incoming if incoming else str(uuid.uuid4())

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers[REQUEST_ID_HEADER] = request.state.trace_id

        if self.log_requests:
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({duration_ms:.1f} ms) [{request.state.trace_id}]"
            )
        return response
