"""
Request ID middleware for FastAPI / Starlette.

Each request gets a correlation id: the incoming `X-Request-ID` header when it
is present and sane, otherwise a fresh UUID4. The id is stored in the logging
contextvar for the duration of the request and echoed on the response.

Register it before the routers:

    app.add_middleware(RequestIDMiddleware)
"""

import re
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from .filters import set_request_id, reset_request_id

REQUEST_ID_HEADER = "X-Request-ID"

# Upstream ids end up verbatim in log lines: no whitespace / newlines, bounded length
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def _pick_request_id(incoming: str | None) -> str:
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        rid = _pick_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            reset_request_id(token)
