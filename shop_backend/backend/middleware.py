# backend/middleware.py
"""
PATH: backend/middleware.py

REQUEST ID

Every request gets an id:
- taken from an incoming X-Request-ID header when present (trimmed, capped)
- otherwise a fresh uuid4 hex

The id is:
- stored on request.request_id
- echoed back as the X-Request-ID response header
- available to log records through RequestIdLogFilter (see LOGGING in settings)
"""

from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64

_request_id: ContextVar[str] = ContextVar("request_id", default="-")


def get_request_id() -> str:
    return _request_id.get()


class RequestIdMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
        request_id = incoming[:MAX_REQUEST_ID_LENGTH] or uuid.uuid4().hex

        token = _request_id.set(request_id)
        request.request_id = request_id
        try:
            response = self.get_response(request)
        finally:
            _request_id.reset(token)

        response[REQUEST_ID_HEADER] = request_id
        return response


class RequestIdLogFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = get_request_id()
        return True
