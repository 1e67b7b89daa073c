# portal_core/common/middleware.py
from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar

from django.utils.deprecation import MiddlewareMixin

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")

REQUEST_ID_META_KEY = "HTTP_X_REQUEST_ID"
REQUEST_ID_HEADER = "X-Request-Id"


class RequestIdFilter(logging.Filter):
    """
    Adds `request_id` to every log record so the formatter can print it.
    Attach via LOGGING["filters"].
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get()
        return True


class RequestIdMiddleware(MiddlewareMixin):
    """
    Binds a request id to the request and to the logging context.

    - Reuses the inbound X-Request-Id header when present.
    - Otherwise generates one.
    - Echoes it back on the response.
    """

    def process_request(self, request):
        rid = (request.META.get(REQUEST_ID_META_KEY) or "").strip()[:64] or uuid.uuid4().hex
        request.request_id = rid
        request._request_id_token = request_id_ctx.set(rid)
        return None

    def process_response(self, request, response):
        rid = getattr(request, "request_id", None)
        if rid:
            response[REQUEST_ID_HEADER] = rid

        token = getattr(request, "_request_id_token", None)
        if token is not None:
            request_id_ctx.reset(token)
        return response
