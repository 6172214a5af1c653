"""
Trace middleware.

Attaches a trace ID to every request and exposes it to log records, so the
tenant context decisions of one request can be correlated in the logs.
"""
import logging
import uuid
from contextvars import ContextVar

logger = logging.getLogger(__name__)

current_trace_id: ContextVar[str] = ContextVar('current_trace_id', default='-')


class TraceIdFilter(logging.Filter):
    """Logging filter adding ``trace_id`` to every record."""

    def filter(self, record):
        record.trace_id = current_trace_id.get()
        return True


class TraceMiddleware:
    """
    Use the X-Trace-Id header if present, otherwise generate one. The ID is
    set on ``request.trace_id``, the log context and the response headers.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        trace_id = request.headers.get('X-Trace-Id') or str(uuid.uuid4())
        request.trace_id = trace_id
        token = current_trace_id.set(trace_id)

        try:
            response = self.get_response(request)
        finally:
            current_trace_id.reset(token)

        response['X-Trace-Id'] = trace_id
        return response
