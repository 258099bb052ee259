"""
Request correlation middleware.

Generates/propagates X-Request-ID, records HTTP metrics and keeps the
current request's identifiers in thread-local storage for log records.
"""
import logging
import time
import uuid
from threading import local

from django.utils.deprecation import MiddlewareMixin

_request_context = local()

_CONTEXT_ATTRS = ('request_id', 'trace_id', 'user_id', 'user_roles')

logger = logging.getLogger(__name__)


def get_request_id():
    return getattr(_request_context, 'request_id', None)


def get_trace_id():
    return getattr(_request_context, 'trace_id', None)


def get_user_id():
    return getattr(_request_context, 'user_id', None)


def get_user_roles():
    return getattr(_request_context, 'user_roles', [])


def clear_request_context():
    """Clear thread-local request context (useful for testing)."""
    for attr in _CONTEXT_ATTRS:
        if hasattr(_request_context, attr):
            delattr(_request_context, attr)


class RequestCorrelationMiddleware(MiddlewareMixin):
    """
    Middleware to handle request correlation.

    - Generates/propagates X-Request-ID and X-Trace-ID
    - Stores context in thread-local for logging
    - Emits http_requests_total / http_request_duration_seconds
    """

    REQUEST_ID_HEADER = 'HTTP_X_REQUEST_ID'
    TRACE_ID_HEADER = 'HTTP_X_TRACE_ID'

    def process_request(self, request):
        request.request_id = request.META.get(self.REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.trace_id = request.META.get(self.TRACE_ID_HEADER)
        request.start_time = time.time()

        _request_context.request_id = request.request_id
        _request_context.trace_id = request.trace_id

        # Session-authenticated users only; JWT users are resolved later by DRF.
        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated:
            _request_context.user_id = str(user.pk)
            _request_context.user_roles = list(user.groups.values_list('name', flat=True))
        else:
            _request_context.user_id = None
            _request_context.user_roles = []

    def process_response(self, request, response):
        request_id = getattr(request, 'request_id', None)
        if request_id:
            response['X-Request-ID'] = request_id

        trace_id = getattr(request, 'trace_id', None)
        if trace_id:
            response['X-Trace-ID'] = trace_id

        start_time = getattr(request, 'start_time', None)
        if start_time is not None:
            from .metrics import metrics

            duration = time.time() - start_time
            metrics.http_requests_total.labels(
                path=request.path, method=request.method, status=response.status_code
            ).inc()
            metrics.http_request_duration_seconds.labels(
                path=request.path, method=request.method
            ).observe(duration)

            logger.info(
                'Request completed',
                extra={
                    'event': 'http_request_completed',
                    'path': request.path,
                    'method': request.method,
                    'status_code': response.status_code,
                    'duration_ms': round(duration * 1000, 2),
                }
            )

        clear_request_context()
        return response

    def process_exception(self, request, exception):
        from .metrics import metrics

        metrics.exceptions_total.labels(
            exception_type=exception.__class__.__name__,
            location=request.path
        ).inc()
        logger.error(
            f'Request failed: {exception.__class__.__name__}',
            exc_info=True,
            extra={
                'event': 'http_request_exception',
                'path': request.path,
                'method': request.method,
                'exception_type': exception.__class__.__name__,
            }
        )
