"""
Request-scoped middleware: correlation IDs and probe handling.

CorrelationIDMiddleware
    Reads X-Request-ID (or generates one), exposes it on the request,
    stores it thread-locally for the logging filter and echoes it back.
    Client-supplied IDs that are too long or contain unexpected characters
    are replaced so they cannot pollute log lines.

ProbeNoRedirectMiddleware
    Marks /healthz and /readyz as secure so SECURE_SSL_REDIRECT never
    answers an in-cluster HTTP probe with a 301. Must run before
    SecurityMiddleware.
"""
import re
import uuid

from .logging_filter import set_correlation_id, clear_correlation_id

REQUEST_ID_HEADER = 'HTTP_X_REQUEST_ID'
_VALID_REQUEST_ID = re.compile(r'^[A-Za-z0-9._-]{1,64}$')

PROBE_PATHS = ('/healthz', '/readyz')


def _request_id_from(request):
    candidate = request.META.get(REQUEST_ID_HEADER, '')
    if candidate and _VALID_REQUEST_ID.match(candidate):
        return candidate
    return str(uuid.uuid4())


class CorrelationIDMiddleware:

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.correlation_id = _request_id_from(request)
        set_correlation_id(request.correlation_id)
        try:
            response = self.get_response(request)
            response['X-Request-ID'] = request.correlation_id
            return response
        finally:
            clear_correlation_id()


class ProbeNoRedirectMiddleware:

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path in PROBE_PATHS:
            request.META['HTTP_X_FORWARDED_PROTO'] = 'https'
        return self.get_response(request)
