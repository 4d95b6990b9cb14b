"""
Logging filter that stamps every record with the current request ID.
"""
import logging
from threading import local

_thread_locals = local()

NO_REQUEST_ID = 'no-request-id'


def set_correlation_id(correlation_id):
    _thread_locals.correlation_id = correlation_id


def get_correlation_id():
    return getattr(_thread_locals, 'correlation_id', None)


def clear_correlation_id():
    _thread_locals.correlation_id = None


class CorrelationIDFilter(logging.Filter):
    """
    Adds `correlation_id` to log records so formatters can reference it.

    Records emitted outside a request (management commands, startup)
    carry `no-request-id`.
    """

    def filter(self, record):
        if not getattr(record, 'correlation_id', None):
            record.correlation_id = get_correlation_id() or NO_REQUEST_ID
        return True
