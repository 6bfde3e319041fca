"""
Logging filter to inject correlation ID into log records.

The correlation ID lives in a ContextVar, so every asyncio task handling a
request sees its own value.
"""
import logging
from contextvars import ContextVar

_correlation_id: ContextVar = ContextVar("correlation_id", default=None)


def set_correlation_id(correlation_id):
    """Store correlation ID for the current context."""
    return _correlation_id.set(correlation_id)


def get_correlation_id():
    """Retrieve correlation ID for the current context."""
    return _correlation_id.get()


def reset_correlation_id(token):
    _correlation_id.reset(token)


class CorrelationIDFilter(logging.Filter):
    """
    Logging filter that adds correlation_id to log records.

    Usage in LOGGING config:
        'filters': {
            'correlation_id': {
                '()': 'apps.backend.gates.logging_filter.CorrelationIDFilter',
            },
        },
    """

    def filter(self, record):
        record.correlation_id = get_correlation_id() or 'no-request-id'
        return True
