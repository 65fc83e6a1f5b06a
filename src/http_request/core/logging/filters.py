"""
Log filters that attach request context to records.
"""

import logging
import threading
from typing import Dict, Any, Optional


# Request id of the request currently executing on this thread
_request_id_storage = threading.local()


def set_request_id(request_id: str) -> None:
    """Set request id for the current thread."""
    _request_id_storage.value = request_id


def get_request_id() -> Optional[str]:
    """
    Get request id for the current thread.

    Example:
        >>> set_request_id("req-1")
        >>> get_request_id()
        'req-1'
    """
    return getattr(_request_id_storage, 'value', None)


def clear_request_id() -> None:
    """Clear request id for the current thread."""
    if hasattr(_request_id_storage, 'value'):
        delattr(_request_id_storage, 'value')


class RequestIdFilter(logging.Filter):
    """
    Adds ``request_id`` from thread-local storage to every record.

    Async sends run on worker threads, so the id is set by the worker
    itself around the round trip.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = get_request_id()
        if request_id and not hasattr(record, "request_id"):
            record.request_id = request_id
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Adds static fields (service, environment, ...) to all records.

    Fields already present on the record win.
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = extra_fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
