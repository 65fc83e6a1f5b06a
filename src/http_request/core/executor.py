# src/http_request/core/executor.py
"""
Worker pools for asynchronous sends.

Each Request can be given its own RequestExecutor. Requests without one
share a process-wide executor that is created on first use and shut down
at interpreter exit (or explicitly via shutdown_default_executor()).
"""
import atexit
import sys
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

# ThreadPoolExecutor starts a new thread only when no worker is idle, so
# this limit makes the pool grow with the number of in-flight sends
UNBOUNDED = sys.maxsize


class RequestExecutor:
    """
    Thread pool running blocking sends off the caller's thread.

    Example:
        >>> with RequestExecutor(max_workers=8) as executor:
        ...     Request(url).send(on_result, executor=executor)
    """

    def __init__(self, max_workers: Optional[int] = None, thread_name_prefix: str = "http-request"):
        """
        Args:
            max_workers: Maximum number of worker threads, None for no limit
            thread_name_prefix: Prefix for worker thread names
        """
        if max_workers is not None and max_workers <= 0:
            raise ValueError("max_workers must be positive")
        self.max_workers = max_workers
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers if max_workers is not None else UNBOUNDED,
            thread_name_prefix=thread_name_prefix,
        )
        self._shutdown = False

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """
        Schedule ``fn`` on a worker thread.

        Raises:
            RuntimeError: The executor was shut down
        """
        return self._pool.submit(fn, *args, **kwargs)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work. Safe to call multiple times."""
        if not self._shutdown:
            self._shutdown = True
            self._pool.shutdown(wait=wait)

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
        return False


_default_executor: Optional[RequestExecutor] = None
_default_lock = threading.Lock()


def get_default_executor() -> RequestExecutor:
    """
    Shared unbounded executor, created lazily and recreated if it was shut down.

    Thread-safe.
    """
    global _default_executor
    with _default_lock:
        if _default_executor is None or _default_executor.is_shutdown:
            _default_executor = RequestExecutor()
        return _default_executor


def shutdown_default_executor(wait: bool = True) -> None:
    """Shut down the shared executor if it was ever created."""
    global _default_executor
    with _default_lock:
        executor, _default_executor = _default_executor, None
    if executor is not None:
        executor.shutdown(wait=wait)


atexit.register(shutdown_default_executor)
