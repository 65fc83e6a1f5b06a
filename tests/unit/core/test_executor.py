"""
Tests for RequestExecutor and the shared default executor.
"""

import threading

import pytest

from http_request.core.executor import (
    RequestExecutor,
    get_default_executor,
    shutdown_default_executor,
)


class TestRequestExecutor:

    def test_submit_runs_on_worker(self):
        with RequestExecutor(max_workers=2, thread_name_prefix="worker") as executor:
            future = executor.submit(lambda: threading.current_thread().name)
            assert future.result(timeout=5).startswith("worker")

    def test_shutdown_idempotent(self):
        executor = RequestExecutor(max_workers=1)
        executor.shutdown()
        executor.shutdown()
        assert executor.is_shutdown

    def test_submit_after_shutdown(self):
        executor = RequestExecutor(max_workers=1)
        executor.shutdown()
        with pytest.raises(RuntimeError):
            executor.submit(lambda: None)

    def test_invalid_max_workers(self):
        with pytest.raises(ValueError):
            RequestExecutor(max_workers=0)


class TestDefaultExecutor:

    def test_shared_instance(self):
        assert get_default_executor() is get_default_executor()

    def test_recreated_after_shutdown(self):
        first = get_default_executor()
        shutdown_default_executor()

        second = get_default_executor()

        assert first.is_shutdown
        assert second is not first
        assert second.submit(lambda: 42).result(timeout=5) == 42

    def test_shutdown_without_executor(self):
        shutdown_default_executor()
        shutdown_default_executor()

    def test_default_is_unbounded(self):
        executor = get_default_executor()
        assert executor.max_workers is None


class TestUnboundedExecutor:

    def test_tasks_waiting_on_each_other_all_run(self):
        """More blocked tasks than any fixed pool size still make progress."""
        parties = 80
        barrier = threading.Barrier(parties, timeout=10)

        with RequestExecutor() as executor:
            futures = [executor.submit(barrier.wait) for _ in range(parties)]
            results = [future.result(timeout=15) for future in futures]

        assert sorted(results) == list(range(parties))
