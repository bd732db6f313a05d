"""Tests for the concurrency limiter."""

import threading
import time

import pytest

from spaces_tools.concurrency import CallLimiter, default_limiter
from spaces_tools.core.exceptions import ValidationError
from spaces_tools.schemas import ListOptions


class TestCallLimiter:
    """Test the in-flight cap and nested calls."""

    def test_caps_in_flight_calls(self):
        """Test no more than max_concurrency calls run at once."""
        limiter = CallLimiter(2)
        lock = threading.Lock()
        state = {"running": 0, "peak": 0}

        def work():
            with lock:
                state["running"] += 1
                state["peak"] = max(state["peak"], state["running"])
            time.sleep(0.05)
            with lock:
                state["running"] -= 1

        threads = [threading.Thread(target=limiter.run, args=(work,)) for _ in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert state["peak"] == 2
        assert limiter.active == 0

    def test_nested_calls_do_not_deadlock(self):
        """Test a limited call can run another limited call with one slot."""
        limiter = CallLimiter(1)

        def inner():
            return limiter.active

        def outer():
            return limiter.run(inner)

        assert limiter.run(outer) == 1
        assert limiter.active == 0

    def test_slot_released_on_error(self):
        """Test a failing call frees its slot."""
        limiter = CallLimiter(1)

        def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            limiter.run(boom)

        assert limiter.run(lambda: "ok") == "ok"

    def test_rejects_zero(self):
        """Test the limit must allow at least one call."""
        with pytest.raises(ValidationError):
            CallLimiter(0)

    def test_default_limiter_is_shared(self):
        """Test the process-wide limiter is a singleton."""
        assert default_limiter() is default_limiter()


class TestManagerLimiting:
    """Test manager operations go through the limiter."""

    def test_operation_holds_one_slot(self, stub_manager, stub_client):
        """Test a nested operation runs on the caller's slot."""
        seen = []

        def list_page(**kwargs):
            seen.append(stub_manager.limiter.active)
            return {"Contents": [{"Key": "p/a"}], "IsTruncated": False}

        stub_client.list_objects_v2.side_effect = list_page

        stub_manager.move_object("p/", "q/", ListOptions(recursive=True))

        assert seen == [1]
        assert stub_manager.limiter.active == 0
