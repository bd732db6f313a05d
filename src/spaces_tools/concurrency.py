"""Process-wide cap on in-flight storage operations.

Operations are blocking boto3 calls, so callers that want parallelism run
them on worker threads. A :class:`CallLimiter` bounds how many top-level
operations are in flight at once; extra callers block until a slot frees.

Only the outermost call on a thread takes a slot. A limited operation that
calls another limited operation (a folder upload uploading each file) runs
the inner call on the slot it already holds, so nesting cannot exhaust the
limiter and deadlock.
"""

import functools
import threading
from typing import Any, Callable, Optional, TypeVar

from spaces_tools.core import get_logger, get_tracer, settings
from spaces_tools.core.exceptions import ValidationError

logger = get_logger(__name__)
tracer = get_tracer(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class CallLimiter:
    """Bounded semaphore with per-thread reentrancy."""

    def __init__(self, max_concurrency: Optional[int] = None):
        if max_concurrency is None:
            max_concurrency = settings.max_concurrency
        if max_concurrency < 1:
            raise ValidationError(
                f"max_concurrency must be at least 1, got: {max_concurrency}"
            )
        self.max_concurrency = max_concurrency
        self._semaphore = threading.BoundedSemaphore(max_concurrency)
        self._local = threading.local()
        self._lock = threading.Lock()
        self._active = 0

    @property
    def active(self) -> int:
        """Number of top-level operations currently holding a slot."""
        return self._active

    def _depth(self) -> int:
        return getattr(self._local, "depth", 0)

    def run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Call ``fn`` once a slot is free, or straight away if nested."""
        depth = self._depth()
        if depth:
            self._local.depth = depth + 1
            try:
                return fn(*args, **kwargs)
            finally:
                self._local.depth = depth

        self._semaphore.acquire()
        with self._lock:
            self._active += 1
        self._local.depth = 1
        try:
            return fn(*args, **kwargs)
        finally:
            self._local.depth = 0
            with self._lock:
                self._active -= 1
            self._semaphore.release()


_default_limiter: Optional[CallLimiter] = None
_default_lock = threading.Lock()


def default_limiter() -> CallLimiter:
    """Limiter shared by every manager that was not given its own."""
    global _default_limiter
    with _default_lock:
        if _default_limiter is None:
            _default_limiter = CallLimiter(settings.max_concurrency)
        return _default_limiter


def limited(fn: F) -> F:
    """Run a manager method through ``self.limiter`` inside a tracing span."""

    @functools.wraps(fn)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        def call() -> Any:
            with tracer.start_as_current_span(f"spaces.{fn.__name__}"):
                return fn(self, *args, **kwargs)

        return self.limiter.run(call)

    return wrapper  # type: ignore[return-value]
