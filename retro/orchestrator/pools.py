"""
IOPool — Bounded execution pool for reviewer calls

- IOPool: ThreadPoolExecutor for I/O-bound work (reviewer calls)
- RateLimiter: caps concurrent reviewer calls and their request rate

Design principles:
- ThreadPool for I/O (GIL doesn't block network waits)
- Rate limiting for external APIs (reviewer rate limits)
- Sequential execution when parallelism is disabled
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from datetime import datetime, timezone
from typing import List, Optional, Set

from .config import OrchestratorConfig
from .task import Task, TaskResult, TaskStatus

logger = logging.getLogger(__name__)



class RateLimiter:
    """
    Concurrency cap plus minimum spacing between reviewer requests.

    A semaphore bounds calls in flight; a shared timestamp spaces their
    starts at least 1/rate_limit seconds apart.
    """

    def __init__(self, max_concurrent: int = 3, rate_limit: float = 10.0):
        """
        Args:
            max_concurrent: Maximum concurrent requests
            rate_limit: Maximum requests per second
        """
        self._semaphore = threading.Semaphore(max_concurrent)
        self._min_interval = 1.0 / rate_limit
        self._last_request = 0.0
        self._lock = threading.Lock()

    def acquire(self, timeout: Optional[float] = None) -> bool:
        """
        Acquire permission to make a request.

        Blocks until permission granted or timeout.
        Returns True if acquired, False on timeout.
        """
        if not self._semaphore.acquire(timeout=timeout):
            return False

        with self._lock:
            elapsed = time.monotonic() - self._last_request
            if elapsed < self._min_interval:
                time.sleep(self._min_interval - elapsed)
            self._last_request = time.monotonic()

        return True

    def release(self) -> None:
        """Release permission after request completes."""
        self._semaphore.release()


class IOPool:
    """
    ThreadPool for reviewer calls and other I/O-bound work.

    Tasks never raise out of the pool: exceptions become FAILED results.
    With `enabled=False` tasks run inline on the caller's thread.
    """

    def __init__(self, config: OrchestratorConfig):
        self._config = config
        self._executor = ThreadPoolExecutor(
            max_workers=config.io_workers,
            thread_name_prefix="retro-io-"
        ) if config.enabled else None
        self._rate_limiter = RateLimiter(
            max_concurrent=config.llm_concurrent,
            rate_limit=config.llm_rate_limit
        )
        self._in_flight: Set[Future] = set()
        self._lock = threading.Lock()
        self._shutdown = False

    @property
    def config(self) -> OrchestratorConfig:
        return self._config

    def submit(self, task: Task) -> Future:
        """
        Submit a task for execution.

        Returns a Future resolving to a TaskResult.

        Raises:
            RuntimeError: If the pool is shut down
        """
        if self._shutdown:
            raise RuntimeError("Pool is shut down")

        if self._executor is None:
            future: Future = Future()
            future.set_result(self._execute_task(task))
            return future

        future = self._executor.submit(self._execute_task, task)
        with self._lock:
            self._in_flight.add(future)
        future.add_done_callback(self._discard)
        return future

    def run_all(self, tasks: List[Task]) -> List[TaskResult]:
        """Submit tasks and wait for all of them; results in task order."""
        futures = [self.submit(task) for task in tasks]
        return [future.result() for future in futures]

    def in_flight(self) -> int:
        """Number of submitted tasks not yet finished."""
        with self._lock:
            return len(self._in_flight)

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._in_flight.discard(future)

    def _execute_task(self, task: Task) -> TaskResult:
        """Execute a task with optional rate limiting and error handling."""
        started_at = datetime.now(timezone.utc)
        rate_limited = task.is_llm_call

        if rate_limited:
            if not self._rate_limiter.acquire(timeout=task.timeout):
                return TaskResult(
                    task_id=task.id,
                    status=TaskStatus.FAILED,
                    error="Rate limit timeout",
                    started_at=started_at.isoformat()
                )

        try:
            result = task.fn(*task.args, **task.kwargs)
            status, error = TaskStatus.COMPLETED, None
        except Exception as e:
            logger.warning("Task %s failed: %s", task.name or task.id, e)
            result, status, error = None, TaskStatus.FAILED, str(e)
        finally:
            if rate_limited:
                self._rate_limiter.release()

        completed_at = datetime.now(timezone.utc)
        duration_ms = (completed_at - started_at).total_seconds() * 1000
        logger.debug("Task %s %s in %.0f ms", task.name or task.id, status.value, duration_ms)
        return TaskResult(
            task_id=task.id,
            status=status,
            result=result,
            error=error,
            started_at=started_at.isoformat(),
            completed_at=completed_at.isoformat(),
            duration_ms=duration_ms
        )

    def shutdown(self, wait: bool = True) -> bool:
        """
        Refuse new work and stop the workers.

        With wait=True, in-flight tasks get up to shutdown_timeout seconds
        to finish; whatever is still running after that is abandoned and
        queued tasks are cancelled.

        Returns:
            False if tasks were abandoned
        """
        self._shutdown = True
        if self._executor is None:
            return True

        finished = True
        if wait:
            with self._lock:
                pending = list(self._in_flight)
            _, not_done = wait_futures(pending, timeout=self._config.shutdown_timeout)
            if not_done:
                finished = False
                logger.warning(
                    "%d task(s) still running after %.1fs; abandoning them",
                    len(not_done), self._config.shutdown_timeout,
                )

        self._executor.shutdown(wait=False, cancel_futures=True)
        return finished
