"""
Task — Unit of per-scope work

- Task: a callable plus its arguments, limits and identity
- TaskResult: outcome of running a task (never an exception)

Design principles:
- Tasks are immutable after creation
- A failing task yields a FAILED result instead of raising
- Results are plain data so they can be logged
"""

import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

import xxhash

_task_counter = itertools.count()


class TaskStatus(Enum):
    """Task lifecycle states."""
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Task:
    """
    Unit of work for the IOPool.

    Immutable after creation. Carries all context needed for execution.
    """
    # Identity
    id: str = field(default_factory=lambda: _generate_task_id())

    # Execution
    fn: Callable = field(default=None)
    args: tuple = field(default_factory=tuple)
    kwargs: Dict[str, Any] = field(default_factory=dict)

    # Limits
    timeout: float = 60.0  # seconds

    # Rate limiting (only applies to reviewer calls)
    is_llm_call: bool = False

    # Metadata (for logging)
    name: str = ""
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Task):
            return self.id == other.id
        return False


@dataclass
class TaskResult:
    """Outcome of task execution."""
    task_id: str
    status: TaskStatus
    result: Any = None
    error: Optional[str] = None

    # Timing
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    duration_ms: Optional[float] = None

    @property
    def success(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def failed(self) -> bool:
        return self.status == TaskStatus.FAILED


def _generate_task_id() -> str:
    """Unique task id: xxhash of timestamp + process-wide counter."""
    seed = f"{datetime.now(timezone.utc).isoformat()}:{next(_task_counter)}"
    return xxhash.xxh64(seed.encode()).hexdigest()[:12]


def io_task(
    fn: Callable,
    args: tuple = (),
    kwargs: Dict[str, Any] = None,
    name: str = "",
    timeout: float = 60.0,
    is_llm_call: bool = False
) -> Task:
    """
    Create an I/O-bound task (reviewer call, file, network).

    Args:
        fn: Function to execute
        args: Positional arguments tuple for fn
        kwargs: Keyword arguments dict for fn
        name: Optional task name for logging
        timeout: Rate-limiter acquire timeout in seconds (default: 60)
        is_llm_call: If True, rate limiter is applied (default: False)

    Example:
        task = io_task(fn=process_scope, args=(scope,), is_llm_call=True)
    """
    return Task(
        fn=fn,
        args=args,
        kwargs=kwargs or {},
        name=name,
        timeout=timeout,
        is_llm_call=is_llm_call
    )
