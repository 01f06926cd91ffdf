"""
ChangeScheduler — Debounced, per-document analysis scheduling

State machine per document: Idle -> Pending(timer) -> Running -> Idle.

- Every notify() cancels the document's pending timer and starts a new
  one, so a burst of edits yields exactly one pass after the burst ends.
- The pass never runs on the notifying thread.
- A superseded timer callback sees it is no longer the current handle
  and returns without running.
- If a timer fires while a pass for the same document is still running,
  the pass is re-armed for another quiet interval instead of overlapping.

The latest document snapshot wins: the pass analyzes whatever text was
last handed to notify().
"""

import logging
import threading
from typing import Callable, Dict, List, Optional, Set

from ..core.types import Document

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 5.0


class ChangeScheduler:
    """
    Cancel-and-replace timers keyed by document URI.

    Usage:
        scheduler = ChangeScheduler(analyzer.analyze_document, delay=5.0)
        scheduler.notify(document)    # on every edit
        scheduler.shutdown()          # on session end
    """

    def __init__(self, callback: Callable[[Document], object], delay: float = DEFAULT_DEBOUNCE_SECONDS):
        """
        Args:
            callback: Runs one analysis pass for a document snapshot
            delay: Quiet interval in seconds
        """
        self._callback = callback
        self._delay = delay
        self._lock = threading.Lock()
        self._settled = threading.Condition(self._lock)
        self._timers: Dict[str, threading.Timer] = {}
        self._latest: Dict[str, Document] = {}
        self._running: Set[str] = set()
        self._closed = False

    @property
    def delay(self) -> float:
        return self._delay

    def notify(self, document: Document) -> bool:
        """
        Record an edit and (re)start the document's quiet interval.

        Returns:
            False if the scheduler is shut down
        """
        with self._lock:
            if self._closed:
                return False
            self._latest[document.uri] = document
            self._arm(document.uri)
            return True

    def cancel(self, uri: str) -> bool:
        """Drop a pending pass. A running pass is left to finish."""
        with self._lock:
            timer = self._timers.pop(uri, None)
            self._latest.pop(uri, None)
            if timer is None:
                return False
            timer.cancel()
            self._settled.notify_all()
            return True

    def cancel_all(self) -> None:
        with self._lock:
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()
            self._latest.clear()
            self._settled.notify_all()

    def shutdown(self) -> None:
        """Cancel everything and refuse further notifications."""
        with self._lock:
            self._closed = True
        self.cancel_all()

    def pending(self) -> List[str]:
        """URIs with a pass waiting on its quiet interval."""
        with self._lock:
            return list(self._timers.keys())

    def is_pending(self, uri: str) -> bool:
        with self._lock:
            return uri in self._timers

    def is_running(self, uri: str) -> bool:
        with self._lock:
            return uri in self._running

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until nothing is pending or running.

        Returns:
            False if the timeout elapsed first
        """
        with self._settled:
            return self._settled.wait_for(
                lambda: not self._timers and not self._running, timeout=timeout
            )

    def _arm(self, uri: str) -> None:
        # Caller holds the lock
        previous = self._timers.get(uri)
        if previous is not None:
            previous.cancel()

        timer = threading.Timer(self._delay, self._fire, args=(uri,))
        timer.daemon = True
        self._timers[uri] = timer
        timer.start()

    def _fire(self, uri: str) -> None:
        # Runs on the Timer's own thread, so the current thread is the handle
        with self._lock:
            if self._timers.get(uri) is not threading.current_thread():
                return
            del self._timers[uri]

            if self._closed:
                self._settled.notify_all()
                return

            if uri in self._running:
                logger.debug("Pass for %s still running; re-arming", uri)
                self._arm(uri)
                return

            document = self._latest.pop(uri, None)
            if document is None:
                self._settled.notify_all()
                return
            self._running.add(uri)

        try:
            self._callback(document)
        except Exception as e:
            logger.warning("Analysis pass for %s failed: %s", uri, e, exc_info=True)
        finally:
            with self._lock:
                self._running.discard(uri)
                self._settled.notify_all()
