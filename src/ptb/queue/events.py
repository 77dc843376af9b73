"""In-process queue worker events.

Listeners register for ``after`` (job processed) and ``failing`` (job
raised) and are called synchronously by ``QueueEvents.work``.
"""

import json
import logging
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class Job:
    """A queued job: its handler name and a JSON payload."""

    name: str
    raw_body: str = "{}"
    uuid: str = field(default_factory=lambda: uuid.uuid4().hex)

    def resolve_name(self) -> str:
        return self.name

    def payload(self) -> dict[str, Any]:
        """Decode the raw JSON body."""
        return json.loads(self.raw_body)


@dataclass
class JobProcessed:
    """Fired after a job handler returned normally."""

    job: Job


@dataclass
class JobFailed:
    """Fired after a job handler raised."""

    job: Job
    exception: BaseException


class QueueEvents:
    """Thread-safe registry of queue listeners and a synchronous worker."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._after: list[Callable[[JobProcessed], None]] = []
        self._failing: list[Callable[[JobFailed], None]] = []

    def after(self, listener: Callable[[JobProcessed], None]) -> None:
        """Register a listener for processed jobs."""
        with self._lock:
            self._after.append(listener)

    def failing(self, listener: Callable[[JobFailed], None]) -> None:
        """Register a listener for failed jobs."""
        with self._lock:
            self._failing.append(listener)

    def _fire(self, listeners: list[Callable[[Any], None]], event: Any) -> None:
        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error(
                    f"Queue listener {getattr(listener, '__name__', listener)} "
                    f"failed for job {event.job.uuid}: {e}"
                )

    def work(self, job: Job, handler: Callable[[Job], Any]) -> bool:
        """Run ``handler`` for ``job`` and notify listeners.

        Returns:
            True if the handler succeeded, False if it raised.
        """
        with self._lock:
            after = list(self._after)
            failing = list(self._failing)

        try:
            handler(job)
        except Exception as e:
            logger.warning(f"Job {job.resolve_name()} ({job.uuid}) failed: {e}")
            self._fire(failing, JobFailed(job=job, exception=e))
            return False

        self._fire(after, JobProcessed(job=job))
        return True

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._after) + len(self._failing)
