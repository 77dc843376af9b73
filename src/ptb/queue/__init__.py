"""Queue worker events."""

from .events import Job, JobFailed, JobProcessed, QueueEvents

__all__ = ["Job", "JobFailed", "JobProcessed", "QueueEvents"]
