"""Track email delivery status from queue worker events."""

import json
import logging
from datetime import datetime, timezone

from ptb.queue.events import Job, JobFailed, JobProcessed, QueueEvents

from .log_store import EmailLogStore

logger = logging.getLogger(__name__)

MAIL_JOB_NAME = "ptb.mail.Mail"


def build_mail_job(email_log_id: int, job_name: str = MAIL_JOB_NAME) -> Job:
    """Create a queued mail job referencing an email log row."""
    body = {
        "displayName": job_name,
        "data": {"command": {"mailable": {"email_log_id": email_log_id}}},
    }
    return Job(name=job_name, raw_body=json.dumps(body))


def extract_email_log_id(job: Job) -> int | None:
    """Pull the email log id out of a mail job's payload."""
    try:
        payload = job.payload()
        return int(payload["data"]["command"]["mailable"]["email_log_id"])
    except (ValueError, KeyError, TypeError) as e:
        logger.warning(f"Mail job {job.uuid} has no usable email_log_id: {e}")
        return None


def register_mail_tracking(
    events: QueueEvents,
    store: EmailLogStore,
    job_name: str = MAIL_JOB_NAME,
) -> None:
    """Mark email logs sent or failed as mail jobs finish.

    Jobs with any other name are ignored.
    """

    def mark_sent(event: JobProcessed) -> None:
        if event.job.resolve_name() != job_name:
            return
        log_id = extract_email_log_id(event.job)
        if log_id is None:
            return
        store.update(
            log_id,
            status="sent",
            sent_at=datetime.now(timezone.utc).isoformat(),
        )
        logger.debug(f"Email log {log_id} marked sent")

    def mark_failed(event: JobFailed) -> None:
        if event.job.resolve_name() != job_name:
            return
        log_id = extract_email_log_id(event.job)
        if log_id is None:
            return
        store.update(
            log_id,
            status="failed",
            error=str(event.exception),
            job_uuid=event.job.uuid,
        )
        logger.debug(f"Email log {log_id} marked failed")

    events.after(mark_sent)
    events.failing(mark_failed)
