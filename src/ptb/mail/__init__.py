"""Email log storage and delivery status tracking."""

from .log_store import EmailLogStore
from .tracking import MAIL_JOB_NAME, build_mail_job, register_mail_tracking

__all__ = ["MAIL_JOB_NAME", "EmailLogStore", "build_mail_job", "register_mail_tracking"]
