"""Background job tasks.

This package contains all background job implementations.
Each task module should define async functions that can be
registered in the worker.
"""

from staffdesk.core.jobs.tasks.notifications import send_welcome_notification


__all__ = [
    "send_welcome_notification",
]
